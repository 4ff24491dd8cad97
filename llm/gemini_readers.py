import logging
import os
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel

from dotenv import load_dotenv
load_dotenv()

from google import genai
from google.genai import types

from models import HoleInfo, LayoutAnalysis, LayoutType
from extraction.candidate import (
    HandwritingRead,
    HandwritingRequest,
    RawPlayerRow,
    StructureCandidate,
)
from extraction.collaborators import ScorecardImage
from extraction.grid import TextGrid
from extraction.layout import describe_layout
from llm.prompts import (
    build_grid_prompt,
    build_handwriting_prompt,
    build_layout_prompt,
    build_vision_prompt,
    RawDocumentGrid,
    RawHandwritingRead,
    RawLayout,
    RawPlayerScores,
    RawVisionScorecard,
)

logger = logging.getLogger(__name__)


# --- Configuration ---

GEMINI_MODEL = "gemini-3-pro-preview"
GEMINI_MODEL_FAST = "gemini-2.5-flash"

T = TypeVar("T", bound=BaseModel)


# --- API Interaction ---

def _create_client() -> genai.Client:
    api_key = os.environ.get("GOOGLE_API_KEY")
    if not api_key:
        raise EnvironmentError(
            "GOOGLE_API_KEY environment variable is not set. "
            "Get an API key at https://aistudio.google.com/apikey"
        )
    return genai.Client(api_key=api_key)


def _image_part(image: ScorecardImage) -> types.Part:
    return types.Part.from_bytes(data=image.data, mime_type=image.mime_type)


async def _call_gemini(
    client: genai.Client,
    image: ScorecardImage,
    prompt: str,
    response_model: Type[T],
    model: str = GEMINI_MODEL,
) -> T:
    """Generic async Gemini call: send prompt + image, parse into response_model."""
    response = await client.aio.models.generate_content(
        model=model,
        contents=[_image_part(image), prompt],
        config=types.GenerateContentConfig(
            response_mime_type="application/json",
            response_json_schema=response_model.model_json_schema(),
        ),
    )
    return response_model.model_validate_json(response.text)


# --- Transformation: Raw LLM output -> extraction inputs ---

def _token(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _to_text_grid(raw: RawDocumentGrid) -> TextGrid:
    grids = [
        TextGrid.from_cells(
            ((c.row_index, c.column_index, _token(c.text) or "") for c in table.cells),
            raw.lines,
        )
        for table in raw.tables
    ]
    grid = TextGrid.largest(grids)
    if grid is None:
        logger.warning("Document read returned no tables")
        return TextGrid(lines=list(raw.lines))
    return grid


def _to_player_rows(raw_players: List[RawPlayerScores]) -> List[RawPlayerRow]:
    rows = []
    for raw_player in raw_players:
        tokens = {}
        for entry in raw_player.scores:
            tokens.setdefault(entry.hole_number, _token(entry.value))
        rows.append(RawPlayerRow(name=raw_player.name.strip(), tokens=tokens))
    return rows


def _to_candidate(raw: RawVisionScorecard) -> StructureCandidate:
    holes = [
        HoleInfo(
            hole_number=h.hole_number,
            par=h.par,
            handicap=h.handicap if h.handicap is not None and 1 <= h.handicap <= 18 else None,
            yardage=h.yardage if h.yardage is not None and h.yardage >= 0 else None,
        )
        for h in raw.holes
        if h.hole_number is not None and h.par is not None
    ]
    return StructureCandidate(
        course_name=raw.course_name or "Unknown Course",
        tee_name=raw.tee_name,
        date=raw.date,
        holes=holes,
        players=_to_player_rows(raw.players),
    )


def _to_layout(raw: RawLayout) -> LayoutAnalysis:
    try:
        layout_type = LayoutType(raw.layout_type)
    except ValueError:
        layout_type = LayoutType.UNKNOWN
    return LayoutAnalysis(
        hole_count=raw.hole_count or 0,
        layout_type=layout_type,
        has_summary_columns=raw.has_summary_columns,
        has_initial_columns=raw.has_initial_columns,
        row_oriented=raw.row_oriented,
        confidence=raw.confidence,
    )


# --- Collaborators ---

class _GeminiReader:
    def __init__(
        self,
        client: Optional[genai.Client] = None,
        model: str = GEMINI_MODEL,
        user_context: Optional[str] = None,
    ):
        self._client = client
        self.model = model
        self.user_context = user_context

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = _create_client()
        return self._client


class GeminiDocumentReader(_GeminiReader):
    """Table transcription. Plays the role of a document-analysis service."""

    async def read_grid(self, image: ScorecardImage) -> TextGrid:
        raw = await _call_gemini(
            self.client, image, build_grid_prompt(), RawDocumentGrid, model=self.model,
        )
        return _to_text_grid(raw)


class GeminiHandwritingReader(_GeminiReader):

    async def read_scores(
        self, image: ScorecardImage, request: HandwritingRequest,
    ) -> HandwritingRead:
        prompt = build_handwriting_prompt(request, self.user_context or image.user_context)
        raw = await _call_gemini(
            self.client, image, prompt, RawHandwritingRead, model=self.model,
        )
        return HandwritingRead(players=_to_player_rows(raw.players))


class GeminiVisionReader(_GeminiReader):
    """Whole-card read guided by the probed layout."""

    async def read_scorecard(
        self, image: ScorecardImage, layout: LayoutAnalysis,
    ) -> StructureCandidate:
        prompt = build_vision_prompt(
            describe_layout(layout), self.user_context or image.user_context,
        )
        raw = await _call_gemini(
            self.client, image, prompt, RawVisionScorecard, model=self.model,
        )
        return _to_candidate(raw)


class GeminiLayoutClassifier(_GeminiReader):
    """Layout probe on the fast model."""

    def __init__(self, client: Optional[genai.Client] = None, model: str = GEMINI_MODEL_FAST):
        super().__init__(client, model)

    async def classify(self, image: ScorecardImage) -> LayoutAnalysis:
        raw = await _call_gemini(
            self.client, image, build_layout_prompt(), RawLayout, model=self.model,
        )
        return _to_layout(raw)
