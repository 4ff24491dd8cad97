import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Union

from google import genai
from pydantic import Field

from models import ExtractedScorecard, LayoutAnalysis
from models.base import BaseGolfModel
from extraction.collaborators import ScorecardImage
from extraction.config import ReconcileSettings
from extraction.runner import RunOutcome, StrategyRunner
from extraction.strategies import (
    HandwritingOnlyStrategy,
    StructureOnlyStrategy,
    StructureWithHandwritingStrategy,
)
from llm.gemini_readers import (
    GeminiDocumentReader,
    GeminiHandwritingReader,
    GeminiLayoutClassifier,
    GeminiVisionReader,
    _create_client,
)

logger = logging.getLogger(__name__)


# --- Configuration ---

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".pdf": "application/pdf",
}

_HEIC_BRANDS = (b"heic", b"heix", b"hevc", b"mif1")


# --- File Loading ---

def _get_mime_type(file_path: Path) -> str:
    suffix = file_path.suffix.lower()
    if suffix not in MIME_TYPES:
        raise ValueError(
            f"Unsupported file type: {suffix}. "
            f"Supported: {', '.join(sorted(MIME_TYPES.keys()))}"
        )
    return MIME_TYPES[suffix]


def _sniff_mime_type(data: bytes) -> str:
    """MIME type from the leading magic bytes of an uploaded image."""
    if data[:3] == b"\xff\xd8\xff":
        return "image/jpeg"
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:4] == b"%PDF":
        return "application/pdf"
    if data[4:8] == b"ftyp" and data[8:12] in _HEIC_BRANDS:
        return "image/heic"
    raise ValueError(
        "Unsupported file type: could not recognise image data. "
        f"Supported: {', '.join(sorted(set(MIME_TYPES.values())))}"
    )


def load_image(
    source: Union[str, Path, bytes], user_context: Optional[str] = None,
) -> ScorecardImage:
    if isinstance(source, bytes):
        return ScorecardImage(
            data=source, mime_type=_sniff_mime_type(source), user_context=user_context,
        )
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    mime_type = _get_mime_type(path)
    with open(path, "rb") as f:
        data = f.read()
    return ScorecardImage(data=data, mime_type=mime_type, user_context=user_context)


# --- Result ---

class StrategySummary(BaseGolfModel):
    strategy_id: str
    validation_score: Optional[float] = None
    base_confidence: Optional[float] = None
    penalties: List[str] = Field(default_factory=list)
    error: Optional[str] = None


class ExtractionResult(BaseGolfModel):
    """Complete result of a scorecard extraction."""
    scorecard: ExtractedScorecard
    strategy_id: str
    validation_score: float
    penalties: List[str] = Field(default_factory=list)
    layout: LayoutAnalysis
    strategies: List[StrategySummary] = Field(default_factory=list)

    @property
    def needs_review(self) -> bool:
        return self.scorecard.notation_needs_review

    @classmethod
    def from_outcome(cls, outcome: RunOutcome) -> "ExtractionResult":
        summaries = [
            StrategySummary(
                strategy_id=r.strategy_id,
                validation_score=r.validation_score,
                base_confidence=r.base_confidence,
                penalties=r.penalties,
            )
            for r in outcome.results
        ]
        summaries.extend(
            StrategySummary(strategy_id=strategy_id, error=error)
            for strategy_id, error in outcome.failures.items()
        )
        best = outcome.best
        return cls(
            scorecard=best.scorecard,
            strategy_id=best.strategy_id,
            validation_score=best.validation_score,
            penalties=best.penalties,
            layout=outcome.layout,
            strategies=summaries,
        )


# --- Orchestration ---

def build_runner(
    client: genai.Client,
    settings: ReconcileSettings,
    user_context: Optional[str] = None,
) -> StrategyRunner:
    """Wire the Gemini collaborators into the three strategies."""
    document_reader = GeminiDocumentReader(client)
    handwriting_reader = GeminiHandwritingReader(client, user_context=user_context)
    vision_reader = GeminiVisionReader(client, user_context=user_context)
    strategies = [
        HandwritingOnlyStrategy(vision_reader, settings),
        StructureOnlyStrategy(document_reader, settings),
        StructureWithHandwritingStrategy(document_reader, handwriting_reader, settings),
    ]
    return StrategyRunner(strategies, GeminiLayoutClassifier(client), settings)


# --- Public API ---

async def extract_scorecard_async(
    source: Union[str, Path, bytes],
    *,
    user_context: Optional[str] = None,
    settings: Optional[ReconcileSettings] = None,
    runner: Optional[StrategyRunner] = None,
) -> ExtractionResult:
    """Async form of extract_scorecard. `runner` replaces the Gemini wiring when given."""
    image = load_image(source, user_context)
    logger.info("Extracting scorecard (%s, %d bytes)", image.mime_type, len(image.data))
    settings = settings or ReconcileSettings.from_env()
    if runner is None:
        runner = build_runner(_create_client(), settings, user_context)
    outcome = await runner.run(image)
    return ExtractionResult.from_outcome(outcome)


def extract_scorecard(
    source: Union[str, Path, bytes],
    *,
    user_context: Optional[str] = None,
    settings: Optional[ReconcileSettings] = None,
) -> ExtractionResult:
    """Extract scorecard data from an image or PDF.

    Args:
        source: Path to a JPG, PNG, PDF, or other supported file, or the raw
            file bytes (type detected from the content).
        user_context: Optional free-text instructions, e.g.:
            - "I write my scores as score to par (+1, -1, E)"
        settings: Reconciliation thresholds. Defaults to ReconcileSettings.from_env().

    Returns:
        ExtractionResult with the selected scorecard and how each strategy fared.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file type is unsupported.
        EnvironmentError: If GOOGLE_API_KEY is not set.
        AllStrategiesFailedError: If no strategy produced a usable scorecard.
        ExtractionTimeoutError: If extraction exceeded settings.timeout_seconds.
    """
    return asyncio.run(extract_scorecard_async(
        source, user_context=user_context, settings=settings,
    ))
