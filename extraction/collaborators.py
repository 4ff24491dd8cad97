from typing import Optional, Protocol

from models import LayoutAnalysis
from models.base import BaseGolfModel
from extraction.candidate import HandwritingRead, HandwritingRequest, StructureCandidate
from extraction.grid import TextGrid


class ScorecardImage(BaseGolfModel):
    """The photographed card, already loaded. Each strategy receives its own copy."""
    data: bytes
    mime_type: str
    user_context: Optional[str] = None


class DocumentStructureReader(Protocol):
    """Reads the card as a table of text cells plus free text lines.

    Implementations should return the largest table when a document has several.
    """

    async def read_grid(self, image: ScorecardImage) -> TextGrid:
        ...


class HandwritingReader(Protocol):
    """Re-reads handwritten score cells for the named players.

    Tokens are returned exactly as written ("5", "+1", "E"); conversion to
    strokes is left to the caller.
    """

    async def read_scores(
        self, image: ScorecardImage, request: HandwritingRequest,
    ) -> HandwritingRead:
        ...


class VisionScorecardReader(Protocol):
    """Reads the whole card (holes, pars and player tokens) in one pass."""

    async def read_scorecard(
        self, image: ScorecardImage, layout: LayoutAnalysis,
    ) -> StructureCandidate:
        ...


class LayoutClassifier(Protocol):
    """Cheap coarse read of the card's shape."""

    async def classify(self, image: ScorecardImage) -> LayoutAnalysis:
        ...


class NullLayoutClassifier:
    """Placeholder that always reports the default layout."""

    async def classify(self, image: ScorecardImage) -> LayoutAnalysis:
        return LayoutAnalysis.default()
