"""The three independent ways of producing a scorecard from one photo.

Each strategy owns everything it builds; the runner hands each one its own
copy of the image and the layout, and nothing is shared between concurrent runs.
"""

import logging
from abc import ABC, abstractmethod
from typing import ClassVar

from models import ExtractedScorecard, LayoutAnalysis, ScoreSource
from extraction.candidate import HandwritingRequest
from extraction.collaborators import (
    DocumentStructureReader,
    HandwritingReader,
    ScorecardImage,
    VisionScorecardReader,
)
from extraction.config import DEFAULT_SETTINGS, ReconcileSettings
from extraction.merge import merge_handwriting, tag_scores, tag_structural_scores
from extraction.notation import normalize_candidate
from extraction.structure import extract_structure

logger = logging.getLogger(__name__)


class ExtractionStrategy(ABC):
    """Base for strategies. Subclasses set `strategy_id` and implement `run`."""
    strategy_id: ClassVar[str] = ""

    def __init__(self, settings: ReconcileSettings = DEFAULT_SETTINGS):
        self.settings = settings

    @property
    def base_confidence(self) -> float:
        """Fixed prior for this strategy, independent of what it returns."""
        return self.settings.prior_for(self.strategy_id)

    @abstractmethod
    async def run(self, image: ScorecardImage, layout: LayoutAnalysis) -> ExtractedScorecard:
        ...


class HandwritingOnlyStrategy(ExtractionStrategy):
    """One vision read of the whole card: holes, pars and handwritten tokens."""
    strategy_id = "handwriting_only"

    def __init__(self, reader: VisionScorecardReader, settings: ReconcileSettings = DEFAULT_SETTINGS):
        super().__init__(settings)
        self.reader = reader

    async def run(self, image: ScorecardImage, layout: LayoutAnalysis) -> ExtractedScorecard:
        candidate = await self.reader.read_scorecard(image, layout)
        scorecard = normalize_candidate(candidate, self.settings)
        return tag_scores(scorecard, ScoreSource.HANDWRITING)


class StructureOnlyStrategy(ExtractionStrategy):
    """Table-structure read only. Empty cells stay empty."""
    strategy_id = "structure_only"

    def __init__(self, reader: DocumentStructureReader, settings: ReconcileSettings = DEFAULT_SETTINGS):
        super().__init__(settings)
        self.reader = reader

    async def _structural_scorecard(self, image: ScorecardImage) -> ExtractedScorecard:
        grid = await self.reader.read_grid(image)
        candidate = extract_structure(grid, self.settings)
        return normalize_candidate(candidate, self.settings)

    async def run(self, image: ScorecardImage, layout: LayoutAnalysis) -> ExtractedScorecard:
        scorecard = await self._structural_scorecard(image)
        return tag_structural_scores(scorecard)


class StructureWithHandwritingStrategy(StructureOnlyStrategy):
    """Table-structure read, with empty cells filled from a handwriting re-read.

    If the handwriting read fails the structural scorecard is returned as is.
    """
    strategy_id = "structure_with_handwriting"

    def __init__(
        self,
        reader: DocumentStructureReader,
        handwriting_reader: HandwritingReader,
        settings: ReconcileSettings = DEFAULT_SETTINGS,
    ):
        super().__init__(reader, settings)
        self.handwriting_reader = handwriting_reader

    async def run(self, image: ScorecardImage, layout: LayoutAnalysis) -> ExtractedScorecard:
        scorecard = await self._structural_scorecard(image)
        tag_structural_scores(scorecard)

        missing = sum(
            1 for player in scorecard.players for entry in player.scores if entry.score is None
        )
        if not missing:
            logger.info("Structural read is complete, skipping handwriting pass")
            return scorecard

        request = HandwritingRequest(
            hole_count=len(scorecard.holes),
            hole_pars=scorecard.par_by_hole(),
            player_names=[p.name for p in scorecard.players],
        )
        try:
            handwriting = await self.handwriting_reader.read_scores(image, request)
        except Exception as e:
            logger.warning("Handwriting pass failed, keeping structural scores: %s", e)
            return scorecard

        return merge_handwriting(scorecard, handwriting, self.settings)
