from enum import Enum
from typing import Optional

from .base import BaseGolfModel


class ScoreConfidence(str, Enum):
    """How plausible a score is relative to the hole's par."""
    HIGH = "high"      # within 3 of par
    MEDIUM = "medium"  # within 5 of par
    LOW = "low"


class ScoreSource(str, Enum):
    """Which pass produced a score."""
    STRUCTURAL = "structural"    # table-structure read
    HANDWRITING = "handwriting"  # handwriting-focused re-read
    MANUAL = "manual"            # explicit user edit


class PlayerHoleScore(BaseGolfModel):
    """A player's score on one hole. `score` is always gross strokes, or None if unread."""
    hole_number: int
    score: Optional[int] = None
    confidence: Optional[ScoreConfidence] = None
    source: Optional[ScoreSource] = None

    def to_par(self, par: Optional[int]) -> Optional[int]:
        """Score relative to par (+2, -1, etc.)."""
        if self.score is None or par is None:
            return None
        return self.score - par

    def is_scored(self) -> bool:
        return self.score is not None

    @staticmethod
    def confidence_for(score: int, par: int) -> ScoreConfidence:
        """Bucket a score by its distance from par."""
        distance = abs(score - par)
        if distance <= 3:
            return ScoreConfidence.HIGH
        elif distance <= 5:
            return ScoreConfidence.MEDIUM
        return ScoreConfidence.LOW

