from pydantic import Field, computed_field
from typing import List, Optional

from .base import BaseGolfModel
from .hole_score import PlayerHoleScore, ScoreSource


class PlayerInfo(BaseGolfModel):
    """A player row and the scores it owns.

    Out/In/Total are never read from the card; they are derived from the
    hole scores on every access so they cannot drift after an edit.
    """
    name: str
    scores: List[PlayerHoleScore] = Field(default_factory=list)

    def _sum_holes(self, first: int, last: int) -> Optional[int]:
        strokes = [
            s.score for s in self.scores
            if s.score is not None and first <= s.hole_number <= last
        ]
        return sum(strokes) if strokes else None

    @computed_field
    @property
    def front_nine(self) -> Optional[int]:
        """Out: total strokes for holes 1-9."""
        return self._sum_holes(1, 9)

    @computed_field
    @property
    def back_nine(self) -> Optional[int]:
        """In: total strokes for holes 10-18."""
        return self._sum_holes(10, 18)

    @computed_field
    @property
    def total(self) -> Optional[int]:
        front, back = self.front_nine, self.back_nine
        if front is None and back is None:
            return None
        return (front or 0) + (back or 0)

    def get_score(self, hole_number: int) -> Optional[PlayerHoleScore]:
        for entry in self.scores:
            if entry.hole_number == hole_number:
                return entry
        return None

    def scored_holes(self) -> int:
        return sum(1 for s in self.scores if s.score is not None)

    def set_score(self, hole_number: int, score: Optional[int]) -> Optional[str]:
        """Explicit user edit. The only path allowed to overwrite an assigned score.

        Returns a validation message if the value is rejected, None otherwise.
        """
        if score is not None and not 1 <= score <= 15:
            return f"Score {score} outside valid range 1-15"
        entry = self.get_score(hole_number)
        if entry is None:
            entry = PlayerHoleScore(hole_number=hole_number)
            self.scores = sorted(
                self.scores + [entry], key=lambda s: s.hole_number
            )
            entry = self.get_score(hole_number)
        entry.score = score
        entry.source = ScoreSource.MANUAL
        entry.confidence = None
        return None
