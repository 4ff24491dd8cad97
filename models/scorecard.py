from enum import Enum
from pydantic import Field
from typing import Dict, List, Optional

from .base import BaseGolfModel
from .hole import HoleInfo
from .player import PlayerInfo


class NotationStyle(str, Enum):
    """How scores are written on the card. Decided once for the whole card."""
    GROSS = "gross"        # absolute strokes: 4, 5, 6
    RELATIVE = "relative"  # offset from par: +1, -1, E


class ExtractedScorecard(BaseGolfModel):
    """One reconciled scorecard: the unit every strategy produces."""
    course_name: str = "Unknown Course"
    tee_name: Optional[str] = None
    date: Optional[str] = None
    holes: List[HoleInfo] = Field(default_factory=list)
    players: List[PlayerInfo] = Field(default_factory=list)
    notation_style: Optional[NotationStyle] = None
    # Set when only the low-score heuristic (no +/-/E on the card) chose relative notation.
    notation_needs_review: bool = False

    def get_hole(self, hole_number: int) -> Optional[HoleInfo]:
        for hole in self.holes:
            if hole.hole_number == hole_number:
                return hole
        return None

    def par_by_hole(self) -> Dict[int, int]:
        pars: Dict[int, int] = {}
        for hole in self.holes:
            pars.setdefault(hole.hole_number, hole.par)
        return pars

    def hole_numbers(self) -> List[int]:
        return [h.hole_number for h in self.holes]

    def total_par(self) -> Optional[int]:
        if not self.holes:
            return None
        return sum(h.par for h in self.holes)

    def get_player(self, name: str) -> Optional[PlayerInfo]:
        for player in self.players:
            if player.name.lower() == name.lower():
                return player
        return None
