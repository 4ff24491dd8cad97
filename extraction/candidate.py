from pydantic import Field
from typing import Dict, List, Optional

from models import HoleInfo
from models.base import BaseGolfModel


class RawPlayerRow(BaseGolfModel):
    """A player's cells exactly as read, keyed by hole number. Not yet converted to strokes."""
    name: str
    tokens: Dict[int, Optional[str]] = Field(default_factory=dict)


class StructureCandidate(BaseGolfModel):
    """Scorecard skeleton before notation conversion."""
    course_name: str = "Unknown Course"
    tee_name: Optional[str] = None
    date: Optional[str] = None
    holes: List[HoleInfo] = Field(default_factory=list)
    players: List[RawPlayerRow] = Field(default_factory=list)

    def all_tokens(self) -> List[Optional[str]]:
        """Every raw score token on the card, across all players."""
        tokens: List[Optional[str]] = []
        for player in self.players:
            tokens.extend(player.tokens.values())
        return tokens


class HandwritingRequest(BaseGolfModel):
    """What a handwriting re-read should look for."""
    hole_count: int = 18
    hole_pars: Dict[int, int] = Field(default_factory=dict)
    player_names: List[str] = Field(default_factory=list)


class HandwritingRead(BaseGolfModel):
    """Raw tokens from a handwriting-focused pass. Converted by the merger."""
    players: List[RawPlayerRow] = Field(default_factory=list)
