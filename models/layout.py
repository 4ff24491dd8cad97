from enum import Enum
from pydantic import Field

from .base import BaseGolfModel


class LayoutType(str, Enum):
    STANDARD_18 = "standard-18"
    STANDARD_9 = "standard-9"
    SPLIT_9_9 = "split-9-9"
    COMPACT = "compact"
    PLAYER_PER_PAGE = "player-per-page"
    UNKNOWN = "unknown"


class LayoutAnalysis(BaseGolfModel):
    """Coarse classification of a scorecard used only to steer extraction."""
    hole_count: int = 9
    layout_type: LayoutType = LayoutType.UNKNOWN
    has_summary_columns: bool = False   # OUT / IN / TOTAL
    has_initial_columns: bool = False   # player initials between holes 9 and 10
    row_oriented: bool = True           # players are rows, not columns
    confidence: float = Field(0.3, ge=0.0, le=1.0)

    @classmethod
    def default(cls) -> "LayoutAnalysis":
        """Assumptions used when the layout could not be classified."""
        return cls(
            hole_count=9,
            layout_type=LayoutType.UNKNOWN,
            has_summary_columns=False,
            has_initial_columns=False,
            row_oriented=True,
            confidence=0.3,
        )
