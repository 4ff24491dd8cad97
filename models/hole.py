from pydantic import Field
from typing import Optional

from .base import BaseGolfModel

MIN_HOLE_NUMBER = 1
MAX_HOLE_NUMBER = 18
MIN_PAR = 3
MAX_PAR = 5


class HoleInfo(BaseGolfModel):
    """A single hole as printed on the scorecard.

    Number and par are unbounded here: candidate scorecards coming
    out of a recognition backend may still contain summary columns ("Out" read
    as hole 10) or a yardage misread as par. Cleanup removes those.
    """
    hole_number: int
    par: int
    yardage: Optional[int] = Field(None, ge=0)
    handicap: Optional[int] = Field(None, ge=1, le=18)

    def has_valid_number(self) -> bool:
        return MIN_HOLE_NUMBER <= self.hole_number <= MAX_HOLE_NUMBER

    def has_valid_par(self) -> bool:
        return MIN_PAR <= self.par <= MAX_PAR
