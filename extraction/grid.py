from pydantic import Field
from typing import Iterable, List, Optional, Sequence, Tuple

from models.base import BaseGolfModel

# (row_index, column_index, text), both indices 1-based as document-analysis services report them.
Cell = Tuple[int, int, str]


class TextGrid(BaseGolfModel):
    """A table of recognized text, one string per cell ("" when empty)."""
    rows: List[List[str]] = Field(default_factory=list)
    lines: List[str] = Field(default_factory=list)  # free text outside the table

    @classmethod
    def from_cells(cls, cells: Iterable[Cell], lines: Optional[Sequence[str]] = None) -> "TextGrid":
        """Build a dense grid from sparse cells. Missing cells become ""."""
        by_position = {}
        max_row = max_col = 0
        for row_index, col_index, text in cells:
            if row_index < 1 or col_index < 1:
                continue
            by_position[(row_index, col_index)] = (text or "").strip()
            max_row = max(max_row, row_index)
            max_col = max(max_col, col_index)

        rows = [
            [by_position.get((r, c), "") for c in range(1, max_col + 1)]
            for r in range(1, max_row + 1)
        ]
        return cls(rows=rows, lines=list(lines or []))

    @staticmethod
    def largest(grids: Sequence["TextGrid"]) -> Optional["TextGrid"]:
        """The main scorecard table is the one with the most rows."""
        non_empty = [g for g in grids if g.rows]
        if not non_empty:
            return None
        return max(non_empty, key=lambda g: len(g.rows))

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def cell(self, row: int, col: int) -> str:
        """0-based lookup that tolerates ragged rows."""
        if 0 <= row < len(self.rows) and 0 <= col < len(self.rows[row]):
            return self.rows[row][col].strip()
        return ""

    def label(self, row: int) -> str:
        """First column of a row, where printed scorecards put row labels."""
        return self.cell(row, 0)
