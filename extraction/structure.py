"""Turn a document-analysis table into a scorecard skeleton.

Pure function of the grid: no recognition backend is involved, so every
heuristic here can be exercised against hand-built grids.

Search order:
1. A hole-number row (1..9 or 1..18) in the first few rows.
2. Failing that, a "Par" row whose cells hold 9 or 18 values of 3-5. This
   rescues photos where the top of the card is cropped or covered.
3. The par row near the hole row, preferring the row just above it.
4. Player rows: anything below the anchor whose label is not metadata and
   whose hole cells hold at least one score.
"""

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from models import HoleInfo
from extraction.candidate import RawPlayerRow, StructureCandidate
from extraction.config import DEFAULT_SETTINGS, ReconcileSettings
from extraction.exceptions import NoPlayerRowsError, StructureNotFoundError
from extraction.grid import TextGrid
from extraction.labels import (
    is_handicap_label,
    is_metadata_label,
    is_par_label,
    is_summary_label,
    is_yardage_label,
    looks_like_initials,
)
from extraction.notation import clean_token, is_score_token

logger = logging.getLogger(__name__)

VALID_HOLE_RUNS = (8, 9, 17, 18)
YARDAGE_MIN = 50
YARDAGE_MAX = 700
_INT_RE = re.compile(r"^\d+$")
_COURSE_NAME_RE = re.compile(r"golf|course|club", re.IGNORECASE)


def _int_cell(text: str) -> Optional[int]:
    text = text.strip()
    return int(text) if _INT_RE.match(text) else None


def find_hole_row(
    grid: TextGrid, settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> Optional[Tuple[int, List[int]]]:
    """Locate the hole-number row. Returns (row_index, hole_columns) or None."""
    for r in range(min(grid.row_count, settings.hole_row_search_depth)):
        candidates: List[Tuple[int, int]] = []
        for c, text in enumerate(grid.rows[r]):
            if is_summary_label(text) or looks_like_initials(text):
                continue
            value = _int_cell(text)
            if value is not None and 1 <= value <= 18:
                candidates.append((value, c))

        if len(candidates) not in VALID_HOLE_RUNS:
            continue
        if [value for value, _ in candidates] != list(range(1, len(candidates) + 1)):
            continue

        columns = [c for _, c in candidates]
        if len(columns) == 18 and columns[9] - columns[8] > 1:
            logger.debug(
                "Columns between hole 9 and 10 skipped: %s",
                grid.rows[r][columns[8] + 1:columns[9]],
            )
        return r, columns
    return None


def find_par_anchor(
    grid: TextGrid, settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> Optional[Tuple[int, List[int]]]:
    """Fallback when no hole row exists: use a par row as the column anchor."""
    for r in range(min(grid.row_count, settings.par_anchor_search_depth)):
        if not is_par_label(grid.label(r)):
            continue
        values = [(c, _int_cell(text)) for c, text in enumerate(grid.rows[r]) if c > 0]
        columns = [c for c, value in values if value is not None and 3 <= value <= 5]
        if len(columns) in VALID_HOLE_RUNS:
            return r, columns
    return None


def find_par_row(
    grid: TextGrid, hole_row: int, settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> Optional[int]:
    """The row just above the hole row wins; otherwise the first match below it."""
    if hole_row > 0 and is_par_label(grid.label(hole_row - 1)):
        return hole_row - 1
    last = min(grid.row_count, hole_row + 1 + settings.par_row_search_after)
    for r in range(hole_row + 1, last):
        if is_par_label(grid.label(r)):
            return r
    return None


def _find_labeled_row(
    grid: TextGrid,
    rows: Iterable[int],
    predicate: Callable[[str], bool],
    exclude: Iterable[Optional[int]] = (),
    row_check: Optional[Callable[[int], bool]] = None,
) -> Optional[int]:
    skip = {r for r in exclude if r is not None}
    for r in rows:
        if r in skip or not 0 <= r < grid.row_count:
            continue
        if predicate(grid.label(r)) and (row_check is None or row_check(r)):
            return r
    return None


def _holds_yardages(grid: TextGrid, row: int, columns: List[int]) -> bool:
    """Most filled hole cells hold a plausible yardage."""
    filled = [grid.cell(row, c) for c in columns if grid.cell(row, c)]
    yardages = [
        v for v in (_int_cell(text) for text in filled)
        if v is not None and YARDAGE_MIN <= v <= YARDAGE_MAX
    ]
    return bool(filled) and len(yardages) * 2 > len(filled)


def _row_values(
    grid: TextGrid, row: Optional[int], columns: List[int], low: int, high: int,
) -> List[Optional[int]]:
    values: List[Optional[int]] = []
    for c in columns:
        value = _int_cell(grid.cell(row, c)) if row is not None else None
        values.append(value if value is not None and low <= value <= high else None)
    return values


def _course_name(grid: TextGrid) -> str:
    for line in grid.lines:
        if _COURSE_NAME_RE.search(line):
            return line.strip()
    return "Unknown Course"


def _player_row(
    grid: TextGrid, row: int, columns: List[int], settings: ReconcileSettings,
) -> Optional[RawPlayerRow]:
    """A RawPlayerRow if the row qualifies as a player, else None."""
    name = grid.label(row)
    if is_metadata_label(name):
        return None

    tokens: Dict[int, Optional[str]] = {
        hole_number: clean_token(grid.cell(row, c))
        for hole_number, c in enumerate(columns, start=1)
    }
    if not any(is_score_token(t) for t in tokens.values()):
        return None

    numbers = [int(t) for t in tokens.values() if t is not None and _INT_RE.match(t)]
    if numbers and all(n > settings.yardage_floor for n in numbers):
        logger.debug("Row %r looks like yardages, skipped", name)
        return None

    return RawPlayerRow(name=name, tokens=tokens)


def extract_structure(
    grid: TextGrid, settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> StructureCandidate:
    """Locate holes, par and player rows in a grid. Tokens are left unconverted.

    Raises:
        StructureNotFoundError: no hole columns by either method.
        NoPlayerRowsError: hole columns found but no player rows qualified.
    """
    hole_match = find_hole_row(grid, settings)
    if hole_match is not None:
        anchor_row, columns = hole_match
        par_row = find_par_row(grid, anchor_row, settings)
        logger.info("Hole row at %d (%d holes), par row %s", anchor_row, len(columns), par_row)
    else:
        par_match = find_par_anchor(grid, settings)
        if par_match is None:
            raise StructureNotFoundError("Could not identify hole numbers in scorecard table")
        anchor_row, columns = par_match
        par_row = anchor_row
        logger.info("No hole row; anchored on par row %d (%d holes)", anchor_row, len(columns))

    nearby = range(max(0, anchor_row - 3), min(grid.row_count, anchor_row + 1 + settings.par_row_search_after))
    handicap_row = _find_labeled_row(grid, nearby, is_handicap_label, exclude=(par_row, anchor_row))
    # A bare tee colour only counts when the cells hold yardages.
    yardage_row = _find_labeled_row(
        grid, nearby, is_yardage_label, exclude=(par_row, anchor_row, handicap_row),
        row_check=lambda r: _holds_yardages(grid, r, columns),
    )

    pars = _row_values(grid, par_row, columns, 3, 5)
    handicaps = _row_values(grid, handicap_row, columns, 1, 18)
    yardages = _row_values(grid, yardage_row, columns, YARDAGE_MIN, YARDAGE_MAX)

    holes = []
    for index, _ in enumerate(columns):
        par = pars[index]
        if par is None:
            logger.warning(
                "No readable par for hole %d, using default %d", index + 1, settings.default_par,
            )
            par = settings.default_par
        holes.append(HoleInfo(
            hole_number=index + 1,
            par=par,
            handicap=handicaps[index],
            yardage=yardages[index],
        ))

    skip_rows = {r for r in (par_row, handicap_row, yardage_row) if r is not None}
    players: List[RawPlayerRow] = []
    for r in range(anchor_row + 1, grid.row_count):
        if r in skip_rows:
            continue
        player = _player_row(grid, r, columns, settings)
        if player is not None:
            players.append(player)

    if not players:
        raise NoPlayerRowsError("Could not extract any player scores from table")

    logger.info("Extracted players: %s", [p.name for p in players])
    return StructureCandidate(
        course_name=_course_name(grid),
        holes=holes,
        players=players,
    )
