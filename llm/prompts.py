from pydantic import BaseModel, Field
from typing import List, Optional, Union

from extraction.candidate import HandwritingRequest


# ================================================================
# Shared prompt fragments
# ================================================================

_PREAMBLE = "You are an expert golf scorecard reader."

_TOKEN_INSTRUCTIONS = """
SCORE TOKENS:
Copy every score cell EXACTLY as written. Do not convert anything.
- Total strokes stay as written: "4", "5", "6".
- Score-to-par stays as written: "+1", "-1", "E", "0".
- Empty or illegible cells are null.
Double-check ambiguous handwritten digits (1/7, 4/9, 5/6, 3/8)."""

_SKIP_INSTRUCTIONS = """
DO NOT extract:
- "OUT", "IN", "TOTAL" columns (these are summary columns, not holes)
- Player initial columns (usually 2-3 letters between holes)
- "PAR", "HANDICAP", yardage and "Pace of Play" rows (these are not players)"""

_JSON_PREAMBLE = """
Return a JSON object with this exact structure. Use null for any value you cannot read.
Do NOT guess values you cannot see -- use null instead."""


def _append_user_context(prompt: str, user_context: Optional[str]) -> str:
    """Append user context to a prompt if provided."""
    if not user_context:
        return prompt
    return prompt + "\nADDITIONAL CONTEXT FROM THE USER:\n" + user_context + "\n"


# ================================================================
# Layout classification (fast model)
# ================================================================

_LAYOUT_JSON_SCHEMA = """{
  "hole_count": 9 or 18,
  "layout_type": "standard-18" | "standard-9" | "split-9-9" | "compact" | "player-per-page",
  "has_summary_columns": true/false,
  "has_initial_columns": true/false,
  "row_oriented": true/false,
  "confidence": 0.0
}"""


def build_layout_prompt() -> str:
    """Cheap structural read: no scores, just the shape of the card."""
    return (
        "Analyze this golf scorecard layout and provide structural information.\n\n"
        "Answer these questions:\n"
        "1. How many holes are on this scorecard? (9 or 18)\n"
        "2. Are the holes in one table or split into two sections (Front 9 / Back 9)?\n"
        '3. Are there "OUT", "IN", or "TOTAL" columns?\n'
        "4. Are there player initial columns between holes (typically between 9 and 10)?\n"
        "5. Are players shown as rows (horizontal) or columns (vertical)?\n"
        "6. Is this a standard full-page scorecard or a compact format?\n\n"
        "Return a JSON object:\n"
        + _LAYOUT_JSON_SCHEMA + "\n\n"
        "confidence is how sure you are of this classification, from 0.0 to 1.0."
    )


# ================================================================
# Document structure (table grid)
# ================================================================

_GRID_JSON_SCHEMA = """{
  "tables": [
    {"cells": [{"row_index": 1, "column_index": 1, "text": "Hole"}]}
  ],
  "lines": ["free text printed outside the tables, one entry per line"]
}"""


def build_grid_prompt() -> str:
    """Transcribe the table cell by cell, with no interpretation."""
    return (
        _PREAMBLE + "\n\n"
        "Transcribe every table on this scorecard as a grid of cells.\n"
        "- row_index and column_index start at 1 in the top-left cell.\n"
        "- Every cell in a row gets its own entry, including empty cells (text \"\").\n"
        "- Keep row labels (player names, \"Par\", \"Handicap\") in column 1.\n"
        "- Copy text exactly as printed or written. Do not add, total or convert anything.\n"
        "Also list any free text outside the tables (course name, date, tee) under lines.\n"
        + _JSON_PREAMBLE + "\n"
        + _GRID_JSON_SCHEMA
    )


# ================================================================
# Handwriting re-read (gap filling)
# ================================================================

_HANDWRITING_JSON_SCHEMA = """{
  "players": [
    {"name": "Player name", "scores": [{"hole_number": 1, "value": "string or null"}]}
  ]
}"""


def build_handwriting_prompt(
    request: HandwritingRequest, user_context: Optional[str] = None,
) -> str:
    """Re-read handwritten cells for players and holes the table pass already found."""
    hole_info = ", ".join(
        f"Hole {number} (Par {par})" for number, par in sorted(request.hole_pars.items())
    )
    player_info = ", ".join(
        f"Player {i}: {name}" for i, name in enumerate(request.player_names, start=1)
    )
    prompt = (
        f"Read handwritten scores from this {request.hole_count}-hole scorecard.\n\n"
        "STRUCTURE (already detected):\n"
        f"- Holes: {hole_info or 'unknown'}\n"
        f"- Players: {player_info or 'unknown'}\n\n"
        "YOUR TASK: For each player, read their score for EACH hole.\n"
        "- Focus on HANDWRITTEN numbers only\n"
        "- Use the exact player names given above\n"
        + _TOKEN_INSTRUCTIONS + "\n"
        + _JSON_PREAMBLE + "\n"
        + _HANDWRITING_JSON_SCHEMA
    )
    return _append_user_context(prompt, user_context)


# ================================================================
# Full vision read
# ================================================================

_VISION_JSON_SCHEMA = """{
  "course_name": "string or null",
  "tee_name": "string or null",
  "date": "YYYY-MM-DD or null",
  "holes": [{"hole_number": 1, "par": 4, "handicap": "int or null", "yardage": "int or null"}],
  "players": [
    {"name": "Player name", "scores": [{"hole_number": 1, "value": "string or null"}]}
  ]
}"""


def build_vision_prompt(layout_guidance: str, user_context: Optional[str] = None) -> str:
    """Read the whole card in one pass: holes, pars, players and raw score tokens."""
    prompt = (
        _PREAMBLE + "\n\n"
        + layout_guidance + "\n\n"
        "EXTRACTION RULES:\n"
        "1. Read EVERY hole number to confirm the sequence (1, 2, 3, ...)\n"
        "2. Match each player name to their correct row\n"
        "3. For each player, read their scores LEFT TO RIGHT across all holes\n"
        "4. Par values are printed; read them for every hole\n"
        + _TOKEN_INSTRUCTIONS + "\n"
        + _SKIP_INSTRUCTIONS + "\n"
        + _JSON_PREAMBLE + "\n"
        + _VISION_JSON_SCHEMA
    )
    return _append_user_context(prompt, user_context)


# ================================================================
# Pydantic models for parsing raw LLM JSON responses
# ================================================================

# --- Layout ---

class RawLayout(BaseModel):
    hole_count: Optional[int] = None
    layout_type: Optional[str] = None
    has_summary_columns: bool = False
    has_initial_columns: bool = False
    row_oriented: bool = True
    confidence: float = Field(0.0, ge=0.0, le=1.0)


# --- Document grid ---

class RawGridCell(BaseModel):
    row_index: int
    column_index: int
    text: Union[str, int, None] = None


class RawGridTable(BaseModel):
    cells: List[RawGridCell] = Field(default_factory=list)


class RawDocumentGrid(BaseModel):
    """Tables and loose text lines as transcribed, before grid assembly."""
    tables: List[RawGridTable] = Field(default_factory=list)
    lines: List[str] = Field(default_factory=list)


# --- Scores (shared by handwriting and vision reads) ---

class RawScoreToken(BaseModel):
    hole_number: int
    value: Union[str, int, None] = None  # as written: "5", "+1", "E"


class RawPlayerScores(BaseModel):
    name: str = ""
    scores: List[RawScoreToken] = Field(default_factory=list)


class RawHandwritingRead(BaseModel):
    players: List[RawPlayerScores] = Field(default_factory=list)


# --- Full vision read ---

class RawVisionHole(BaseModel):
    hole_number: Optional[int] = None
    par: Optional[int] = None
    handicap: Optional[int] = None
    yardage: Optional[int] = None


class RawVisionScorecard(BaseModel):
    course_name: Optional[str] = None
    tee_name: Optional[str] = None
    date: Optional[str] = None
    holes: List[RawVisionHole] = Field(default_factory=list)
    players: List[RawPlayerScores] = Field(default_factory=list)
