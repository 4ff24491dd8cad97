"""Row and column label patterns found on printed scorecards."""

import re

TEE_COLORS = "black|blue|white|red|green|gold|brown|silver"

# Column headers that are never individual holes.
SUMMARY_LABELS = {
    "out", "in", "total", "tot", "front 9", "back 9", "front", "back",
    "player", "players", "name", "initials", "hole", "holes",
}

_INITIALS_RE = re.compile(r"^[a-z]{1,3}$", re.IGNORECASE)
_PAR_RE = re.compile(r"\bpar\b|men['s]*\s*par", re.IGNORECASE)
_HANDICAP_RE = re.compile(r"handicap|hdcp|\bhcp\b|stroke\s*index|^si$", re.IGNORECASE)
_YARDAGE_RE = re.compile(rf"yardage|\byards?\b|\byds\b|^({TEE_COLORS})(\s+tees?)?$", re.IGNORECASE)

# Row labels that are never players.
_METADATA_RES = [
    re.compile(r"handicap|hdcp|hcp", re.IGNORECASE),
    re.compile(r"^par$", re.IGNORECASE),
    re.compile(r"pace of play", re.IGNORECASE),
    re.compile(r"total", re.IGNORECASE),
    re.compile(r"^scores?$", re.IGNORECASE),
    re.compile(r"yardage|^yards?$|^yds$", re.IGNORECASE),
    re.compile(rf"^({TEE_COLORS})\s+\d", re.IGNORECASE),
    re.compile(rf"^m:\s*[\d./]+\s+({TEE_COLORS})", re.IGNORECASE),
    re.compile(r"^(ladies|men|mens|women|womens)\b|^ladies'", re.IGNORECASE),
    re.compile(r"^holes?$", re.IGNORECASE),
]


def normalize_label(text: str) -> str:
    return " ".join(text.strip().lower().split())


def is_summary_label(text: str) -> bool:
    """OUT / IN / TOTAL and other header cells that must not be read as holes."""
    return normalize_label(text) in SUMMARY_LABELS


def looks_like_initials(text: str) -> bool:
    """Two or three letters, as written in a player-initials column."""
    return bool(_INITIALS_RE.match(text.strip()))


def is_par_label(text: str) -> bool:
    return bool(_PAR_RE.search(text))


def is_handicap_label(text: str) -> bool:
    return bool(_HANDICAP_RE.search(text.strip()))


def is_yardage_label(text: str) -> bool:
    return bool(_YARDAGE_RE.search(text.strip()))


def is_metadata_label(text: str) -> bool:
    """True for handicap, par, tee-box, pace-of-play and similar non-player rows."""
    label = text.strip()
    if not label:
        return True
    if is_par_label(label) and len(label.split()) <= 3:
        return True
    return any(pattern.search(label) for pattern in _METADATA_RES)


def normalize_player_name(name: str) -> str:
    """Case-fold and strip everything but letters and digits, for cross-pass matching."""
    return re.sub(r"[^a-z0-9]", "", name.lower())
