"""Score notation detection and conversion.

Golfers write either gross strokes ("4", "5", "6") or strokes relative to par
("+1", "-1", "E"). The style is decided once for the whole scorecard from
every token on it, and every token is then converted under that one style.
A bare "1" therefore means six strokes on a par 5 when the card is relative,
and a single stroke when it is gross.
"""

import logging
import re
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Iterable, List, Optional, Union

from models import ExtractedScorecard, NotationStyle, PlayerHoleScore, PlayerInfo
from extraction.candidate import StructureCandidate
from extraction.config import DEFAULT_SETTINGS, ReconcileSettings

logger = logging.getLogger(__name__)

Token = Union[str, int, None]

_SIGNED_RE = re.compile(r"^[+-]\d+$")
_EVEN_RE = re.compile(r"^e$", re.IGNORECASE)
_UNSIGNED_RE = re.compile(r"^\d+$")
_RELATIVE_VALUE_RE = re.compile(r"^([+-]?)(\d+)$")


class NotationReason(str, Enum):
    EXPLICIT = "explicit"        # a +N / -N / E token was present
    STATISTICAL = "statistical"  # only small numbers, mean too low for gross strokes
    DEFAULT = "default"


def clean_token(token: Token) -> Optional[str]:
    """Strip a raw cell. Empty cells and dashes become None."""
    if token is None:
        return None
    text = str(token).strip()
    if not text or text == "-":
        return None
    return text


def is_explicit_relative(token: Token) -> bool:
    """True for +N, -N and E (any case)."""
    text = clean_token(token)
    if text is None:
        return False
    return bool(_SIGNED_RE.match(text) or _EVEN_RE.match(text))


def is_score_token(token: Token) -> bool:
    """True if the cell could hold a score in either notation."""
    text = clean_token(token)
    if text is None:
        return False
    return bool(_UNSIGNED_RE.match(text) or _SIGNED_RE.match(text) or _EVEN_RE.match(text))


class NotationContext(BaseModel):
    """The notation resolved for one scorecard. Frozen: set once, read everywhere after."""
    model_config = ConfigDict(frozen=True)

    style: NotationStyle
    reason: NotationReason = NotationReason.DEFAULT

    @property
    def needs_review(self) -> bool:
        return self.reason == NotationReason.STATISTICAL

    def convert(
        self, token: Token, par: int, settings: ReconcileSettings = DEFAULT_SETTINGS,
    ) -> Optional[int]:
        return convert_token(token, par, self.style, settings)


def classify_notation(
    tokens: Iterable[Token], settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> NotationContext:
    """Decide the notation for an entire scorecard."""
    numbers: List[int] = []
    for token in tokens:
        text = clean_token(token)
        if text is None:
            continue
        if _SIGNED_RE.match(text) or _EVEN_RE.match(text):
            logger.debug("Relative notation: explicit token %r", text)
            return NotationContext(style=NotationStyle.RELATIVE, reason=NotationReason.EXPLICIT)
        if _UNSIGNED_RE.match(text):
            numbers.append(int(text))

    if (
        len(numbers) >= settings.relative_min_samples
        and all(n <= settings.relative_max_value for n in numbers)
        and sum(numbers) / len(numbers) < settings.relative_mean_threshold
    ):
        logger.info(
            "Relative notation inferred from %d small values (mean %.2f); flagged for review",
            len(numbers), sum(numbers) / len(numbers),
        )
        return NotationContext(style=NotationStyle.RELATIVE, reason=NotationReason.STATISTICAL)

    return NotationContext(style=NotationStyle.GROSS, reason=NotationReason.DEFAULT)


def detect_notation_style(
    tokens: Iterable[Token], settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> NotationStyle:
    """Single notation style for the whole set of tokens."""
    return classify_notation(tokens, settings).style


def convert_token(
    token: Token,
    par: int,
    style: NotationStyle,
    settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> Optional[int]:
    """Convert one raw cell to gross strokes under an already-decided style.

    Returns None for anything unreadable; never raises.
    """
    text = clean_token(token)
    if text is None:
        return None

    if style == NotationStyle.RELATIVE:
        if _EVEN_RE.match(text):
            return par
        match = _RELATIVE_VALUE_RE.match(text)
        if not match:
            return None
        sign, magnitude = match.group(1), int(match.group(2))
        # An unsigned numeral on a relative card is strokes over par.
        gross = par - magnitude if sign == "-" else par + magnitude
    else:
        if not _UNSIGNED_RE.match(text):
            return None
        gross = int(text)

    if not settings.min_gross_score <= gross <= settings.max_gross_score:
        return None
    return gross


def normalize_candidate(
    candidate: StructureCandidate, settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> ExtractedScorecard:
    """Resolve the card's notation once and convert every player's tokens under it."""
    context = classify_notation(candidate.all_tokens(), settings)
    logger.info("Scorecard notation: %s (%s)", context.style.value, context.reason.value)

    players = []
    for row in candidate.players:
        scores = [
            PlayerHoleScore(
                hole_number=hole.hole_number,
                score=context.convert(row.tokens.get(hole.hole_number), hole.par, settings),
            )
            for hole in candidate.holes
        ]
        players.append(PlayerInfo(name=row.name, scores=scores))

    return ExtractedScorecard(
        course_name=candidate.course_name,
        tee_name=candidate.tee_name,
        date=candidate.date,
        holes=[hole.clone() for hole in candidate.holes],
        players=players,
        notation_style=context.style,
        notation_needs_review=context.needs_review,
    )


def notation_context(scorecard: ExtractedScorecard) -> NotationContext:
    """The context a normalized scorecard was converted under. Never re-detects."""
    if scorecard.notation_style is None:
        raise ValueError("Scorecard has not been through notation normalization")
    if scorecard.notation_needs_review:
        reason = NotationReason.STATISTICAL
    elif scorecard.notation_style == NotationStyle.RELATIVE:
        reason = NotationReason.EXPLICIT
    else:
        reason = NotationReason.DEFAULT
    return NotationContext(style=scorecard.notation_style, reason=reason)


def format_score(
    gross: Optional[int], par: int, style: NotationStyle = NotationStyle.GROSS,
) -> str:
    """Render gross strokes in the requested notation: "5", "+1", "E", "-1", or "-" if missing."""
    if gross is None:
        return "-"
    if style == NotationStyle.GROSS:
        return str(gross)
    diff = gross - par
    if diff == 0:
        return "E"
    if diff > 0:
        return f"+{diff}"
    return str(diff)
