import logging
from typing import List

from models import ExtractedScorecard, HoleInfo, PlayerHoleScore, PlayerInfo
from extraction.config import DEFAULT_SETTINGS, ReconcileSettings
from extraction.labels import is_metadata_label

logger = logging.getLogger(__name__)


def is_sequential(holes: List[HoleInfo]) -> bool:
    """True if hole numbers run 1..N in order."""
    return [h.hole_number for h in holes] == list(range(1, len(holes) + 1))


def _clean_holes(holes: List[HoleInfo]) -> List[HoleInfo]:
    valid = [h for h in holes if h.has_valid_number() and h.has_valid_par()]
    if len(valid) != len(holes):
        logger.debug("Dropped %d holes with invalid number or par", len(holes) - len(valid))

    kept: List[HoleInfo] = []
    seen = set()
    for hole in sorted(valid, key=lambda h: h.hole_number):
        if hole.hole_number in seen:
            continue
        seen.add(hole.hole_number)
        kept.append(hole.clone())

    if 9 < len(kept) < 18:
        logger.info("Truncating %d holes to 9", len(kept))
        kept = kept[:9]
    elif len(kept) > 18:
        kept = kept[:18]
    return kept


def _clean_scores(
    player: PlayerInfo, hole_numbers: List[int], settings: ReconcileSettings,
) -> List[PlayerHoleScore]:
    by_hole = {}
    for entry in player.scores:
        by_hole.setdefault(entry.hole_number, entry)

    scores: List[PlayerHoleScore] = []
    for number in hole_numbers:
        entry = by_hole.get(number)
        if entry is None:
            scores.append(PlayerHoleScore(hole_number=number))
            continue
        entry = entry.clone()
        if entry.score is not None and not (
            settings.min_clean_score <= entry.score <= settings.max_clean_score
        ):
            logger.debug("Nulling out-of-range score %d for %s hole %d", entry.score, player.name, number)
            entry.score = None
            entry.confidence = None
            entry.source = None
        scores.append(entry)
    return scores


def sanitize_scorecard(
    scorecard: ExtractedScorecard, settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> ExtractedScorecard:
    """Structurally repair a scorecard. Returns a new scorecard; the input is untouched.

    Holes: valid number and par only, sorted, first of each number, cut to 9
    or 18. Players: metadata rows dropped, one score slot per kept hole.
    """
    holes = _clean_holes(scorecard.holes)
    hole_numbers = [h.hole_number for h in holes]

    players: List[PlayerInfo] = []
    for player in scorecard.players:
        if is_metadata_label(player.name):
            logger.debug("Dropped metadata row %r", player.name)
            continue
        players.append(PlayerInfo(
            name=player.name.strip(),
            scores=_clean_scores(player, hole_numbers, settings),
        ))

    return scorecard.model_copy(update={"holes": holes, "players": players})
