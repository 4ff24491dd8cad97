"""Combine score sources without ever losing a structural read.

The structural pass is the authority: a handwriting pass may only fill
cells the structural pass left empty, and only with values plausible for
the hole's par. Tokens from handwriting are converted under the notation
already resolved for the scorecard.
"""

import logging
from typing import Dict, List, Optional, Tuple

from models import ExtractedScorecard, PlayerHoleScore, ScoreSource
from extraction.candidate import HandwritingRead, RawPlayerRow
from extraction.config import DEFAULT_SETTINGS, ReconcileSettings
from extraction.exceptions import IncompatibleScorecardError
from extraction.labels import normalize_player_name
from extraction.notation import NotationContext, notation_context

logger = logging.getLogger(__name__)


def _tag(entry: PlayerHoleScore, par: Optional[int], source: ScoreSource) -> None:
    entry.source = source
    entry.confidence = (
        PlayerHoleScore.confidence_for(entry.score, par) if par is not None else None
    )


def tag_scores(scorecard: ExtractedScorecard, source: ScoreSource) -> ExtractedScorecard:
    """Mark every assigned, untagged score with `source` and a par-distance confidence. In place."""
    pars = scorecard.par_by_hole()
    for player in scorecard.players:
        for entry in player.scores:
            if entry.score is not None and entry.source is None:
                _tag(entry, pars.get(entry.hole_number), source)
    return scorecard


def tag_structural_scores(scorecard: ExtractedScorecard) -> ExtractedScorecard:
    return tag_scores(scorecard, ScoreSource.STRUCTURAL)


def _handwriting_index(handwriting: HandwritingRead) -> Dict[str, RawPlayerRow]:
    index: Dict[str, RawPlayerRow] = {}
    for row in handwriting.players:
        key = normalize_player_name(row.name)
        if key and key not in index:
            index[key] = row
    return index


def merge_handwriting(
    scorecard: ExtractedScorecard,
    handwriting: HandwritingRead,
    settings: ReconcileSettings = DEFAULT_SETTINGS,
    context: Optional[NotationContext] = None,
) -> ExtractedScorecard:
    """Fill null structural cells from a handwriting read. Mutates and returns `scorecard`.

    Non-null structural scores are never touched. Handwriting players that do
    not match a structural player by normalized name are ignored.
    """
    context = context or notation_context(scorecard)
    tag_structural_scores(scorecard)
    pars = scorecard.par_by_hole()
    index = _handwriting_index(handwriting)

    filled = 0
    for player in scorecard.players:
        row = index.get(normalize_player_name(player.name))
        if row is None:
            logger.debug("No handwriting read for %r", player.name)
            continue

        for entry in player.scores:
            if entry.score is not None:
                continue
            par = pars.get(entry.hole_number)
            if par is None:
                continue
            candidate = context.convert(row.tokens.get(entry.hole_number), par, settings)
            if candidate is None:
                continue
            if abs(candidate - par) > settings.gap_fill_max_par_distance:
                logger.warning(
                    "Rejected handwriting score %d for %s hole %d (par %d)",
                    candidate, player.name, entry.hole_number, par,
                )
                continue
            entry.score = candidate
            _tag(entry, par, ScoreSource.HANDWRITING)
            filled += 1

    unmatched = set(index) - {normalize_player_name(p.name) for p in scorecard.players}
    if unmatched:
        logger.info("Dropped handwriting rows with no structural match: %s", sorted(unmatched))
    logger.info("Handwriting filled %d empty cells", filled)
    return scorecard


# --- Multi-photo merging ---

def check_compatibility(existing: ExtractedScorecard, new: ExtractedScorecard) -> None:
    """Raise IncompatibleScorecardError unless both cards describe the same holes and pars."""
    if len(existing.holes) != len(new.holes):
        raise IncompatibleScorecardError(
            f"Scorecards have different hole counts "
            f"({len(existing.holes)} vs {len(new.holes)}). Cannot merge."
        )
    new_pars = new.par_by_hole()
    for hole in existing.holes:
        other = new_pars.get(hole.hole_number)
        if other is not None and other != hole.par:
            raise IncompatibleScorecardError(
                f"Par mismatch on hole {hole.hole_number} "
                f"(par {hole.par} vs par {other}). These may be different courses."
            )


def merge_summary(
    existing: ExtractedScorecard, new: ExtractedScorecard,
) -> Tuple[List[str], List[str]]:
    """(new player names, duplicate player names) that merging `new` would produce."""
    known = {p.name.strip().lower() for p in existing.players}
    added: List[str] = []
    duplicates: List[str] = []
    for player in new.players:
        key = player.name.strip().lower()
        if key in known:
            duplicates.append(player.name)
        else:
            added.append(player.name)
            known.add(key)
    return added, duplicates


def merge_additional_players(
    existing: ExtractedScorecard, new: ExtractedScorecard,
) -> ExtractedScorecard:
    """Append players from a second photo of the same round. Returns a new scorecard."""
    check_compatibility(existing, new)
    added, duplicates = merge_summary(existing, new)
    if duplicates:
        logger.info("Skipping duplicate players: %s", duplicates)

    merged = existing.clone()
    wanted = set(added)
    for player in new.players:
        if player.name in wanted:
            merged.players.append(player.clone())
            wanted.discard(player.name)
    return merged
