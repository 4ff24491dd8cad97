"""Deductive plausibility score for a reconciled scorecard.

Starts at 100 and subtracts for structural problems. The score ranks
competing strategy results; it is not a probability.
"""

import logging
from pydantic import Field
from typing import List

from models import ExtractedScorecard, LayoutAnalysis
from models.base import BaseGolfModel
from extraction.config import DEFAULT_SETTINGS, ReconcileSettings

logger = logging.getLogger(__name__)

MAX_SCORE = 100.0

HOLE_COUNT_PENALTY = 10        # per hole of difference from the layout
SEQUENCE_PENALTY = 5
INVALID_PAR_PENALTY = 5        # per hole
NO_PLAYERS_PENALTY = 50
UNREASONABLE_SCORE_PENALTY = 2
UNREASONABLE_SCORE_CAP = 30
SPARSE_PLAYER_PENALTY = 20     # under 30% of holes scored
INCOMPLETE_PLAYER_PENALTY = 10  # under 60% of holes scored
AVERAGE_DEVIATION_PENALTY = 10
MAX_AVERAGE_DEVIATION = 3


class ValidationReport(BaseGolfModel):
    score: float = MAX_SCORE
    penalties: List[str] = Field(default_factory=list)


def validate_scorecard(
    scorecard: ExtractedScorecard,
    layout: LayoutAnalysis,
    settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> ValidationReport:
    score = MAX_SCORE
    penalties: List[str] = []
    holes = scorecard.holes
    hole_count = len(holes)

    # Hole count
    if hole_count != layout.hole_count:
        score -= abs(hole_count - layout.hole_count) * HOLE_COUNT_PENALTY
        penalties.append(f"Hole count mismatch: expected {layout.hole_count}, got {hole_count}")

    # Hole sequence
    numbers = sorted(h.hole_number for h in holes)
    for position, number in enumerate(numbers, start=1):
        if number != position:
            score -= SEQUENCE_PENALTY
            penalties.append(f"Hole sequence broken at position {position}")
            break

    # Par values
    invalid_pars = [h for h in holes if not h.has_valid_par()]
    if invalid_pars:
        score -= len(invalid_pars) * INVALID_PAR_PENALTY
        penalties.append(f"{len(invalid_pars)} holes have invalid par values")

    # Players
    if not scorecard.players:
        score -= NO_PLAYERS_PENALTY
        penalties.append("No players extracted")

    # Score reasonableness
    pars = scorecard.par_by_hole()
    unreasonable = 0
    all_scores: List[int] = []
    for player in scorecard.players:
        for entry in player.scores:
            if entry.score is None:
                continue
            all_scores.append(entry.score)
            par = pars.get(entry.hole_number)
            if par is not None and abs(entry.score - par) > settings.unreasonable_par_distance:
                unreasonable += 1
    if unreasonable:
        score -= min(unreasonable * UNREASONABLE_SCORE_PENALTY, UNREASONABLE_SCORE_CAP)
        penalties.append(
            f"{unreasonable} scores seem unreasonable (>{settings.unreasonable_par_distance} from par)"
        )

    # Completeness
    if hole_count:
        for player in scorecard.players:
            scored = player.scored_holes()
            completeness = scored / hole_count
            if completeness < 0.3:
                score -= SPARSE_PLAYER_PENALTY
                penalties.append(f"Player {player.name} has very few scores ({scored}/{hole_count})")
            elif completeness < 0.6:
                score -= INCOMPLETE_PLAYER_PENALTY
                penalties.append(f"Player {player.name} has incomplete scores ({scored}/{hole_count})")

    # Score distribution
    if all_scores and hole_count:
        average = sum(all_scores) / len(all_scores)
        average_par = sum(h.par for h in holes) / hole_count
        if abs(average - average_par) > MAX_AVERAGE_DEVIATION:
            score -= AVERAGE_DEVIATION_PENALTY
            penalties.append(
                f"Average score ({average:.1f}) far from average par ({average_par:.1f})"
            )

    score = max(0.0, score)
    logger.debug("Validation score %.1f, penalties: %s", score, penalties)
    return ValidationReport(score=score, penalties=penalties)
