from models import ExtractedScorecard, HoleInfo, PlayerHoleScore, PlayerInfo
from extraction.cleanup import is_sequential, sanitize_scorecard


def _holes(count, par=4):
    return [HoleInfo(hole_number=i, par=par) for i in range(1, count + 1)]


# ================================================================
# Holes
# ================================================================

def test_truncates_partial_back_nine_to_nine():
    cleaned = sanitize_scorecard(ExtractedScorecard(holes=_holes(12)))
    assert cleaned.hole_numbers() == list(range(1, 10))


def test_twenty_holes_reduced_to_eighteen():
    holes = _holes(18) + [HoleInfo(hole_number=19, par=4), HoleInfo(hole_number=20, par=4)]
    cleaned = sanitize_scorecard(ExtractedScorecard(holes=holes))
    assert cleaned.hole_numbers() == list(range(1, 19))


def test_drops_invalid_holes_and_duplicates():
    holes = [
        HoleInfo(hole_number=2, par=4),
        HoleInfo(hole_number=1, par=3),
        HoleInfo(hole_number=2, par=5),     # duplicate: first one wins
        HoleInfo(hole_number=0, par=4),
        HoleInfo(hole_number=3, par=7),
        HoleInfo(hole_number=40, par=4),
    ]
    cleaned = sanitize_scorecard(ExtractedScorecard(holes=holes))
    assert [(h.hole_number, h.par) for h in cleaned.holes] == [(1, 3), (2, 4)]


def test_is_sequential():
    assert is_sequential(_holes(9))
    assert is_sequential([])
    assert not is_sequential([HoleInfo(hole_number=2, par=4)])


# ================================================================
# Players
# ================================================================

def test_player_scores_aligned_to_kept_holes():
    player = PlayerInfo(name=" Alice ", scores=[
        PlayerHoleScore(hole_number=3, score=5),
        PlayerHoleScore(hole_number=1, score=4),
        PlayerHoleScore(hole_number=1, score=9),   # duplicate: dropped
        PlayerHoleScore(hole_number=12, score=5),  # no such hole after cleanup
    ])
    cleaned = sanitize_scorecard(ExtractedScorecard(holes=_holes(3), players=[player]))

    alice = cleaned.players[0]
    assert alice.name == "Alice"
    assert [(s.hole_number, s.score) for s in alice.scores] == [(1, 4), (2, None), (3, 5)]


def test_out_of_range_scores_become_null():
    player = PlayerInfo(name="Alice", scores=[
        PlayerHoleScore(hole_number=1, score=16),
        PlayerHoleScore(hole_number=2, score=0),
        PlayerHoleScore(hole_number=3, score=15),
    ])
    cleaned = sanitize_scorecard(ExtractedScorecard(holes=_holes(3), players=[player]))
    assert [s.score for s in cleaned.players[0].scores] == [None, None, 15]


def test_metadata_player_rows_dropped():
    players = [PlayerInfo(name=name) for name in ["Par", "Handicap", "Blue 71.2", "", "Bob"]]
    cleaned = sanitize_scorecard(ExtractedScorecard(holes=_holes(9), players=players))
    assert [p.name for p in cleaned.players] == ["Bob"]


def test_input_is_not_mutated():
    scorecard = ExtractedScorecard(
        holes=_holes(12),
        players=[PlayerInfo(name="Bob", scores=[PlayerHoleScore(hole_number=1, score=30)])],
    )
    sanitize_scorecard(scorecard)
    assert len(scorecard.holes) == 12
    assert scorecard.players[0].scores[0].score == 30
