import pytest
from pydantic import ValidationError

from models import (
    ExtractedScorecard,
    HoleInfo,
    LayoutAnalysis,
    LayoutType,
    PlayerHoleScore,
    PlayerInfo,
    ScoreConfidence,
    ScoreSource,
)
from extraction.config import ReconcileSettings


# ================================================================
# HoleInfo
# ================================================================

def test_hole_validation():
    h = HoleInfo(hole_number=1, par=4, handicap=18, yardage=410)
    assert h.has_valid_number()
    assert h.has_valid_par()

    with pytest.raises(ValidationError):
        HoleInfo(hole_number=1, par=4, handicap=19)

    with pytest.raises(ValidationError):
        HoleInfo(hole_number=1, par=4, yardage=-5)


def test_hole_accepts_structurally_invalid_values():
    h = HoleInfo(hole_number=21, par=36)   # an "Out" column misread as a hole
    assert not h.has_valid_number()
    assert not h.has_valid_par()


# ================================================================
# PlayerHoleScore
# ================================================================

def test_to_par():
    s = PlayerHoleScore(hole_number=1, score=5)
    assert s.to_par(4) == 1
    assert s.to_par(None) is None
    assert PlayerHoleScore(hole_number=1).to_par(4) is None


def test_confidence_for():
    assert PlayerHoleScore.confidence_for(4, 4) == ScoreConfidence.HIGH
    assert PlayerHoleScore.confidence_for(1, 4) == ScoreConfidence.HIGH
    assert PlayerHoleScore.confidence_for(9, 4) == ScoreConfidence.MEDIUM
    assert PlayerHoleScore.confidence_for(10, 4) == ScoreConfidence.LOW


# ================================================================
# PlayerInfo
# ================================================================

def _player(scores):
    return PlayerInfo(name="Alice", scores=[
        PlayerHoleScore(hole_number=i, score=s) for i, s in enumerate(scores, start=1)
    ])


def test_totals_are_derived():
    p = _player([4] * 9 + [5] * 9)
    assert p.front_nine == 36
    assert p.back_nine == 45
    assert p.total == 81

    nine = _player([4, None, 5])
    assert nine.front_nine == 9
    assert nine.back_nine is None
    assert nine.total == 9

    assert _player([None, None]).total is None


def test_totals_follow_edits():
    p = _player([4, 4, 4])
    p.scores[0].score = 7
    assert p.total == 15
    assert p.model_dump()["total"] == 15


def test_set_score_is_a_manual_edit():
    p = _player([4, None])
    p.scores[0].source = ScoreSource.STRUCTURAL
    p.scores[0].confidence = ScoreConfidence.HIGH

    assert p.set_score(1, 6) is None
    assert p.get_score(1).score == 6
    assert p.get_score(1).source == ScoreSource.MANUAL
    assert p.get_score(1).confidence is None


def test_set_score_adds_missing_hole_in_order():
    p = _player([4, 4])
    p.scores = [p.scores[0]]
    p.set_score(3, 5)
    p.set_score(2, 4)
    assert [s.hole_number for s in p.scores] == [1, 2, 3]
    assert p.total == 13


def test_set_score_rejects_out_of_range():
    p = _player([4])
    assert p.set_score(1, 16) is not None
    assert p.set_score(1, 0) is not None
    assert p.get_score(1).score == 4


def test_update_field_returns_message():
    p = PlayerHoleScore(hole_number=1, score=4)
    assert p.update_field("score", 5) is None
    assert p.update_field("score", "abc") is not None
    assert p.score == 5


# ================================================================
# ExtractedScorecard
# ================================================================

def test_scorecard_lookups():
    card = ExtractedScorecard(
        holes=[HoleInfo(hole_number=1, par=4), HoleInfo(hole_number=2, par=3)],
        players=[_player([4, 3])],
    )
    assert card.course_name == "Unknown Course"
    assert card.total_par() == 7
    assert card.par_by_hole() == {1: 4, 2: 3}
    assert card.get_hole(2).par == 3
    assert card.get_hole(5) is None
    assert card.get_player("ALICE") is not None
    assert ExtractedScorecard().total_par() is None


def test_clone_is_independent():
    card = ExtractedScorecard(players=[_player([4])])
    copy = card.clone()
    copy.players[0].scores[0].score = 9
    assert card.players[0].scores[0].score == 4


# ================================================================
# LayoutAnalysis
# ================================================================

def test_layout_default():
    layout = LayoutAnalysis.default()
    assert layout.hole_count == 9
    assert layout.layout_type == LayoutType.UNKNOWN
    assert layout.row_oriented
    assert not layout.has_summary_columns
    assert not layout.has_initial_columns
    assert layout.confidence == 0.3


# ================================================================
# ReconcileSettings
# ================================================================

def test_settings_defaults():
    s = ReconcileSettings()
    assert s.prior_for("structure_with_handwriting") == 0.85
    assert s.prior_for("handwriting_only") == 0.7
    assert s.prior_for("unknown") == 0.5
    assert s.timeout_seconds == 90


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SCORECARD_RELATIVE_MEAN_THRESHOLD", "2.0")
    monkeypatch.setenv("SCORECARD_TIMEOUT_SECONDS", "30")
    s = ReconcileSettings.from_env()
    assert s.relative_mean_threshold == 2.0
    assert s.timeout_seconds == 30.0


def test_settings_reject_inverted_ranges():
    with pytest.raises(ValidationError):
        ReconcileSettings(min_gross_score=10, max_gross_score=5)
