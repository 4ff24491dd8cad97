import pytest

from models import HoleInfo, NotationStyle
from extraction.candidate import RawPlayerRow, StructureCandidate
from extraction.config import ReconcileSettings
from extraction.notation import (
    NotationReason,
    classify_notation,
    clean_token,
    convert_token,
    detect_notation_style,
    format_score,
    is_score_token,
    normalize_candidate,
    notation_context,
)


# ================================================================
# Token helpers
# ================================================================

def test_clean_token():
    assert clean_token(None) is None
    assert clean_token("") is None
    assert clean_token("  ") is None
    assert clean_token("-") is None
    assert clean_token(" 5 ") == "5"
    assert clean_token(4) == "4"


def test_is_score_token():
    for token in ["4", "+1", "-2", "E", "e", "0"]:
        assert is_score_token(token), token
    for token in [None, "", "-", "JD", "4.5", "x"]:
        assert not is_score_token(token), token


# ================================================================
# Detection
# ================================================================

def test_explicit_relative_tokens_win():
    assert detect_notation_style(["5", "6", "+1"]) == NotationStyle.RELATIVE
    assert detect_notation_style(["5", "E"]) == NotationStyle.RELATIVE
    decision = classify_notation(["4", "-1"])
    assert decision.reason == NotationReason.EXPLICIT
    assert not decision.needs_review


def test_gross_by_default():
    decision = classify_notation(["4", "5", "3", "6", "4", "5"])
    assert decision.style == NotationStyle.GROSS
    assert decision.reason == NotationReason.DEFAULT
    assert detect_notation_style([]) == NotationStyle.GROSS
    assert detect_notation_style([None, ""]) == NotationStyle.GROSS


def test_statistical_relative_is_flagged_for_review():
    decision = classify_notation(["0", "1", "2", "1", "0", "1", "3"])
    assert decision.style == NotationStyle.RELATIVE
    assert decision.reason == NotationReason.STATISTICAL
    assert decision.needs_review


def test_statistical_needs_enough_samples():
    # Five small values is below the sample threshold: gross
    assert detect_notation_style(["1", "1", "2", "1", "0"]) == NotationStyle.GROSS


def test_statistical_rejects_high_mean_or_large_value():
    assert detect_notation_style(["3", "3", "3", "3", "3", "2"]) == NotationStyle.GROSS
    assert detect_notation_style(["1", "1", "1", "1", "1", "4"]) == NotationStyle.GROSS


def test_statistical_thresholds_are_configurable():
    settings = ReconcileSettings(relative_min_samples=3)
    assert detect_notation_style(["1", "0", "1"], settings) == NotationStyle.RELATIVE


def test_detection_is_idempotent():
    tokens = ["1", "+2", "E", "4", None]
    first = classify_notation(tokens)
    assert classify_notation(tokens) == first
    assert classify_notation(list(tokens)) == first


# ================================================================
# Conversion
# ================================================================

def test_relative_round_trip_on_par_four():
    tokens = ["+1", "-1", "E", "0"]
    assert [convert_token(t, 4, NotationStyle.RELATIVE) for t in tokens] == [5, 3, 4, 4]


def test_relative_bare_numeral_is_over_par():
    assert convert_token("2", 5, NotationStyle.RELATIVE) == 7
    assert convert_token(1, 3, NotationStyle.RELATIVE) == 4


def test_gross_conversion():
    assert convert_token("5", 4, NotationStyle.GROSS) == 5
    assert convert_token("0", 4, NotationStyle.GROSS) is None
    assert convert_token("21", 4, NotationStyle.GROSS) is None
    assert convert_token("+1", 4, NotationStyle.GROSS) is None
    assert convert_token("E", 4, NotationStyle.GROSS) is None


def test_unparseable_tokens_become_none():
    for style in NotationStyle:
        for token in [None, "", "-", "abc", "4.5", "++1"]:
            assert convert_token(token, 4, style) is None


def test_relative_result_out_of_range_is_none():
    assert convert_token("-4", 3, NotationStyle.RELATIVE) is None  # 3 - 4 = -1
    assert convert_token("+17", 4, NotationStyle.RELATIVE) is None


# ================================================================
# Whole-card normalization
# ================================================================

def _candidate(pars, rows):
    return StructureCandidate(
        holes=[HoleInfo(hole_number=i, par=p) for i, p in enumerate(pars, start=1)],
        players=[
            RawPlayerRow(name=name, tokens={i: t for i, t in enumerate(tokens, start=1)})
            for name, tokens in rows.items()
        ],
    )


def test_single_style_for_whole_card():
    # "+1" on Bob's row makes Alice's plain numbers relative too.
    candidate = _candidate([4, 4, 4], {"Alice": ["1", "2", "0"], "Bob": ["+1", "E", "-1"]})
    scorecard = normalize_candidate(candidate)

    assert scorecard.notation_style == NotationStyle.RELATIVE
    assert [s.score for s in scorecard.get_player("Alice").scores] == [5, 6, 4]
    assert [s.score for s in scorecard.get_player("Bob").scores] == [5, 4, 3]


def test_missing_hole_token_is_null_slot():
    candidate = _candidate([4, 3], {"Alice": ["5"]})
    scorecard = normalize_candidate(candidate)
    scores = scorecard.players[0].scores
    assert [(s.hole_number, s.score) for s in scores] == [(1, 5), (2, None)]


def test_needs_review_carried_onto_scorecard():
    candidate = _candidate([4] * 6, {"Alice": ["1", "0", "1", "2", "1", "0"]})
    scorecard = normalize_candidate(candidate)
    assert scorecard.notation_needs_review
    assert notation_context(scorecard).reason == NotationReason.STATISTICAL


def test_notation_context_requires_normalized_scorecard(make_scorecard):
    scorecard = make_scorecard([4], {"A": [4]}, style=None)
    with pytest.raises(ValueError):
        notation_context(scorecard)


# ================================================================
# Formatting
# ================================================================

def test_format_score():
    assert format_score(None, 4) == "-"
    assert format_score(5, 4) == "5"
    assert format_score(5, 4, NotationStyle.RELATIVE) == "+1"
    assert format_score(4, 4, NotationStyle.RELATIVE) == "E"
    assert format_score(3, 4, NotationStyle.RELATIVE) == "-1"


def test_gross_card_is_left_unchanged():
    tokens = ["4", "5", "3", "6", "4", "5", "7", "4", "3"]
    candidate = _candidate([4] * 9, {"Alice": tokens})
    scorecard = normalize_candidate(candidate)
    assert scorecard.notation_style == NotationStyle.GROSS
    assert not scorecard.notation_needs_review
    assert [s.score for s in scorecard.players[0].scores] == [int(t) for t in tokens]
