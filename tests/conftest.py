import pytest

from models import ExtractedScorecard, HoleInfo, NotationStyle, PlayerHoleScore, PlayerInfo
from extraction.grid import TextGrid


def _make_scorecard(pars, players, style=NotationStyle.GROSS) -> ExtractedScorecard:
    """players: {name: [score or None per hole]}"""
    holes = [HoleInfo(hole_number=i, par=p) for i, p in enumerate(pars, start=1)]
    return ExtractedScorecard(
        holes=holes,
        players=[
            PlayerInfo(
                name=name,
                scores=[
                    PlayerHoleScore(hole_number=i, score=s)
                    for i, s in enumerate(scores, start=1)
                ],
            )
            for name, scores in players.items()
        ],
        notation_style=style,
    )


@pytest.fixture
def nine_hole_grid():
    """Relative-notation card: one explicit -1 decides the style for the whole card."""
    return TextGrid(
        rows=[
            ["Hole", "1", "2", "3", "4", "5", "6", "7", "8", "9", "Out"],
            ["Par", "5", "4", "4", "4", "5", "3", "4", "3", "4", "36"],
            ["Alice", "1", "1", "1", "-1", "3", "0", "1", "1", "", ""],
        ],
        lines=["Pine Valley Golf Club", "Date: 2024-05-01"],
    )


@pytest.fixture
def gross_grid():
    return TextGrid(
        rows=[
            ["Hole", "1", "2", "3", "4", "5", "6", "7", "8", "9", "Out"],
            ["Blue", "510", "400", "380", "410", "520", "170", "390", "160", "420", "3360"],
            ["Par", "5", "4", "4", "4", "5", "3", "4", "3", "4", "36"],
            ["Handicap", "3", "7", "11", "1", "5", "17", "9", "15", "13", ""],
            ["Bob", "6", "5", "4", "4", "6", "3", "5", "", "5", "43"],
            ["Carol", "5", "4", "5", "5", "5", "4", "4", "3", "4", "39"],
        ],
    )


@pytest.fixture
def make_scorecard():
    return _make_scorecard
