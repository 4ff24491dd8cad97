from .base import BaseGolfModel
from .hole import HoleInfo
from .hole_score import PlayerHoleScore, ScoreConfidence, ScoreSource
from .layout import LayoutAnalysis, LayoutType
from .player import PlayerInfo
from .scorecard import ExtractedScorecard, NotationStyle

__all__ = [
    "BaseGolfModel",
    "ExtractedScorecard",
    "HoleInfo",
    "LayoutAnalysis",
    "LayoutType",
    "NotationStyle",
    "PlayerHoleScore",
    "PlayerInfo",
    "ScoreConfidence",
    "ScoreSource",
]
