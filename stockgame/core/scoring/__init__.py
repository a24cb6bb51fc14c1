# Local
from .base import BaseScorer, ScoringResult
from .game_scorer import ThresholdGameScorer

__all__ = [
    "BaseScorer",
    "ScoringResult",
    "ThresholdGameScorer",
]
