# Standard Lib
from abc import ABC, abstractmethod

# Third Party
from pydantic import BaseModel

# Local
from ..data import GameOutcome


class ScoringResult(BaseModel):
    """Result of scoring a game."""

    outcome: GameOutcome
    coins_earned: int
    threshold: float
    user_error: float
    model_error: float
    user_price: float
    model_price: float
    actual_price: float


class BaseScorer(ABC):
    """Base class for game scoring."""

    @abstractmethod
    def score(self, user_predicted: float, model_predicted: float, actual: float) -> ScoringResult:
        """Score a user's prediction against the realized close.

        Args:
            user_predicted: The price the user predicted
            model_predicted: The price the predictor produced for the same window
            actual: The realized closing price

        Returns:
            ScoringResult: The scoring result
        """
        pass
