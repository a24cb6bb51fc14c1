# Bittensor
import bittensor

# Local
from ..data import GameOutcome
from .base import BaseScorer, ScoringResult


class ThresholdGameScorer(BaseScorer):
    """Scores a game against a band around the model's own forecast.

    The band is ``model_predicted * threshold_ratio`` wide on either side of
    the actual close. A user inside the band wins; beating a model that fell
    outside the band doubles the reward. Anything else costs a small penalty.
    """

    THRESHOLD_RATIO = 0.005
    BASELINE_WIN_COINS = 100
    BONUS_WIN_COINS = 200
    LOSS_COINS = -10

    def __init__(self, threshold_ratio: float = THRESHOLD_RATIO):
        self.threshold_ratio = threshold_ratio

    def score(self, user_predicted: float, model_predicted: float, actual: float) -> ScoringResult:
        threshold = model_predicted * self.threshold_ratio
        user_error = abs(user_predicted - actual)
        model_error = abs(model_predicted - actual)

        bittensor.logging.debug(
            f"User: {user_predicted}, model: {model_predicted}, actual: {actual}, threshold: {threshold}"
        )
        outcome, coins = self._tier(user_error <= threshold, model_error <= threshold)

        return ScoringResult(
            outcome=outcome,
            coins_earned=coins,
            threshold=threshold,
            user_error=user_error,
            model_error=model_error,
            user_price=user_predicted,
            model_price=model_predicted,
            actual_price=actual,
        )

    def _tier(self, user_accurate: bool, model_accurate: bool) -> tuple[GameOutcome, int]:
        if user_accurate and model_accurate:
            return GameOutcome.WON, self.BASELINE_WIN_COINS
        if user_accurate:
            return GameOutcome.WON, self.BONUS_WIN_COINS
        return GameOutcome.LOST, self.LOSS_COINS
