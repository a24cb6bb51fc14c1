# Standard Lib
import math
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

# Bittensor
import bittensor

# Local
from ..core.calendar import MarketCalendar
from ..core.data import GameRecord
from ..core.errors import CollaboratorFailure, InvalidInput, NoMarketData
from ..core.scoring.base import BaseScorer
from ..core.scoring.game_scorer import ThresholdGameScorer
from ..core.utils import GameIdGenerator
from ..predictor.base import BasePredictor
from ..prices.base import BasePriceClient
from ..prices.schemas import LookupStatus
from .reconciler import ProvisionalReconciler
from .storage import GameStorage

HISTORY_YEARS = 2


def years_before(day: date, years: int) -> date:
    """Same calendar day ``years`` earlier, Feb 29 falls back to Feb 28."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def parse_prediction(text: str) -> float:
    """Parse a prediction text into a finite price.

    Raises:
        InvalidInput: If the text is not a finite number
    """
    try:
        value = Decimal(str(text).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInput(f"Prediction {text!r} is not a number")
    if not value.is_finite():
        raise InvalidInput(f"Prediction {text!r} is not a finite number")
    return float(value)


class SubmissionOrchestrator:
    """Single entry point for recording and reading prediction games.

    Every submission is stored as provisional first. When the market calendar
    says end-of-day data is authoritative, the game is scored on the spot and
    the final record replaces the provisional one under the same id.
    """

    def __init__(
        self,
        calendar: MarketCalendar,
        storage: GameStorage,
        predictor: BasePredictor,
        price_client: BasePriceClient,
        scorer: Optional[BaseScorer] = None,
        id_generator: Optional[GameIdGenerator] = None,
    ):
        self.calendar = calendar
        self.storage = storage
        self.predictor = predictor
        self.price_client = price_client
        self.scorer = scorer or ThresholdGameScorer()
        self.id_generator = id_generator or GameIdGenerator()
        self.reconciler = ProvisionalReconciler(calendar)

    def should_evaluate(self, now: datetime) -> bool:
        return not self.calendar.is_market_open(now) and self.calendar.can_evaluate_now(now)

    async def submit(
        self, owner_id: str, symbol: str, user_prediction: str, now: Optional[datetime] = None
    ) -> GameRecord:
        """Record a game and score it when the calendar allows.

        Args:
            owner_id: The submitting user
            symbol: The instrument, stored as submitted
            user_prediction: The predicted close as text
            now: The submission instant, defaults to the current time

        Returns:
            GameRecord: The stored game, provisional or final

        Raises:
            InvalidInput: Missing fields or a non-numeric prediction; nothing is stored
            NoMarketData: No close exists for the evaluation date
            CollaboratorFailure: The predictor or price source failed
        """
        if not owner_id or not owner_id.strip():
            raise InvalidInput("owner_id is required")
        if not symbol or not symbol.strip():
            raise InvalidInput("symbol is required")
        if user_prediction is None:
            raise InvalidInput("user_prediction is required")
        user_price = parse_prediction(user_prediction)

        now = now or datetime.now(timezone.utc)
        game = GameRecord.provisional(
            game_id=self.id_generator.next_id(now),
            owner_id=owner_id,
            symbol=symbol,
            user_prediction=user_prediction,
        )
        self.storage.save_game(game)

        if not self.should_evaluate(now):
            bittensor.logging.info(f"Recorded provisional game {game.game_id} for {owner_id}, symbol {symbol}")
            return game

        evaluation_date = self.calendar.evaluation_date_for(now)
        model_price = await self._predict(symbol, evaluation_date)
        actual_price = await self._actual_close(symbol, evaluation_date)

        result = self.scorer.score(user_price, model_price, actual_price)
        game = game.with_outcome(result.outcome, result.coins_earned)
        self.storage.save_game(game)

        bittensor.logging.info(
            f"Recorded game {game.game_id} for {owner_id}, symbol {symbol}: "
            f"[yellow]{'won' if game.won else 'lost'}[/yellow] ({game.coins_earned} coins)"
        )
        return game

    async def _predict(self, symbol: str, evaluation_date: date) -> float:
        start_date = years_before(evaluation_date, HISTORY_YEARS)
        try:
            prediction = await self.predictor.predict(symbol, start_date, evaluation_date)
        except Exception as e:
            raise CollaboratorFailure(f"Predictor failed for {symbol} on {evaluation_date}: {e}", cause=e) from e

        model_price = prediction.predicted_closing_price
        if model_price is None or not math.isfinite(model_price):
            raise CollaboratorFailure(f"Predictor returned no usable price for {symbol} on {evaluation_date}")
        return model_price

    async def _actual_close(self, symbol: str, evaluation_date: date) -> float:
        try:
            lookup = await self.price_client.fetch_close(symbol, evaluation_date)
        except Exception as e:
            raise CollaboratorFailure(f"Price source failed for {symbol} on {evaluation_date}: {e}", cause=e) from e

        if lookup.status == LookupStatus.EMPTY:
            raise NoMarketData(f"No market data available for {symbol} on {evaluation_date}")
        if lookup.status == LookupStatus.FAILED:
            raise CollaboratorFailure(f"Price source failed for {symbol} on {evaluation_date}: {lookup.error}")
        return lookup.price

    def list_for(self, owner_id: str, now: Optional[datetime] = None) -> list[GameRecord]:
        """List an owner's games as they should be displayed at ``now``."""
        now = now or datetime.now(timezone.utc)
        games = sorted(self.storage.load_games_for(owner_id), key=lambda game: (game.created_at, game.game_id))
        return self.reconciler.present(games, now)
