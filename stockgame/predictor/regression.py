# Standard Lib
from datetime import date

# Third Party
import bittensor
import numpy as np
import pandas as pd

# Local
from ..prices.base import BasePriceClient
from .base import BasePredictor
from .schemas import PredictionResponse

FEATURES = ["open", "high", "low", "volume", "prev_close"]


def format_date(day: date) -> str:
    """Formats a date like ``Dec 2, 2024``."""
    return f"{day:%b} {day.day}, {day.year}"


class RegressionPredictor(BasePredictor):
    """Predicts the next close with an ordinary least squares fit over daily history."""

    def __init__(self, price_client: BasePriceClient):
        """Initialize the predictor.

        Args:
            price_client: Client for fetching price history
        """
        self.price_client = price_client

    async def predict(self, symbol: str, start_date: date, end_date: date) -> PredictionResponse:
        """Fit the model on ``[start_date, end_date]`` and predict the following close.

        Raises:
            ValueError: If the window holds too little history to fit the model
        """
        history = await self.price_client.fetch_history(symbol, start_date, end_date)
        if not history:
            raise ValueError(f"No data available for symbol: {symbol}")

        frame = pd.DataFrame([row.model_dump() for row in history]).sort_values("date").reset_index(drop=True)
        coefficients = self.fit(frame)

        last_day = frame.iloc[-1]
        features = np.array([
            1.0, last_day["open"], last_day["high"], last_day["low"], last_day["volume"], last_day["close"],
        ])
        predicted_close = float(features @ coefficients)
        last_close = float(last_day["close"])
        predicted_change = (predicted_close - last_close) / last_close * 100 if last_close else 0.0

        bittensor.logging.info(
            f"Predicted close for [cyan]{symbol}[/cyan]: [green]{predicted_close:.4f}[/green] from {len(frame)} rows"
        )
        return PredictionResponse(
            data_points=len(frame),
            symbol=symbol,
            date_range_start=format_date(frame.iloc[0]["date"]),
            date_range_end=format_date(last_day["date"]),
            last_known_date=format_date(last_day["date"]),
            last_closing_price=last_close,
            predicted_closing_price=predicted_close,
            predicted_change=predicted_change,
            model_details=self.format_model_details(coefficients),
        )

    @staticmethod
    def fit(frame: pd.DataFrame) -> np.ndarray:
        """Return ``[intercept, *feature weights]`` for close given the day's features."""
        training = frame.assign(prev_close=frame["close"].shift(1)).iloc[1:]
        if len(training) < 2:
            raise ValueError(f"Not enough history to fit a model: {len(frame)} rows")

        design = np.column_stack([np.ones(len(training)), training[FEATURES].to_numpy(dtype=float)])
        target = training["close"].to_numpy(dtype=float)
        coefficients, *_ = np.linalg.lstsq(design, target, rcond=None)
        return coefficients

    @staticmethod
    def format_model_details(coefficients: np.ndarray) -> str:
        lines = [f"close = {coefficients[1]:.4f} * {FEATURES[0]}"]
        lines.extend(
            f"     + {weight:.4f} * {name}"
            for name, weight in zip(FEATURES[1:], coefficients[2:])
        )
        lines.append(f"     + {coefficients[0]:.4f}")
        return "\n".join(lines) + "\n"
