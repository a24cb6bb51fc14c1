from datetime import date
from typing import Protocol

from .schemas import PredictionResponse


class BasePredictor(Protocol):

    async def predict(self, symbol: str, start_date: date, end_date: date) -> PredictionResponse:
        ...
