from datetime import date
from typing import Protocol

from .schemas import HistoricalPrice, PriceLookup

class BasePriceClient(Protocol):


    def __init__(self, endpoint: str, *args, **kwargs):
        self.endpoint = endpoint


    async def fetch_history(self, symbol: str, start_date: date, end_date: date) -> list[HistoricalPrice]:
        ...

    async def fetch_close(self, symbol: str, on_date: date) -> PriceLookup:
        ...
