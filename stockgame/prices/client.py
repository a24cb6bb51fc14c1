# Standard Lib
import asyncio
from dataclasses import dataclass
from datetime import date
from typing import Optional

# Third Party
import aiohttp

# Bittensor
import bittensor
# Local
from .base import BasePriceClient
from .schemas import HistoricalPrice, PriceLookup

HISTORICAL_DATA_QUERY = """
query HistoricalData($symbol: String!, $startDate: String!, $endDate: String!) {
  historicalData(symbol: $symbol, startDate: $startDate, endDate: $endDate) {
    date
    open
    close
    high
    low
    volume
  }
}
"""

@dataclass
class APIConfig:
    endpoint: str
    timeout: float = 30.0
    headers: Optional[dict] = None


class PriceClient(BasePriceClient):
    """Reads daily price history from a GraphQL ``historicalData`` endpoint."""

    def __init__(self, endpoint: str, timeout: float = 30.0, *args, **kwargs):
        super().__init__(endpoint, *args, **kwargs)
        self.api_config = APIConfig(
            endpoint=endpoint,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @classmethod
    def from_config(cls, config: "bittensor.config") -> "PriceClient":
        return cls(endpoint=config.prices.endpoint, timeout=config.prices.timeout)

    async def fetch_history(self, symbol: str, start_date: date, end_date: date) -> list[HistoricalPrice]:
        """Fetch daily rows for ``symbol`` between two dates, both inclusive.

        Raises:
            aiohttp.ClientError: On HTTP client errors
            ValueError: When the endpoint answers with GraphQL errors
        """
        variables = {
            "symbol": symbol,
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
        }
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(
                self.api_config.endpoint,
                headers=self.api_config.headers,
                json={"query": HISTORICAL_DATA_QUERY, "variables": variables},
            ) as response:
                response.raise_for_status()
                data = await response.json()
                rows = HistoricalPrice.parse_response(data)
        bittensor.logging.debug(f"Fetched {len(rows)} rows for {symbol} from {start_date} to {end_date}")
        return rows

    async def fetch_close(self, symbol: str, on_date: date) -> PriceLookup:
        """Fetch the close of ``symbol`` on exactly ``on_date``.

        Transport and protocol errors are reported as a failed lookup rather
        than raised, so that callers can tell them apart from a missing row.
        """
        try:
            rows = await self.fetch_history(symbol, on_date, on_date)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            bittensor.logging.error(f"Failed to fetch close for {symbol} on {on_date}: {e}")
            return PriceLookup.failed(str(e) or e.__class__.__name__)

        for row in rows:
            if row.date == on_date:
                return PriceLookup.found(row.close)

        bittensor.logging.warning(f"No close available for {symbol} on {on_date}")
        return PriceLookup.empty()
