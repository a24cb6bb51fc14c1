# Standard Lib
import datetime as dt
from enum import StrEnum
from typing import Optional

# Third Party
from pydantic import BaseModel, field_validator


class HistoricalPrice(BaseModel):
    """One daily row of price history."""

    date: dt.date
    open: float
    close: float
    high: float
    low: float
    volume: float

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value):
        """Accepts ISO dates as well as ``Dec 2, 2024`` style dates."""
        if isinstance(value, str) and not value[:1].isdigit():
            return dt.datetime.strptime(value.strip(), "%b %d, %Y").date()
        return value

    @field_validator("open", "close", "high", "low", "volume", mode="before")
    @classmethod
    def parse_number(cls, value):
        if isinstance(value, str):
            return float(value.replace(",", ""))
        return value

    @classmethod
    def parse_response(cls, data: dict) -> list["HistoricalPrice"]:
        """Parse a ``historicalData`` GraphQL response into rows.

        Args:
            data: Decoded JSON body, e.g. ``{"data": {"historicalData": [...]}}``

        Returns:
            list[HistoricalPrice]: Rows in the order the source returned them

        Raises:
            ValueError: If the response carries GraphQL errors
        """
        if data.get("errors"):
            messages = "; ".join(str(error.get("message", error)) for error in data["errors"])
            raise ValueError(f"GraphQL error: {messages}")
        rows = (data.get("data") or {}).get("historicalData") or []
        return [cls(**row) for row in rows]


class LookupStatus(StrEnum):
    FOUND = "found"
    EMPTY = "empty"
    FAILED = "failed"


class PriceLookup(BaseModel):
    """Result of asking for a single close.

    ``EMPTY`` means the source answered but had no row for the date;
    ``FAILED`` means the source could not be asked at all.
    """

    status: LookupStatus
    price: Optional[float] = None
    error: Optional[str] = None

    @classmethod
    def found(cls, price: float) -> "PriceLookup":
        return cls(status=LookupStatus.FOUND, price=price)

    @classmethod
    def empty(cls) -> "PriceLookup":
        return cls(status=LookupStatus.EMPTY)

    @classmethod
    def failed(cls, error: str) -> "PriceLookup":
        return cls(status=LookupStatus.FAILED, error=error)
