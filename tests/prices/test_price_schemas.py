# Standard Lib
import pytest
from datetime import date

# Third Party
from pydantic import ValidationError

# Local
from stockgame.prices.schemas import HistoricalPrice, LookupStatus, PriceLookup


class TestHistoricalPrice:
    """Test cases for HistoricalPrice model."""

    def test_parses_numeric_strings_with_separators(self):
        row = HistoricalPrice(
            date="2024-12-02", open="237.27", close="239.59", high="240.79", low="237.16", volume="48,137,100"
        )
        assert row.date == date(2024, 12, 2)
        assert row.close == 239.59
        assert row.volume == 48137100.0

    def test_parses_month_name_dates(self):
        row = HistoricalPrice(date="Dec 2, 2024", open=1, close=2, high=3, low=0.5, volume=10)
        assert row.date == date(2024, 12, 2)

    def test_rejects_garbage(self):
        with pytest.raises(ValidationError):
            HistoricalPrice(date="2024-12-02", open="n/a", close=1, high=1, low=1, volume=1)

    def test_parse_response(self):
        data = {
            "data": {
                "historicalData": [
                    {"date": "Dec 2, 2024", "open": "1", "close": "2", "high": "3", "low": "0.5", "volume": "100"},
                    {"date": "Nov 29, 2024", "open": "1", "close": "1.5", "high": "3", "low": "0.5", "volume": "100"},
                ]
            }
        }
        rows = HistoricalPrice.parse_response(data)
        assert [row.date for row in rows] == [date(2024, 12, 2), date(2024, 11, 29)]

    def test_parse_response_without_rows(self):
        assert HistoricalPrice.parse_response({"data": {"historicalData": None}}) == []
        assert HistoricalPrice.parse_response({"data": None}) == []

    def test_parse_response_with_errors(self):
        with pytest.raises(ValueError, match="symbol not found"):
            HistoricalPrice.parse_response({"errors": [{"message": "symbol not found"}]})


class TestPriceLookup:
    """Test cases for PriceLookup model."""

    def test_found(self):
        lookup = PriceLookup.found(100.3)
        assert lookup.status == LookupStatus.FOUND
        assert lookup.price == 100.3

    def test_empty(self):
        lookup = PriceLookup.empty()
        assert lookup.status == LookupStatus.EMPTY
        assert lookup.price is None

    def test_failed(self):
        lookup = PriceLookup.failed("connection refused")
        assert lookup.status == LookupStatus.FAILED
        assert lookup.error == "connection refused"
