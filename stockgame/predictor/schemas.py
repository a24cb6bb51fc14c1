from typing import Optional

from pydantic import BaseModel


class PredictionResponse(BaseModel):
    """Model output for one symbol over one history window."""

    data_points: int
    symbol: str
    date_range_start: str
    date_range_end: str
    last_known_date: str
    last_closing_price: float
    predicted_closing_price: float
    predicted_change: float
    model_details: str = ""
    error: Optional[str] = None
