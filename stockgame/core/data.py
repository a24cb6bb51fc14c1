from enum import StrEnum
from datetime import datetime, timezone

from pydantic import (
    BaseModel,
    Field,
    model_validator,
)


class GameBaseModel(BaseModel):

    class Config:
        use_enum_values = True


class GameOutcome(StrEnum):
    """
    The outcome of a game.
    """
    PROVISIONAL = "provisional"
    WON = "won"
    LOST = "lost"


class GameRecord(GameBaseModel):
    """
    A single prediction game submitted by a user.
    """

    class Config:
        use_enum_values = True
        frozen = True

    game_id: str = Field(description="Creation instant in epoch milliseconds. e.g. 1733163000000")

    created_at: datetime = Field(description="The instant the game was created. e.g. 2024-12-02 17:30:00+00:00")

    owner_id: str = Field(description="Identifies the submitting user. e.g. trader@example.com")

    symbol: str = Field(description="The instrument as submitted. e.g. AAPL")

    user_prediction: str = Field(description="The predicted closing price as submitted. e.g. 231.50")

    outcome: GameOutcome = Field(default=GameOutcome.PROVISIONAL, description="provisional, won or lost")

    coins_earned: int = Field(default=0, description="Coins awarded (negative for a penalty). e.g. 100")

    @model_validator(mode="after")
    def _provisional_has_no_coins(self) -> "GameRecord":
        if self.outcome == GameOutcome.PROVISIONAL and self.coins_earned != 0:
            raise ValueError("provisional games cannot carry coins")
        return self

    @property
    def won(self) -> bool:
        return self.outcome == GameOutcome.WON

    @property
    def is_provisional(self) -> bool:
        return self.outcome == GameOutcome.PROVISIONAL

    @classmethod
    def provisional(cls, game_id: str, owner_id: str, symbol: str, user_prediction: str) -> "GameRecord":
        """Build a fresh provisional record whose creation instant is encoded in ``game_id``."""
        created_at = datetime.fromtimestamp(int(game_id) / 1000, tz=timezone.utc)
        return cls(
            game_id=game_id,
            created_at=created_at,
            owner_id=owner_id,
            symbol=symbol,
            user_prediction=user_prediction,
        )

    def with_outcome(self, outcome: GameOutcome, coins_earned: int) -> "GameRecord":
        """Return a copy of this record carrying ``outcome`` and ``coins_earned``."""
        return self.__class__(**{**self.model_dump(), "outcome": outcome, "coins_earned": coins_earned})
