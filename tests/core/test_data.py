# Standard Lib
import pytest
from datetime import datetime, timezone

# Third Party
from pydantic import ValidationError

# Local
from stockgame.core.data import GameOutcome, GameRecord


@pytest.fixture
def provisional_game():
    return GameRecord.provisional(
        game_id="1733178600000",
        owner_id="trader@example.com",
        symbol="AAPL",
        user_prediction="231.50",
    )


class TestGameRecord:
    """Test cases for GameRecord model."""

    def test_provisional_derives_created_at_from_id(self, provisional_game):
        assert provisional_game.created_at == datetime(2024, 12, 2, 22, 30, tzinfo=timezone.utc)
        assert provisional_game.outcome == GameOutcome.PROVISIONAL
        assert provisional_game.coins_earned == 0
        assert provisional_game.is_provisional
        assert not provisional_game.won

    def test_provisional_with_coins_is_rejected(self, provisional_game):
        with pytest.raises(ValidationError):
            GameRecord(**{**provisional_game.model_dump(), "coins_earned": 100})

    def test_with_outcome_returns_copy(self, provisional_game):
        final = provisional_game.with_outcome(GameOutcome.WON, 200)
        assert final.game_id == provisional_game.game_id
        assert final.outcome == GameOutcome.WON
        assert final.coins_earned == 200
        assert final.won
        assert provisional_game.outcome == GameOutcome.PROVISIONAL

    def test_record_is_frozen(self, provisional_game):
        with pytest.raises(ValidationError):
            provisional_game.coins_earned = 5

    def test_json_round_trip_keeps_outcome(self, provisional_game):
        final = provisional_game.with_outcome(GameOutcome.LOST, -10)
        restored = GameRecord.model_validate_json(final.model_dump_json())
        assert restored == final
        assert restored.outcome == "lost"
