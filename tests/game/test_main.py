import json
import pytest
import tempfile
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from stockgame.core.data import GameRecord
from stockgame.core.errors import InvalidInput
from stockgame.core.storage.json_storage import JsonStorage
from stockgame.core.storage.sqlite_storage import SQLiteStorage
from stockgame.game.main import Game, main
from stockgame.predictor.regression import RegressionPredictor
from stockgame.prices.client import PriceClient

OWNER = "trader@example.com"


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as directory:
        yield directory


def make_config(temp_dir: str, command: str = "list", backend: str = "json", **kwargs) -> SimpleNamespace:
    return SimpleNamespace(
        logging=SimpleNamespace(debug=False, trace=False),
        calendar=SimpleNamespace(
            timezone="America/New_York",
            market_open="09:30",
            market_close="16:00",
            result_time="17:00",
        ),
        storage=SimpleNamespace(backend=backend),
        json_path=temp_dir,
        sqlite_path=temp_dir,
        prices=SimpleNamespace(endpoint="http://prices.test/graphql", timeout=5.0),
        command=command,
        owner=OWNER,
        symbol=kwargs.get("symbol"),
        prediction=kwargs.get("prediction"),
    )


@pytest.fixture(autouse=True)
def mock_set_config():
    with patch("stockgame.game.main.bittensor.logging.set_config") as set_config:
        yield set_config


class TestGame:
    def test_init_wires_json_backend(self, temp_dir, mock_set_config):
        game = Game(config=make_config(temp_dir))

        assert isinstance(game.storage.store, JsonStorage)
        assert isinstance(game.price_client, PriceClient)
        assert isinstance(game.predictor, RegressionPredictor)
        assert game.orchestrator.storage is game.storage
        assert game.price_client.api_config.endpoint == "http://prices.test/graphql"
        mock_set_config.assert_called_once()

    def test_init_wires_sqlite_backend(self, temp_dir):
        game = Game(config=make_config(temp_dir, backend="sqlite"))
        assert isinstance(game.storage.store, SQLiteStorage)

    @pytest.mark.asyncio
    async def test_run_list_without_games(self, temp_dir):
        game = Game(config=make_config(temp_dir))
        assert await game.run() == []

    @pytest.mark.asyncio
    async def test_run_submit(self, temp_dir):
        game = Game(config=make_config(temp_dir, command="submit", symbol="AAPL", prediction="231.5"))
        record = GameRecord.provisional("1733178600000", OWNER, "AAPL", "231.5")
        game.orchestrator.submit = AsyncMock(return_value=record)

        result = await game.run()

        game.orchestrator.submit.assert_awaited_once_with(owner_id=OWNER, symbol="AAPL", user_prediction="231.5")
        assert result == [record.model_dump(mode="json")]

    @pytest.mark.asyncio
    async def test_submitted_game_is_listed(self, temp_dir):
        config = make_config(temp_dir, command="submit", symbol="AAPL", prediction="231.5")
        game = Game(config=config)
        game.orchestrator.should_evaluate = MagicMock(return_value=False)

        (submitted,) = await game.run()
        listed = game.orchestrator.list_for(OWNER, now=datetime.now(timezone.utc))

        assert [g.game_id for g in listed] == [submitted["game_id"]]


class TestMain:
    @pytest.mark.asyncio
    async def test_main_prints_games(self, capsys):
        game = MagicMock()
        game.run = AsyncMock(return_value=[{"game_id": "1"}])
        with patch("stockgame.game.main.Game", return_value=game):
            await main()

        assert json.loads(capsys.readouterr().out) == [{"game_id": "1"}]

    @pytest.mark.asyncio
    async def test_main_reports_game_errors(self, capsys):
        game = MagicMock()
        game.run = AsyncMock(side_effect=InvalidInput("Prediction 'up' is not a number"))
        with patch("stockgame.game.main.Game", return_value=game):
            with pytest.raises(SystemExit):
                await main()

        output = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert output["error_type"] == "INVALID_INPUT"
