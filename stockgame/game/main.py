# Standard Lib
import argparse
import asyncio
import copy
import json

# Bittensor
import bittensor

# Local
from ..core.calendar import CalendarConfig, MarketCalendar
from ..core.errors import GameError
from ..core.storage.json_storage import JsonStorage
from ..core.storage.sqlite_storage import SQLiteStorage
from ..core.utils import config as game_config
from ..predictor.regression import RegressionPredictor
from ..prices.client import PriceClient
from .orchestrator import SubmissionOrchestrator
from .storage import GameStorage


def add_args(parser: argparse.ArgumentParser):
    """Adds the command line interface of the game runner."""
    JsonStorage.add_args(parser)
    SQLiteStorage.add_args(parser)
    parser.add_argument("command", choices=["submit", "list"], help="submit a game or list a user's games")
    parser.add_argument("--owner", type=str, required=True, help="The owner of the games, e.g. an email")
    parser.add_argument("--symbol", type=str, default=None, help="Symbol to predict, required by submit")
    parser.add_argument("--prediction", type=str, default=None, help="Predicted closing price, required by submit")


class Game:
    """Wires the game engine together from a parsed configuration.

    Args:
        config: Optional configuration object, parsed from the command line when omitted.
    """

    def __init__(self, config=None):
        self.config = copy.deepcopy(config or game_config(add_args))
        bittensor.logging.set_config(config=self.config.logging)

        self.calendar = MarketCalendar(CalendarConfig.from_config(self.config))
        if self.config.storage.backend == "sqlite":
            store = SQLiteStorage(config=self.config)
        else:
            store = JsonStorage(config=self.config)
        self.storage = GameStorage(store)

        self.price_client = PriceClient.from_config(self.config)
        self.predictor = RegressionPredictor(self.price_client)
        self.orchestrator = SubmissionOrchestrator(
            calendar=self.calendar,
            storage=self.storage,
            predictor=self.predictor,
            price_client=self.price_client,
        )
        bittensor.logging.info(
            f"Game engine ready: storage [magenta]{self.config.storage.backend}[/magenta], "
            f"calendar [magenta]{self.calendar.config.timezone}[/magenta]"
        )

    async def run(self) -> list[dict]:
        """Runs the configured command and returns the affected games."""
        if self.config.command == "submit":
            game = await self.orchestrator.submit(
                owner_id=self.config.owner,
                symbol=self.config.symbol,
                user_prediction=self.config.prediction,
            )
            return [game.model_dump(mode="json")]
        return [game.model_dump(mode="json") for game in self.orchestrator.list_for(self.config.owner)]


async def main():
    """Main async entry point for the game runner."""
    game = Game()
    try:
        games = await game.run()
    except GameError as e:
        print(json.dumps({"error": str(e), "error_type": e.error_type}))
        raise SystemExit(1)
    print(json.dumps(games, indent=4))

if __name__ == "__main__":
    asyncio.run(main())
