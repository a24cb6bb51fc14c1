from datetime import timedelta
from typing import Optional

import bittensor
from pydantic import ValidationError

from ..core.data import GameRecord
from ..core.storage.base import BaseStorage

GAME_RETENTION = timedelta(days=7)


class GameStorage:
    """Handles storage and retrieval of game records.

    Records are serialized to JSON and kept for ``GAME_RETENTION`` in the
    underlying key/value store, keyed by ``game_id``.
    """

    def __init__(self, store: BaseStorage, retention: timedelta = GAME_RETENTION):
        self.store = store
        self.retention = retention

    def save_game(self, game: GameRecord) -> None:
        """Save a game, replacing any record stored under the same id."""
        self.store.put(game.game_id, game.model_dump_json(), ttl=self.retention)
        bittensor.logging.debug(f"Saved game {game.game_id} ({game.outcome}) for {game.owner_id}")

    def load_game(self, game_id: str) -> Optional[GameRecord]:
        raw = self.store.get(game_id)
        return None if raw is None else GameRecord.model_validate_json(raw)

    def load_games(self) -> list[GameRecord]:
        """Load every live game. Entries that fail to parse are skipped."""
        games = []
        for game_id, raw in self.store.get_all():
            try:
                games.append(GameRecord.model_validate_json(raw))
            except (ValidationError, TypeError) as e:
                bittensor.logging.error(f"Error parsing game data for {game_id}: {e}")
                continue
        return games

    def load_games_for(self, owner_id: str) -> list[GameRecord]:
        return [game for game in self.load_games() if game.owner_id == owner_id]
