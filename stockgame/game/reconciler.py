from datetime import datetime
from typing import Iterable

import bittensor

from ..core.calendar import MarketCalendar
from ..core.data import GameOutcome, GameRecord


class ProvisionalReconciler:
    """Decides, at read time, whether a stored game must be shown as provisional.

    A game created on a Sunday concerns Monday's close, so until Monday's
    result-readiness time has passed it is always presented as provisional
    with no coins, whatever was stored. Nothing is written back.
    """

    def __init__(self, calendar: MarketCalendar):
        self.calendar = calendar

    def present_one(self, game: GameRecord, now: datetime) -> GameRecord:
        if not self.calendar.is_origin_on_sunday(game.created_at):
            return game

        if not self.calendar.sunday_grace_passed(now, game.created_at):
            return game.with_outcome(GameOutcome.PROVISIONAL, 0)

        if game.is_provisional:
            # Nothing re-evaluates Sunday games once their grace period ends.
            bittensor.logging.debug(f"Game {game.game_id} is still provisional after its grace period")
        return game

    def present(self, games: Iterable[GameRecord], now: datetime) -> list[GameRecord]:
        return [self.present_one(game, now) for game in games]
