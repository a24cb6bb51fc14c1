import argparse
import os
import threading
from datetime import datetime, timezone

import bittensor


class GameIdGenerator:
    """Issues epoch-millisecond game ids that strictly increase within a process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._last = 0

    def next_id(self, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        millis = int(now.timestamp() * 1000)
        with self._lock:
            # Two submissions within the same millisecond get consecutive ids.
            millis = max(millis, self._last + 1)
            self._last = millis
        return str(millis)


def add_args(parser: argparse.ArgumentParser):
    """Adds game engine arguments to the parser."""
    parser.add_argument(
        "--calendar.timezone",
        type=str,
        default=os.getenv("MARKET_TIMEZONE", "America/New_York"),
        help="Reference time zone of the exchange.",
    )
    parser.add_argument(
        "--calendar.market_open",
        type=str,
        default=os.getenv("MARKET_OPEN", "09:30"),
        help="Local opening bell, HH:MM.",
    )
    parser.add_argument(
        "--calendar.market_close",
        type=str,
        default=os.getenv("MARKET_CLOSE", "16:00"),
        help="Local closing bell, HH:MM.",
    )
    parser.add_argument(
        "--calendar.result_time",
        type=str,
        default=os.getenv("RESULT_TIME", "17:00"),
        help="Local time after which a weekday's close is authoritative, HH:MM.",
    )
    parser.add_argument(
        "--storage.backend",
        type=str,
        choices=["json", "sqlite"],
        default=os.getenv("STORAGE_BACKEND", "json"),
        help="Where game records are kept.",
    )
    parser.add_argument(
        "--prices.endpoint",
        type=str,
        default=os.getenv("HISTORICAL_GRAPHQL_ENDPOINT", "http://localhost:8080/graphql"),
        help="GraphQL endpoint serving historicalData.",
    )
    parser.add_argument(
        "--prices.timeout",
        type=float,
        default=float(os.getenv("PRICES_TIMEOUT", 30)),
        help="Total timeout in seconds for a price request.",
    )


def config(extra_args=None) -> "bittensor.config":
    """Returns the parsed configuration for the game engine.

    Args:
        extra_args: Optional callable that registers more arguments on the parser.
    """
    parser = argparse.ArgumentParser()
    bittensor.logging.add_args(parser)
    add_args(parser)
    if extra_args is not None:
        extra_args(parser)
    return bittensor.config(parser)
