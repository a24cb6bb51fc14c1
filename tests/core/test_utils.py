# Standard Lib
import argparse
import threading
from datetime import datetime, timezone

# Local
from stockgame.core.utils import GameIdGenerator, add_args


class TestGameIdGenerator:
    """Test cases for GameIdGenerator."""

    def test_id_encodes_instant(self):
        now = datetime(2024, 12, 2, 22, 30, tzinfo=timezone.utc)
        assert GameIdGenerator().next_id(now) == "1733178600000"

    def test_same_instant_gets_increasing_ids(self):
        generator = GameIdGenerator()
        now = datetime(2024, 12, 2, 22, 30, tzinfo=timezone.utc)
        ids = [int(generator.next_id(now)) for _ in range(5)]
        assert ids == [1733178600000 + i for i in range(5)]

    def test_naive_instant_is_utc(self):
        assert GameIdGenerator().next_id(datetime(2024, 12, 2, 22, 30)) == "1733178600000"

    def test_concurrent_ids_are_unique(self):
        generator = GameIdGenerator()
        now = datetime(2024, 12, 2, 22, 30, tzinfo=timezone.utc)
        ids = []
        lock = threading.Lock()

        def worker():
            for _ in range(100):
                game_id = generator.next_id(now)
                with lock:
                    ids.append(game_id)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(set(ids)) == 400


class TestAddArgs:
    """Test cases for add_args."""

    def test_defaults(self, monkeypatch):
        for name in ["MARKET_TIMEZONE", "STORAGE_BACKEND", "HISTORICAL_GRAPHQL_ENDPOINT", "RESULT_TIME"]:
            monkeypatch.delenv(name, raising=False)
        parser = argparse.ArgumentParser()
        add_args(parser)
        args = vars(parser.parse_args([]))
        assert args["calendar.timezone"] == "America/New_York"
        assert args["calendar.result_time"] == "17:00"
        assert args["storage.backend"] == "json"
        assert args["prices.endpoint"] == "http://localhost:8080/graphql"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "sqlite")
        parser = argparse.ArgumentParser()
        add_args(parser)
        assert vars(parser.parse_args([]))["storage.backend"] == "sqlite"
