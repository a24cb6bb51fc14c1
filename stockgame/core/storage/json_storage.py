import argparse
import fcntl
import json
import os
import threading
import time
from contextlib import contextmanager
from datetime import timedelta
from logging import getLogger
from pathlib import Path
from typing import Callable, Optional

from .base import BaseStorage

logger = getLogger(__name__)

DEFAULT_PATH = Path("~/.stockgame/data")


def _read_json(file_path: Path) -> Optional[dict]:
    """Read JSON file and return deserialized data."""
    try:
        with file_path.open("r") as f:
            return json.load(f)
    except (json.JSONDecodeError, FileNotFoundError):
        logger.error(f"Error loading/decoding {file_path.as_posix()} file.")
        return None


class JsonStorage(BaseStorage):
    """Keeps every key of a namespace in one JSON file.

    Each entry is stored as ``{"value": ..., "expires_at": epoch seconds | null}``.
    Writes go through a temporary file and ``os.replace`` while holding an
    exclusive ``flock`` on ``<namespace>.json.lock``, so several instances or
    processes sharing a directory on one POSIX host do not lose each other's
    keys. The lock is advisory and does not work across network filesystems;
    multi-host deployments should use the SQLite backend on local disk or a
    real database.

    A store file that exists but cannot be decoded reads as empty, and ``put``
    refuses to overwrite it so that the keys it held can still be recovered.
    """

    def __init__(self, config=None, namespace: str = "games", clock: Callable[[], float] = time.time):
        self.config = config or self.get_config()
        self.namespace = namespace
        self.clock = clock
        self._lock = threading.Lock()

        self.path = (
            Path(self.config.json_path).expanduser()
            if getattr(self.config, "json_path", None)
            else DEFAULT_PATH.expanduser()
        )
        logger.info(f"Initializing storage with path: {self.path.absolute()}")
        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            logger.error(f"Failed to create directory {self.path.absolute()}: {str(e)}")
            raise

    @classmethod
    def add_args(cls, parser: "argparse.ArgumentParser"):
        """Add Json storage-specific arguments to parser."""
        parser.add_argument(
            "--json_path",
            type=str,
            default=os.getenv("JSON_PATH", DEFAULT_PATH),
            help="Directory holding the JSON store files",
        )

    @property
    def data_file(self) -> Path:
        return self.path / f"{self.namespace}.json"

    @property
    def lock_file(self) -> Path:
        return self.path / f"{self.namespace}.json.lock"

    @contextmanager
    def _file_lock(self):
        with self._lock, self.lock_file.open("a") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    def _load(self) -> dict:
        if not self.data_file.exists():
            return {}
        data = _read_json(self.data_file)
        return data if isinstance(data, dict) else {}

    def _load_for_write(self) -> dict:
        if not self.data_file.exists():
            return {}
        data = _read_json(self.data_file)
        if not isinstance(data, dict):
            raise ValueError(
                f"Refusing to overwrite {self.data_file.absolute()}: existing content is not a JSON object"
            )
        return data

    def _write(self, data: dict) -> None:
        tmp_file = self.data_file.with_suffix(".json.tmp")
        try:
            with tmp_file.open("w") as f:
                json.dump(data, f, indent=4)
            os.replace(tmp_file, self.data_file)
        except Exception as e:
            logger.error(f"Error saving data to {self.data_file.absolute()}: {str(e)}")
            raise

    def _is_live(self, entry: dict, now: float) -> bool:
        expires_at = entry.get("expires_at")
        return expires_at is None or expires_at > now

    def put(self, key: str, value: str, ttl: Optional[timedelta] = None) -> None:
        now = self.clock()
        expires_at = now + ttl.total_seconds() if ttl is not None else None
        with self._file_lock():
            data = self._load_for_write()
            # Expired entries are dropped whenever the file is rewritten.
            data = {k: v for k, v in data.items() if isinstance(v, dict) and self._is_live(v, now)}
            data[key] = {"value": value, "expires_at": expires_at}
            self._write(data)
        logger.debug(f"Saved key {key} to {self.data_file.absolute()}")

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._load().get(key)
        if not isinstance(entry, dict) or not self._is_live(entry, self.clock()):
            return None
        return entry.get("value")

    def get_all(self) -> list[tuple[str, str]]:
        now = self.clock()
        with self._lock:
            data = self._load()
        return [
            (key, entry.get("value"))
            for key, entry in data.items()
            if isinstance(entry, dict) and self._is_live(entry, now)
        ]
