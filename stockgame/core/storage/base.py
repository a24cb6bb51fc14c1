from abc import ABC, abstractmethod
from argparse import ArgumentParser
from datetime import timedelta
from typing import Optional

import bittensor


class BaseStorage(ABC):
    """Key/value store with advisory per-key retention.

    Expired keys are never returned. Implementations must make a single
    ``put`` or ``get`` atomic, including against other instances opened on
    the same location; no cross-key transactions are offered.
    """

    @classmethod
    @abstractmethod
    def add_args(cls, parser: "ArgumentParser"):
        """Add storage-specific arguments to the parser."""
        pass

    @abstractmethod
    def put(self, key: str, value: str, ttl: Optional[timedelta] = None) -> None:
        """Stores value under key, replacing any previous value."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Loads value by key. Returns None if the key is missing or expired."""
        pass

    @abstractmethod
    def get_all(self) -> list[tuple[str, str]]:
        """Returns every live (key, value) pair."""
        pass

    def get_config(self):
        """Returns the config object for specific storage based on class implementation."""
        parser = ArgumentParser()
        self.add_args(parser)
        return bittensor.config(parser)
