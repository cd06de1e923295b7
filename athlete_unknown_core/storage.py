"""
Durable key-value storage for session progress and submission markers.

Values are JSON strings. Store implementations raise PersistenceError when
the underlying storage fails; callers decide whether that is fatal.
"""

import json
from abc import abstractmethod
from typing import Any, Dict, Iterable, Optional

from .config import CURRENT_SESSION_PREFIX, GAME_SUBMITTED_PREFIX, HISTORY_PREFIX
from .exceptions import PersistenceError


def get_current_session_key(sport: str, play_date: str) -> str:
    """Key of the mid-round progress record for a sport and date."""
    return f"{CURRENT_SESSION_PREFIX}{sport}_{play_date}"


def get_history_key(sport: str, play_date: str) -> str:
    """Key of the completed-round record for a sport and date."""
    return f"{HISTORY_PREFIX}{sport}_{play_date}"


def get_game_submission_key(sport: str, play_date: str) -> str:
    """Key of the idempotency marker for a result submission."""
    return f"{GAME_SUBMITTED_PREFIX}{sport}_{play_date}"


class KeyValueStore:
    """
    Abstract base class for durable string storage.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Args:
            key: Storage key

        Returns:
            The stored JSON string, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass

    @abstractmethod
    def keys(self) -> Iterable[str]:
        pass

    def get_json(self, key: str) -> Optional[Any]:
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Corrupt value stored under {key}: {e}") from e

    def set_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value))

    def remove_prefix(self, prefix: str) -> int:
        """
        Remove every key starting with prefix.

        Returns:
            Number of removed keys
        """
        matching = [key for key in self.keys() if key.startswith(prefix)]
        for key in matching:
            self.remove(key)
        return len(matching)


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store, for tests and single-process use."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise PersistenceError(f"Only strings can be stored, got {type(value).__name__}")
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self) -> Iterable[str]:
        return list(self.data.keys())
