from typing import Iterable, Optional

from athlete_unknown_core.exceptions import PersistenceError
from athlete_unknown_core.storage import KeyValueStore

from .metrics import record_persistence_failure


class DjangoSessionStore(KeyValueStore):
    """
    Key-value store on top of a Django session.

    Values are kept as JSON strings so the records look the same as in any
    other store. The session backend writes them at the end of the request.
    """

    def __init__(self, session):
        self.session = session

    def get(self, key: str) -> Optional[str]:
        value = self.session.get(key)
        if value is not None and not isinstance(value, str):
            record_persistence_failure("get")
            raise PersistenceError(f"Unexpected {type(value).__name__} stored under {key}")
        return value

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            record_persistence_failure("set")
            raise PersistenceError(f"Only strings can be stored, got {type(value).__name__}")
        self.session[key] = value

    def remove(self, key: str) -> None:
        self.session.pop(key, None)

    def keys(self) -> Iterable[str]:
        return list(self.session.keys())
