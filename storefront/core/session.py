"""Session registry for carts"""

import re
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from ..database.carts import CartStore
from ..database.storage import StorageSlot, MemoryStorage, FileStorage

SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def memory_storage_factory(key: str) -> StorageSlot:
    return MemoryStorage(key)


def file_storage_factory(directory: str) -> Callable[[str], StorageSlot]:
    """Slots stored as ``<directory>/<key>.json``"""
    def factory(key: str) -> StorageSlot:
        return FileStorage(directory, key)
    return factory


class CartSessions:
    """
    Maps session IDs to their cart stores.

    Each session gets its own storage slot named ``<storage_key>-<session_id>``;
    the slot is read once, when the session's store is first requested.
    Stores unused for ``max_age_hours`` are evicted whenever a new session is
    opened; an evicted session reloads from its slot on its next request.
    """

    def __init__(
        self,
        storage_factory: Callable[[str], StorageSlot] = memory_storage_factory,
        storage_key: str = "bt-cart",
        max_age_hours: float = 24,
    ):
        self.storage_factory = storage_factory
        self.storage_key = storage_key
        self.max_age_hours = max_age_hours
        self.stores: dict[str, CartStore] = {}
        self.last_used: dict[str, datetime] = {}

    @staticmethod
    def new_session_id() -> str:
        return uuid.uuid4().hex

    @staticmethod
    def validate_session_id(session_id: str) -> str:
        if not SESSION_ID_PATTERN.match(session_id or ""):
            raise ValueError(f"Invalid session ID: {session_id!r}")
        return session_id

    def get(self, session_id: str) -> Optional[CartStore]:
        """Get the store for a session if it has been opened"""
        return self.stores.get(session_id)

    def get_or_create(self, session_id: str) -> CartStore:
        """Get the store for a session, loading its slot on first use"""
        self.validate_session_id(session_id)
        store = self.stores.get(session_id)
        if store is None:
            self.cleanup_old_sessions()
            slot = self.storage_factory(f"{self.storage_key}-{session_id}")
            store = CartStore(slot)
            self.stores[session_id] = store
        self.last_used[session_id] = datetime.now(timezone.utc)
        return store

    def drop(self, session_id: str) -> bool:
        """Forget a session's store (its persisted slot is left alone)"""
        self.last_used.pop(session_id, None)
        if session_id in self.stores:
            del self.stores[session_id]
            return True
        return False

    def cleanup_old_sessions(self, max_age_hours: Optional[float] = None) -> int:
        """Evict stores not used for max_age_hours"""
        if max_age_hours is None:
            max_age_hours = self.max_age_hours
        now = datetime.now(timezone.utc)
        old_sessions = [
            sid for sid, used in self.last_used.items()
            if (now - used).total_seconds() > max_age_hours * 3600
        ]
        for sid in old_sessions:
            self.drop(sid)
        return len(old_sessions)
