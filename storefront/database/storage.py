"""Persisted storage slots for carts"""

import os
import logging
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StorageSlot(Protocol):
    """A single named key holding one serialized value (or nothing)"""

    key: str

    def read(self) -> Optional[str]: ...

    def write(self, value: str) -> None: ...

    def clear(self) -> None: ...


class MemoryStorage:
    """In-memory slot, lives as long as the process"""

    def __init__(self, key: str):
        self.key = key
        self.value: Optional[str] = None

    def read(self) -> Optional[str]:
        return self.value

    def write(self, value: str) -> None:
        self.value = value

    def clear(self) -> None:
        self.value = None


class FileStorage:
    """
    JSON file slot.

    The whole value is rewritten on every write through a temporary file and
    an atomic rename, so a reader never sees a half-written cart.
    """

    def __init__(self, directory: str, key: str):
        self.key = key
        self.path = os.path.join(directory, f"{key}.json")
        os.makedirs(directory, exist_ok=True)

    def read(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            return f.read()

    def write(self, value: str) -> None:
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp_path, self.path)

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
