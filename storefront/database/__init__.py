# Cart persistence

from .carts import CartStore, DEFAULT_VARIANT_ID
from .storage import StorageSlot, MemoryStorage, FileStorage

__all__ = [
    "CartStore",
    "DEFAULT_VARIANT_ID",
    "StorageSlot",
    "MemoryStorage",
    "FileStorage",
]
