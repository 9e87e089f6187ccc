# Core modules

from .config import Settings, get_settings
from .session import CartSessions

__all__ = ["Settings", "get_settings", "CartSessions"]
