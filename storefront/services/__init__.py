# Upstream clients and helpers

from .commerce_client import CommerceClient
from .cms_client import CMSClient

__all__ = ["CommerceClient", "CMSClient"]
