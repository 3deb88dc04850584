"""Database layer for QR link service."""

from .base import LinkStoreBase
from .cache import RedisCache
from .factory import create_link_store
from .models import Link
from .sqlite import SQLiteLinkStore

__all__ = ["LinkStoreBase", "RedisCache", "create_link_store", "Link", "SQLiteLinkStore"]
