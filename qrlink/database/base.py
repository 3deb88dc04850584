"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .models import Link


class LinkStoreBase(ABC):
    """Abstract base class for ``links`` table operations.

    A store is an explicitly constructed client: callers ``open()`` it once,
    share it across requests and ``close()`` it on shutdown.
    """

    def __init__(self, db_config: str):
        """Initialize link store.

        Args:
            db_config: Database connection string or file path
        """
        self.db_config = db_config

    @abstractmethod
    async def open(self) -> None:
        """Connect and create the ``links`` table if it does not exist."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close database connections."""
        pass

    @abstractmethod
    async def create(
        self,
        short_id: str,
        original_url: str,
        expires_at: Optional[str] = None,
    ) -> Link:
        """Insert a new link.

        Args:
            short_id: Short ID for the link
            original_url: Destination URL
            expires_at: Canonical expiration timestamp or None

        Returns:
            The stored link, including its assigned id and createdAt

        Raises:
            DuplicateShortIdError: If short_id is already taken
            StoreError: If the storage engine fails
        """
        pass

    @abstractmethod
    async def find_by_short_id(self, short_id: str) -> Optional[Link]:
        """Get a link by short ID.

        Returns:
            The link if found, None otherwise

        Raises:
            StoreError: If the storage engine fails
        """
        pass

    @abstractmethod
    async def list_expirations(self) -> List[Tuple[int, str, str]]:
        """List ``(id, shortId, expiresAt)`` for every row with a non-null expiration."""
        pass

    @abstractmethod
    async def update_expires_at(self, link_id: int, expires_at: Optional[str]) -> None:
        """Overwrite the expiration of one row (maintenance only)."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if database is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass
