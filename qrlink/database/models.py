"""Data models for QR link service."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _coerce_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        # SQLite CURRENT_TIMESTAMP and naive Postgres timestamps are UTC.
        value = value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class Link:
    """Represents a row of the ``links`` table."""

    id: int
    short_id: str
    original_url: str
    expires_at: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "short_id": self.short_id,
            "original_url": self.original_url,
            "expires_at": self.expires_at,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Link":
        """Create from dictionary."""
        return cls(
            id=int(data["id"]),
            short_id=data["short_id"],
            original_url=data["original_url"],
            expires_at=data.get("expires_at"),
            created_at=_coerce_datetime(data.get("created_at")),
        )

    @classmethod
    def from_row(cls, row: Any) -> "Link":
        """Create from a database row using the ``links`` column names."""
        return cls(
            id=int(row["id"]),
            short_id=row["shortId"],
            original_url=row["originalUrl"],
            expires_at=row["expiresAt"],
            created_at=_coerce_datetime(row["createdAt"]),
        )
