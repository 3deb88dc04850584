"""SQLite implementation of the link store."""

import asyncio
import logging
import os
import sqlite3
import threading
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from ..exceptions import DuplicateShortIdError, StoreError
from .base import LinkStoreBase
from .models import Link


T = TypeVar("T")

MEMORY_DB = ":memory:"


class SQLiteLinkStore(LinkStoreBase):
    """SQLite link store.

    Holds one long-lived connection. Blocking sqlite3 calls run in the default
    executor and are serialized on a lock, since the connection is shared
    between executor threads.
    """

    CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS links (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        shortId TEXT NOT NULL UNIQUE,
        originalUrl TEXT NOT NULL,
        expiresAt TEXT,
        createdAt DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """

    def __init__(
        self,
        db_path: str,
        timeout_seconds: float = 30.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize SQLite store.

        Args:
            db_path: Database file path, or ":memory:"
            timeout_seconds: How long to wait on a locked database file
            logger: Optional logger instance
        """
        super().__init__(db_path)
        self.db_path = db_path
        self.timeout_seconds = timeout_seconds
        self.logger = logger or logging.getLogger(__name__)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = asyncio.Lock()
        self._conn_lock = threading.Lock()

    async def _run(self, func: Callable[[sqlite3.Connection], T]) -> T:
        if self._conn is None:
            raise StoreError("SQLite store is not open")
        conn = self._conn

        def _locked() -> T:
            # Held by the worker thread itself, so a cancelled caller cannot
            # release it while the statement is still running.
            with self._conn_lock:
                return func(conn)

        async with self._lock:
            return await asyncio.get_running_loop().run_in_executor(None, _locked)

    async def open(self) -> None:
        if self._conn is not None:
            return

        if self.db_path != MEMORY_DB:
            parent = os.path.dirname(os.path.abspath(self.db_path))
            os.makedirs(parent, exist_ok=True)

        self.logger.info(f"Opening SQLite database at {self.db_path}")
        try:
            conn = sqlite3.connect(
                self.db_path,
                timeout=self.timeout_seconds,
                check_same_thread=False,
            )
            conn.row_factory = sqlite3.Row
            with conn:
                conn.execute(self.CREATE_TABLE_SQL)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to open SQLite database: {e}") from e
        self._conn = conn

    async def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        def _close() -> None:
            with self._conn_lock:
                conn.close()

        async with self._lock:
            await asyncio.get_running_loop().run_in_executor(None, _close)
        self.logger.info("SQLite connection closed")

    async def create(
        self,
        short_id: str,
        original_url: str,
        expires_at: Optional[str] = None,
    ) -> Link:
        def _insert(conn: sqlite3.Connection) -> Link:
            with conn:
                cursor = conn.execute(
                    "INSERT INTO links (shortId, originalUrl, expiresAt) VALUES (?, ?, ?)",
                    (short_id, original_url, expires_at),
                )
                row = conn.execute(
                    "SELECT * FROM links WHERE id = ?", (cursor.lastrowid,)
                ).fetchone()
            return Link.from_row(row)

        try:
            link = await self._run(_insert)
        except sqlite3.IntegrityError as e:
            raise DuplicateShortIdError(f"Short ID already exists: {short_id}") from e
        except sqlite3.Error as e:
            raise StoreError(f"Error creating link: {e}") from e

        self.logger.debug(f"Inserted link id={link.id} shortId={short_id}")
        return link

    async def find_by_short_id(self, short_id: str) -> Optional[Link]:
        def _select(conn: sqlite3.Connection) -> Optional[Any]:
            return conn.execute(
                "SELECT * FROM links WHERE shortId = ? LIMIT 1", (short_id,)
            ).fetchone()

        try:
            row = await self._run(_select)
        except sqlite3.Error as e:
            raise StoreError(f"Error looking up short ID: {e}") from e

        return Link.from_row(row) if row else None

    async def list_expirations(self) -> List[Tuple[int, str, str]]:
        def _select(conn: sqlite3.Connection) -> List[Tuple[int, str, str]]:
            rows = conn.execute(
                "SELECT id, shortId, expiresAt FROM links WHERE expiresAt IS NOT NULL ORDER BY id"
            ).fetchall()
            return [(row["id"], row["shortId"], row["expiresAt"]) for row in rows]

        try:
            return await self._run(_select)
        except sqlite3.Error as e:
            raise StoreError(f"Error listing expirations: {e}") from e

    async def update_expires_at(self, link_id: int, expires_at: Optional[str]) -> None:
        def _update(conn: sqlite3.Connection) -> None:
            with conn:
                conn.execute(
                    "UPDATE links SET expiresAt = ? WHERE id = ?", (expires_at, link_id)
                )

        try:
            await self._run(_update)
        except sqlite3.Error as e:
            raise StoreError(f"Error updating expiration: {e}") from e

    async def health_check(self) -> bool:
        try:
            await self._run(lambda conn: conn.execute("SELECT 1").fetchone())
            return True
        except (sqlite3.Error, StoreError) as e:
            self.logger.error(f"Health check failed: {e}")
            return False
