"""One-shot repair of stored expiration values."""

import logging
from dataclasses import dataclass
from typing import Optional

from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .timestamps import RepairAction, repair_expiration


@dataclass
class RepairReport:
    scanned: int = 0
    normalized: int = 0
    cleared: int = 0

    @property
    def modified(self) -> int:
        return self.normalized + self.cleared


async def normalize_stored_expirations(
    store: LinkStoreBase,
    cache: Optional[RedisCache] = None,
    logger: Optional[logging.Logger] = None,
) -> RepairReport:
    """Rewrite every stored expiresAt into canonical form.

    Valid but non-canonical values are normalized, unparseable values are
    set to NULL. Each row is written at most once and a log line is emitted
    per modified row. Cached records of modified rows are invalidated.

    Args:
        store: Open link store
        cache: Optional cache to invalidate
        logger: Optional logger

    Returns:
        Counts of scanned and modified rows
    """
    logger = logger or logging.getLogger(__name__)
    report = RepairReport()

    for link_id, short_id, stored in await store.list_expirations():
        report.scanned += 1
        result = repair_expiration(stored)

        if result.action is RepairAction.UNCHANGED:
            continue

        if result.action is RepairAction.CLEAR:
            logger.info(f'Clearing invalid expiresAt for id={link_id} (value="{stored}")')
            await store.update_expires_at(link_id, None)
            report.cleared += 1
        else:
            logger.info(f"Normalizing id={link_id}: {stored} -> {result.value}")
            await store.update_expires_at(link_id, result.value)
            report.normalized += 1

        if cache is not None:
            await cache.delete(short_id)

    logger.info(
        f"Normalization complete: scanned={report.scanned} "
        f"normalized={report.normalized} cleared={report.cleared}"
    )
    return report
