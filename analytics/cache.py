"""Time-boxed result cache in front of the aggregation pipeline.

Entries live in the storage collaborator (a table in production). Expiry is
checked on every read, so purging expired rows only reclaims space. Reads
propagate storage failures; writes log and swallow them because the cache
is an optimization and must never fail a query.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from .errors import StorageError
from .formulas import AVG_ORDER_VALUE

logger = logging.getLogger(__name__)

DEFAULT_TTL_MINUTES = 15


@dataclass(frozen=True)
class CacheEntry:
    key: str
    user_id: int
    data: Any
    expires_at: datetime
    created_at: Optional[datetime] = None

    def is_expired(self, now):
        return now >= self.expires_at


def build_fingerprint(query, avg_order_value=AVG_ORDER_VALUE):
    """
    Deterministic cache key for an AnalyticsQuery.

    Filter lists are sorted first so that reordered but otherwise identical
    queries share an entry. The average order value is part of the key
    because ROI in the cached payload depends on it.
    """
    parts = [
        'analytics',
        str(query.user_id),
        query.start_date,
        query.end_date,
        ','.join(sorted(query.platforms)),
        ','.join(sorted(query.campaigns)),
        ','.join(sorted(query.metrics)),
        query.group_by,
        str(avg_order_value),
    ]
    return '_'.join(parts)


class ResultCache:
    """get/set/purge over a store exposing ``cache_get``, ``cache_set`` and ``cache_purge_expired``."""

    def __init__(self, store, ttl_minutes=DEFAULT_TTL_MINUTES, clock=datetime.utcnow):
        self.store = store
        self.ttl_minutes = ttl_minutes
        self.clock = clock

    def get(self, fingerprint, user_id):
        """Return the live CacheEntry for the key, or None if absent or expired."""
        entry = self.store.cache_get(fingerprint, user_id)
        if entry is None:
            logger.debug("Analytics cache miss for %s", fingerprint)
            return None
        if entry.is_expired(self.clock()):
            logger.debug("Analytics cache entry for %s expired at %s", fingerprint, entry.expires_at)
            return None
        logger.debug("Analytics cache hit for %s", fingerprint)
        return entry

    def set(self, fingerprint, user_id, data, filters=None, ttl_minutes=None):
        """
        Upsert ``data`` under the key with a fresh expiry measured from now.

        Returns:
            bool: True if the entry was written, False if the write was skipped
                  because the payload could not be serialized or the store failed.
        """
        try:
            json.dumps(data)
            json.dumps(filters or {})
        except (TypeError, ValueError) as e:
            logger.warning("Skipping analytics cache write for %s: payload not serializable (%s)", fingerprint, e)
            return False

        ttl = self.ttl_minutes if ttl_minutes is None else ttl_minutes
        expires_at = self.clock() + timedelta(minutes=ttl)
        try:
            self.store.cache_set(fingerprint, user_id, data, filters or {}, expires_at)
        except StorageError as e:
            logger.warning("Analytics cache write for %s failed: %s", fingerprint, e)
            return False
        return True

    def stats(self):
        """Entry counts and age range from the store, with expiry judged against now."""
        return self.store.cache_stats(self.clock())

    def purge_expired(self):
        """Delete entries that expired before now. Returns the number removed."""
        removed = self.store.cache_purge_expired(self.clock())
        if removed:
            logger.info("Purged %d expired analytics cache entries", removed)
        return removed
