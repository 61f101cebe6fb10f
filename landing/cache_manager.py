#!/usr/bin/env python3
"""
Module for managing the durable APOD archive snapshot in Firestore

A snapshot lives in a single document: the JSON-encoded entry list plus a
little metadata. There is no TTL; a present document is trusted until an
operator clears it.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from .errors import CacheReadError, CacheWriteError
from .models import ArchiveEntry, deserialize_snapshot, serialize_snapshot

# Create logger for this module
logger = logging.getLogger(__name__)

# Firestore call deadline, in seconds
FIRESTORE_TIMEOUT = 10.0


@dataclass
class CacheReadResult:
    """Outcome of a durable cache read; entries is None when nothing usable was found"""
    entries: Optional[List[ArchiveEntry]] = None
    error: Optional[CacheReadError] = None

    @property
    def hit(self) -> bool:
        return self.entries is not None


@dataclass
class CacheWriteResult:
    success: bool = True
    error: Optional[CacheWriteError] = None


class ArchiveCache(ABC):
    """Key-value store holding serialized archive snapshots"""

    @abstractmethod
    def try_get(self, key: str) -> CacheReadResult:
        """Read a snapshot; absence and read failures both come back as a miss"""

    @abstractmethod
    def put(self, key: str, entries: List[ArchiveEntry]) -> CacheWriteResult:
        """Overwrite the snapshot under key; never raises"""

    @abstractmethod
    def clear(self, key: str) -> bool:
        """Delete the snapshot under key"""


class NullArchiveCache(ArchiveCache):
    """Cache used when no durable store is configured: always empty"""

    def try_get(self, key: str) -> CacheReadResult:
        return CacheReadResult()

    def put(self, key: str, entries: List[ArchiveEntry]) -> CacheWriteResult:
        return CacheWriteResult()

    def clear(self, key: str) -> bool:
        return True


class FirestoreArchiveCache(ArchiveCache):
    """
    Snapshot store backed by one Firestore collection.

    Args:
        db: Firestore client
        collection_name: Collection holding snapshot documents (one per key)
        timeout: Deadline in seconds for each Firestore call

    Calls pass retry=None: each is attempted once, bounded by timeout.
    """

    def __init__(self, db, collection_name: str, timeout: float = FIRESTORE_TIMEOUT):
        self.db = db
        self.collection_name = collection_name
        self.timeout = timeout

    def _document(self, key: str):
        return self.db.collection(self.collection_name).document(key)

    def try_get(self, key: str) -> CacheReadResult:
        """
        Load the snapshot stored under key.

        Returns:
            CacheReadResult with entries on a hit; on a missing document the
            result is empty, on any error it is empty and carries the error
        """
        try:
            doc = self._document(key).get(retry=None, timeout=self.timeout)
            if not doc.exists:
                logger.info(f"[Cache] Snapshot {self.collection_name}/{key} does not exist yet")
                return CacheReadResult()

            data = doc.to_dict() or {}
            payload = data.get('snapshot')
            if not isinstance(payload, str):
                raise ValueError("snapshot field is missing or not a string")

            entries = deserialize_snapshot(payload)
            logger.debug(f"[Cache] Read {len(entries)} entries from {self.collection_name}/{key}")
            return CacheReadResult(entries=entries)
        except Exception as e:
            logger.warning(
                f"[Cache] Failed to load archive snapshot {self.collection_name}/{key}, "
                f"will fall back to scraping: {e}",
                exc_info=True
            )
            error = CacheReadError(str(e))
            error.__cause__ = e
            return CacheReadResult(error=error)

    def put(self, key: str, entries: List[ArchiveEntry]) -> CacheWriteResult:
        """
        Store entries under key, replacing any previous snapshot.

        Returns:
            CacheWriteResult; success is False (with the error attached) when
            the write failed
        """
        try:
            now = datetime.now(timezone.utc)
            self._document(key).set({
                'snapshot': serialize_snapshot(entries),
                'entry_count': len(entries),
                'cached_at': now,
            }, retry=None, timeout=self.timeout)
            logger.info(f"[Cache] Saved {len(entries)} entries to {self.collection_name}/{key}")
            return CacheWriteResult()
        except Exception as e:
            logger.error(f"[Cache] Failed to save archive snapshot {self.collection_name}/{key}: {e}", exc_info=True)
            error = CacheWriteError(str(e))
            error.__cause__ = e
            return CacheWriteResult(success=False, error=error)

    def clear(self, key: str) -> bool:
        try:
            self._document(key).delete(retry=None, timeout=self.timeout)
            logger.info(f"[Cache] Cleared snapshot {self.collection_name}/{key}")
            return True
        except Exception as e:
            logger.error(f"[Cache] Failed to clear snapshot {self.collection_name}/{key}: {e}", exc_info=True)
            return False


def get_archive_cache(collection_name: str) -> ArchiveCache:
    """
    Pick the durable cache for this process

    Args:
        collection_name: Firestore collection for snapshots

    Returns:
        FirestoreArchiveCache when Firestore is reachable, NullArchiveCache otherwise
    """
    from .db import get_db

    db = get_db()
    if db is None:
        logger.info("[Cache] Firestore not available, using in-process cache only")
        return NullArchiveCache()
    return FirestoreArchiveCache(db, collection_name)
