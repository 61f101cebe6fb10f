#!/usr/bin/env python3
"""
Archive provider: in-process cache -> durable cache -> scrape.

The entry list is loaded at most once per process and handed out as a tuple,
so no caller can change what later requests see. Concurrent first callers
wait on one lock; whoever gets it first does the work and the rest find the
list already in memory.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ..cache_manager import ArchiveCache, NullArchiveCache, get_archive_cache
from ..errors import LandingPageError
from ..lib.app_config import CACHE_KEY, get_bool_value, get_config_value, get_fetch_timeout
from ..models import ArchiveEntry
from .archive_scraper import ArchiveScraper

# Create logger for this module
logger = logging.getLogger(__name__)


class ProviderState(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class LoadSource(Enum):
    DURABLE_CACHE = "durable-cache"
    SCRAPE = "scrape"


@dataclass
class LoadReport:
    """What the last load did; errors holds every failure that was recovered from"""
    source: LoadSource
    entry_count: int
    errors: List[LandingPageError] = field(default_factory=list)


class ArchiveProvider:
    """
    Serves the APOD archive entry list for the lifetime of the process.

    Args:
        scraper: Fetches entries from the archive index
        cache: Durable snapshot store (NullArchiveCache when none is configured)
        cache_key: Key of the snapshot in the durable store
        retry_empty: If True, an empty scrape leaves the provider
            uninitialized so the next call scrapes again; by default an
            empty scrape is kept like any other result
    """

    def __init__(
        self,
        scraper: ArchiveScraper,
        cache: Optional[ArchiveCache] = None,
        cache_key: str = CACHE_KEY,
        retry_empty: bool = False
    ):
        self.scraper = scraper
        self.cache = cache if cache is not None else NullArchiveCache()
        self.cache_key = cache_key
        self.retry_empty = retry_empty

        self._lock = threading.Lock()
        self._state = ProviderState.UNINITIALIZED
        self._entries: Optional[Tuple[ArchiveEntry, ...]] = None
        self.last_load: Optional[LoadReport] = None

    @property
    def state(self) -> ProviderState:
        return self._state

    def get_entries(self) -> Tuple[ArchiveEntry, ...]:
        """
        Return the archive entries, loading them on first use.

        Never fails because of the archive site or the durable cache; those
        failures show up as an empty tuple.
        """
        if self._state is ProviderState.READY:
            logger.debug(f"[Archive] Returning in-memory cached archive entries ({len(self._entries)} entries)")
            return self._entries

        with self._lock:
            # Another caller may have finished loading while we waited
            if self._state is ProviderState.READY:
                return self._entries

            self._state = ProviderState.LOADING
            try:
                entries, report = self._load()
            except BaseException:
                self._state = ProviderState.UNINITIALIZED
                raise

            self.last_load = report
            if not entries and self.retry_empty and report.source is LoadSource.SCRAPE:
                logger.warning("[Archive] Archive scrape returned no entries, will retry on next request")
                self._state = ProviderState.UNINITIALIZED
                return entries

            self._entries = entries
            self._state = ProviderState.READY
            return entries

    def _load(self):
        cached = self.cache.try_get(self.cache_key)
        errors = [cached.error] if cached.error else []

        if cached.hit:
            logger.info(f"[Archive] Loaded {len(cached.entries)} entries from durable cache")
            return tuple(cached.entries), LoadReport(LoadSource.DURABLE_CACHE, len(cached.entries), errors)

        result = self.scraper.scrape()
        if result.error:
            errors.append(result.error)

        if result.entries or not self.retry_empty:
            written = self.cache.put(self.cache_key, result.entries)
            if written.error:
                errors.append(written.error)

        return tuple(result.entries), LoadReport(LoadSource.SCRAPE, len(result.entries), errors)

    def reset(self):
        """Drop the in-memory entry list so the next call loads again"""
        with self._lock:
            self._state = ProviderState.UNINITIALIZED
            self._entries = None
            self.last_load = None


_provider: Optional[ArchiveProvider] = None
_provider_lock = threading.Lock()


def build_archive_provider() -> ArchiveProvider:
    """Wire a provider from app configuration"""
    scraper = ArchiveScraper(
        archive_url=get_config_value('archive_url'),
        base_url=get_config_value('archive_base_url'),
        timeout=get_fetch_timeout()
    )
    return ArchiveProvider(
        scraper=scraper,
        cache=get_archive_cache(get_config_value('cache_collection')),
        cache_key=get_config_value('cache_key'),
        retry_empty=get_bool_value('retry_empty_scrape')
    )


def get_archive_provider() -> ArchiveProvider:
    """Process-wide provider, built on first use"""
    global _provider
    if _provider is None:
        with _provider_lock:
            if _provider is None:
                _provider = build_archive_provider()
    return _provider


def set_archive_provider(provider: Optional[ArchiveProvider]):
    """Replace the process-wide provider (None forces a rebuild on next use)"""
    global _provider
    with _provider_lock:
        _provider = provider
