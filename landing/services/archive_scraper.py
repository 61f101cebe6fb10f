#!/usr/bin/env python3
"""
APOD archive index scraper

The index page lists every picture as a line of the form

    2024 December 31:  <a href="ap241231.html">Title</a><br>

Only anchors whose href is an APOD permalink (ap + YYMMDD + .html) are kept.
The date label is the text in front of the anchor on the same row, up to
the first colon.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

import requests
from bs4 import BeautifulSoup, Tag

from ..errors import FetchError, LandingPageError, ParseError
from ..lib.app_config import ARCHIVE_BASE_URL, ARCHIVE_URL, DEFAULT_FETCH_TIMEOUT_SECONDS
from ..models import ArchiveEntry

# Create logger for this module
logger = logging.getLogger(__name__)

APOD_LINK_PATTERN = re.compile(r'ap[0-9]{6}\.html', re.ASCII)
APOD_DATE_PATTERN = re.compile(r'([0-9]{4}) ([A-Za-z]+) ([0-9]{1,2})', re.ASCII)

# English names only, matched case-insensitively; calendar.month_name follows
# the process locale
MONTHS = {
    name: number for number, name in enumerate((
        'January', 'February', 'March', 'April', 'May', 'June', 'July',
        'August', 'September', 'October', 'November', 'December',
    ), start=1)
}

# Tags that end one archive row and start the next
ROW_BREAK_TAGS = frozenset({'br', 'hr', 'a'})

FETCH_CHUNK_SIZE = 64 * 1024

USER_AGENT = 'landing-page/1.0 (+https://apod.nasa.gov/apod/archivepix.html reader)'


@dataclass
class ScrapeResult:
    """Entries from one scrape, plus the error that was recovered from (if any)"""
    entries: List[ArchiveEntry] = field(default_factory=list)
    error: Optional[LandingPageError] = None
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def is_apod_link(href: str) -> bool:
    """True for APOD permalinks like 'ap241231.html'"""
    return APOD_LINK_PATTERN.fullmatch(href) is not None


def parse_apod_date(text: str) -> Optional[date]:
    """
    Parse an archive date label such as '2024 December 31' or '2024 January 1'.

    Args:
        text: Label text; surrounding whitespace is ignored

    Returns:
        date, or None if the label is not '<year> <full month name> <day>'
        or does not name a real calendar day
    """
    match = APOD_DATE_PATTERN.fullmatch(text.strip())
    if not match:
        return None

    year, month_name, day = match.groups()
    month = MONTHS.get(month_name.capitalize())
    if month is None:
        return None

    try:
        return date(int(year), month, int(day))
    except ValueError:
        return None


def _row_text(siblings) -> str:
    parts = []
    for sibling in siblings:
        if isinstance(sibling, Tag):
            if sibling.name in ROW_BREAK_TAGS:
                break
            parts.append(sibling.get_text())
        else:
            parts.append(str(sibling))
    return ''.join(parts)


def _before_colon(text: str) -> Optional[str]:
    colon = text.find(':')
    if colon <= 0 or not text[:colon].strip():
        return None
    return text[:colon]


def _date_label(link) -> Optional[str]:
    """
    Text before the first colon of the row the anchor sits in.

    Normally the label precedes the anchor ('2024 December 31: <a>');
    when nothing labelled precedes it, the anchor's own text and what
    follows it on the row are used ('<a>2024 December 31</a>: Title').
    """
    before = ''.join(reversed(_row_text(link.previous_siblings)))
    label = _before_colon(before)
    if label is not None or before.strip():
        return label

    return _before_colon(link.get_text() + _row_text(link.next_siblings))


def parse_archive_html(html: str, base_url: str = ARCHIVE_BASE_URL) -> ScrapeResult:
    """
    Extract archive entries from the index page markup, in document order.

    Args:
        html: Archive index HTML
        base_url: Prefix joined with each permalink to build the entry URL

    Returns:
        ScrapeResult; carries a ParseError when the document has no links at all
    """
    soup = BeautifulSoup(html, 'html.parser')
    links = soup.find_all('a', href=True)

    if not links:
        logger.warning("[Scraper] No links found in archive page")
        return ScrapeResult(error=ParseError("No links found in archive page"))

    entries = []
    skipped = 0
    for link in links:
        href = link['href']
        if not is_apod_link(href):
            continue

        label = _date_label(link)
        entry_date = parse_apod_date(label) if label is not None else None
        if entry_date is None:
            logger.debug(f"[Scraper] Skipping {href}: unparsable date label {label!r}")
            skipped += 1
            continue

        entries.append(ArchiveEntry(date=entry_date, url=f"{base_url}{href}"))

    return ScrapeResult(entries=entries, skipped=skipped)


class ArchiveScraper:
    """
    Fetches and parses the APOD archive index.

    Args:
        archive_url: Index page to fetch
        base_url: Prefix for entry URLs
        timeout: Total download deadline in seconds
        session: Optional requests.Session (a new one is created if omitted)
    """

    def __init__(
        self,
        archive_url: str = ARCHIVE_URL,
        base_url: str = ARCHIVE_BASE_URL,
        timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None
    ):
        self.archive_url = archive_url
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers['User-Agent'] = USER_AGENT
        self.session = session
        self._clock = time.monotonic

    def fetch(self) -> str:
        """
        Download the index page.

        `timeout` bounds the whole download, not just each socket read: the
        body is streamed and abandoned once the deadline passes.

        Raises:
            FetchError: on connection failure, timeout or a non-2xx response
        """
        deadline = self._clock() + self.timeout
        try:
            with self.session.get(self.archive_url, timeout=self.timeout, stream=True) as response:
                response.raise_for_status()
                chunks = []
                for chunk in response.iter_content(chunk_size=FETCH_CHUNK_SIZE):
                    if self._clock() > deadline:
                        raise requests.exceptions.Timeout("download deadline exceeded")
                    chunks.append(chunk)
                encoding = response.encoding or response.apparent_encoding or 'utf-8'
        except requests.exceptions.Timeout as e:
            raise FetchError(f"Timeout after {self.timeout}s fetching {self.archive_url}") from e
        except requests.exceptions.RequestException as e:
            raise FetchError(f"HTTP request failed for {self.archive_url}: {e}") from e

        body = b''.join(chunks)
        try:
            return body.decode(encoding, errors='replace')
        except LookupError:
            return body.decode('utf-8', errors='replace')

    def scrape(self) -> ScrapeResult:
        """
        Fetch and parse the archive. Never raises; failures come back as an
        empty result with the error attached.
        """
        logger.info(f"[Scraper] Scraping APOD archive from {self.archive_url}")
        try:
            html = self.fetch()
        except FetchError as e:
            logger.error(f"[Scraper] {e}", exc_info=True)
            return ScrapeResult(error=e)

        try:
            result = parse_archive_html(html, self.base_url)
        except Exception as e:
            logger.error(f"[Scraper] Unexpected error while parsing APOD archive: {e}", exc_info=True)
            error = ParseError(str(e))
            error.__cause__ = e
            return ScrapeResult(error=error)

        if result.skipped:
            logger.warning(f"[Scraper] Skipped {result.skipped} archive link(s) with unparsable dates")
        logger.info(f"[Scraper] Scraped {len(result.entries)} APOD entries from archive")
        return result

    def get_entries(self) -> List[ArchiveEntry]:
        """Scrape and return the entries (empty on any failure)"""
        return self.scrape().entries
