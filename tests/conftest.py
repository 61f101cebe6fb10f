"""
Pytest configuration and shared fixtures.
"""
import pytest
from datetime import date, timedelta
from unittest.mock import Mock

from landing.db import reset_db
from landing.lib.app_config import reload_config
from landing.models import ArchiveEntry
from landing.services.archive_provider import set_archive_provider
from landing.services.archive_scraper import ArchiveScraper, ScrapeResult


ARCHIVE_HTML = """
<html>
<head><title>Astronomy Picture of the Day Archive</title></head>
<body>
<center><h1>Astronomy Picture of the Day Archive</h1></center>
<p>
<a href="lib/apsubject.html">Index</a> - <a href="https://www.nasa.gov/">NASA</a>
</p>
<b>
2025 January 02:  <a href="ap250102.html">The Wolf-Rayet Star</a><br>
2025 January 1:  <a href="ap250101.html">Earthrise</a><br>
2024 December 31:  <a href="ap241231.html">Comet Tsuchinshan</a><br>
Someday, maybe:  <a href="ap241230.html">Broken Row</a><br>
2024 December 29  <a href="ap241229.html">Missing Colon</a><br>
</b>
<p><a href="archivepix.html">Refresh</a> | <a href="ap2412.html">Short link</a></p>
</body>
</html>
"""


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep tests away from Firestore and from any local .env settings."""
    for name in (
        'GCP_PROJECT', 'GOOGLE_CLOUD_PROJECT', 'PROJECT_ID',
        'ARCHIVE_URL', 'ARCHIVE_BASE_URL', 'ARCHIVE_FETCH_TIMEOUT',
        'ARCHIVE_CACHE_COLLECTION', 'ARCHIVE_CACHE_KEY',
        'COMIC_URL', 'FALLBACK_URL', 'RETRY_EMPTY_SCRAPE',
    ):
        monkeypatch.delenv(name, raising=False)
    reset_db()
    reload_config()
    set_archive_provider(None)

    yield

    set_archive_provider(None)
    reset_db()


@pytest.fixture
def archive_html():
    return ARCHIVE_HTML


def make_entries(count):
    start = date(2024, 1, 1)
    return [
        ArchiveEntry(start + timedelta(days=i), f"https://apod.nasa.gov/apod/ap{i:06d}.html")
        for i in range(count)
    ]


@pytest.fixture
def sample_entries():
    return make_entries(10)


@pytest.fixture
def mock_scraper():
    """Scraper double whose scrape() returns three entries."""
    scraper = Mock(spec=ArchiveScraper)
    scraper.scrape.return_value = ScrapeResult(entries=make_entries(3))
    return scraper
