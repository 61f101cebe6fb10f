"""
Integration tests for the redirect endpoint and health check.
"""

import pytest
from datetime import date, datetime, timezone
from unittest.mock import Mock, patch

from landing.app import app
from landing.services.archive_provider import ArchiveProvider, set_archive_provider
from landing.services.archive_scraper import ArchiveScraper, ScrapeResult
from landing.services.selector import select_entry
from tests.conftest import make_entries

TUESDAY = datetime(2025, 1, 7, 12, 0, tzinfo=timezone.utc)
WEDNESDAY = datetime(2025, 1, 8, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def provider():
    scraper = Mock(spec=ArchiveScraper)
    scraper.scrape.return_value = ScrapeResult(entries=make_entries(50))
    provider = ArchiveProvider(scraper)
    set_archive_provider(provider)
    return provider


def _at(moment):
    return patch('landing.routes.redirect_routes.utcnow', return_value=moment)


class TestRedirect:

    def test_comic_day_redirects_to_xkcd(self, client, provider):
        with _at(TUESDAY):
            response = client.get('/')

        assert response.status_code == 302
        assert response.headers['Location'] == 'https://xkcd.com/'
        assert response.headers['X-Redirect-Reason'] == 'comic-day'
        provider.scraper.scrape.assert_not_called()

    def test_archive_day_redirects_to_selected_entry(self, client, provider):
        with _at(WEDNESDAY):
            response = client.get('/')

        expected = select_entry(make_entries(50), date(2025, 1, 8))
        assert response.status_code == 302
        assert response.headers['Location'] == expected.url
        assert response.headers['X-Redirect-Reason'] == 'archive-day'

    def test_same_day_same_destination(self, client, provider):
        with _at(WEDNESDAY):
            first = client.get('/').headers['Location']
        with _at(datetime(2025, 1, 8, 23, 59, tzinfo=timezone.utc)):
            second = client.get('/').headers['Location']

        assert first == second
        provider.scraper.scrape.assert_called_once()

    def test_post_and_redirect_path_are_accepted(self, client, provider):
        with _at(TUESDAY):
            assert client.post('/').status_code == 302
            assert client.get('/redirect').status_code == 302

    def test_empty_archive_redirects_to_fallback(self, client):
        scraper = Mock(spec=ArchiveScraper)
        scraper.scrape.return_value = ScrapeResult()
        set_archive_provider(ArchiveProvider(scraper))

        with _at(WEDNESDAY):
            response = client.get('/')

        assert response.status_code == 302
        assert response.headers['Location'] == 'https://apod.nasa.gov/apod/astropix.html'
        assert response.headers['X-Redirect-Reason'] == 'archive-unavailable'

    def test_unexpected_failure_redirects_to_fallback(self, client):
        broken = Mock(spec=ArchiveProvider)
        broken.get_entries.side_effect = RuntimeError("boom")
        set_archive_provider(broken)

        with _at(WEDNESDAY):
            response = client.get('/')

        assert response.status_code == 302
        assert response.headers['Location'] == 'https://apod.nasa.gov/apod/astropix.html'

    def test_configured_comic_url(self, client, provider, monkeypatch):
        monkeypatch.setenv('COMIC_URL', 'https://comic.example/')
        with _at(TUESDAY):
            response = client.get('/')
        assert response.headers['Location'] == 'https://comic.example/'

    def test_unknown_path_redirects_to_root(self, client):
        response = client.get('/does-not-exist')
        assert response.status_code == 302
        assert response.headers['Location'] == '/'


class TestHealth:

    def test_before_first_load(self, client, provider):
        response = client.get('/health')

        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'healthy'
        assert data['services']['archive']['state'] == 'uninitialized'
        assert data['services']['durable_cache']['configured'] is False

    def test_after_load(self, client, provider):
        provider.get_entries()

        data = client.get('/health').get_json()

        assert data['services']['archive']['state'] == 'ready'
        assert data['services']['archive']['source'] == 'scrape'
        assert data['services']['archive']['entry_count'] == 50

    def test_empty_archive_is_degraded(self, client):
        scraper = Mock(spec=ArchiveScraper)
        scraper.scrape.return_value = ScrapeResult()
        provider = ArchiveProvider(scraper)
        provider.get_entries()
        set_archive_provider(provider)

        response = client.get('/health')

        assert response.status_code == 503
        assert response.get_json()['status'] == 'degraded'

    def test_favicon_is_empty(self, client):
        assert client.get('/favicon.ico').status_code == 204
