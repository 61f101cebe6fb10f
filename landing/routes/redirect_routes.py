#!/usr/bin/env python3
"""
Redirect route: xkcd on comic days, a date-picked APOD archive entry otherwise
"""

import logging
from datetime import datetime, timezone

from flask import Blueprint, redirect

from ..errors import EmptyArchiveError
from ..lib.app_config import get_config_value
from ..models import RouteClass
from ..services.archive_provider import get_archive_provider
from ..services.day_router import classify
from ..services.selector import select_entry

# Create logger for this module
logger = logging.getLogger(__name__)

bp = Blueprint('redirect', __name__)

REASON_HEADER = 'X-Redirect-Reason'


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _redirect(url: str, reason: str):
    response = redirect(url, code=302)
    response.headers[REASON_HEADER] = reason
    response.headers['Cache-Control'] = 'no-store'
    return response


# The innermost rule registers first; url_for('redirect.landing_redirect') builds '/'
@bp.route('/redirect', methods=['GET', 'POST'])
@bp.route('/', methods=['GET', 'POST'])
def landing_redirect():
    """
    Send the visitor to today's destination.

    Always answers with a redirect; when no archive entry can be picked the
    visitor goes to the fallback page instead.
    """
    now = utcnow()
    route = classify(now)

    if route is RouteClass.COMIC_DAY:
        comic_url = get_config_value('comic_url')
        logger.info(f"[Redirect] {now.date()} is a comic day, redirecting to {comic_url}")
        return _redirect(comic_url, route.value)

    fallback_url = get_config_value('fallback_url')
    try:
        provider = get_archive_provider()
        entries = provider.get_entries()
        entry = select_entry(entries, now.date())
    except EmptyArchiveError:
        logger.error(f"[Redirect] No APOD entries available, redirecting to fallback {fallback_url}")
        return _redirect(fallback_url, 'archive-unavailable')
    except Exception as e:
        logger.error(f"[Redirect] Archive lookup failed, redirecting to fallback {fallback_url}: {e}", exc_info=True)
        return _redirect(fallback_url, 'archive-unavailable')

    logger.info(f"[Redirect] Selected APOD entry {entry.date} ({entry.url}) for {now.date()}")
    return _redirect(entry.url, route.value)
