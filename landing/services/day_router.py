#!/usr/bin/env python3
"""
Day-of-week routing between the comic and the APOD archive
"""

from datetime import date, datetime, timezone

from ..models import RouteClass

# xkcd publishes Mon/Wed/Fri; the comic is shown the day after.
# Monday == 0 ... Sunday == 6
COMIC_WEEKDAYS = frozenset({1, 3, 5})  # Tuesday, Thursday, Saturday


def classify(timestamp: date) -> RouteClass:
    """
    Route class for a moment in time, evaluated in UTC.

    Args:
        timestamp: aware datetime (converted to UTC), naive datetime
            (taken as UTC) or a plain date

    Returns:
        RouteClass.COMIC_DAY on Tuesday, Thursday and Saturday,
        RouteClass.ARCHIVE_DAY otherwise
    """
    if isinstance(timestamp, datetime) and timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)

    if timestamp.weekday() in COMIC_WEEKDAYS:
        return RouteClass.COMIC_DAY
    return RouteClass.ARCHIVE_DAY
