#!/usr/bin/env python3
"""
Data model for archive entries and their cached snapshot form
"""

import json
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List


class RouteClass(Enum):
    """Which destination a request is routed to on a given day"""
    COMIC_DAY = "comic-day"
    ARCHIVE_DAY = "archive-day"


@dataclass(frozen=True)
class ArchiveEntry:
    """One dated item from the APOD archive index"""
    date: date
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {'date': self.date.isoformat(), 'url': self.url}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArchiveEntry":
        """
        Build an entry from its serialized form.

        Raises:
            KeyError: if 'date' or 'url' is missing
            ValueError: if 'date' is not an ISO calendar date
            TypeError: if a field has the wrong type
        """
        url = data['url']
        if not isinstance(url, str):
            raise TypeError(f"Entry url must be a string, got {type(url).__name__}")
        return cls(date=date.fromisoformat(data['date']), url=url)


def serialize_snapshot(entries: Iterable[ArchiveEntry]) -> str:
    """Serialize entries, in order, to the JSON snapshot stored in the durable cache"""
    return json.dumps([entry.to_dict() for entry in entries])


def deserialize_snapshot(payload: str) -> List[ArchiveEntry]:
    """
    Parse a JSON snapshot back into entries, preserving order.

    Args:
        payload: JSON text produced by serialize_snapshot

    Returns:
        List of ArchiveEntry

    Raises:
        ValueError: if the payload is not a JSON array of entry objects
    """
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError("Archive snapshot must be a JSON array")
    try:
        return [ArchiveEntry.from_dict(item) for item in data]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed archive snapshot entry: {e}") from e
