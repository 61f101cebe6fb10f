#!/usr/bin/env python3
"""
Date-seeded archive entry selection: the same calendar day always picks the
same entry.
"""

import random
from datetime import date
from typing import Sequence

from ..errors import EmptyArchiveError
from ..models import ArchiveEntry


def date_seed(when: date) -> int:
    """Seed for a calendar day, e.g. 2025-01-15 -> 20250115 (time of day is ignored)"""
    return when.year * 10000 + when.month * 100 + when.day


def select_entry(entries: Sequence[ArchiveEntry], when: date) -> ArchiveEntry:
    """
    Pick one entry for the given day.

    Args:
        entries: Archive entries, in a stable order
        when: date or datetime; only year, month and day are used

    Returns:
        The selected ArchiveEntry

    Raises:
        EmptyArchiveError: if entries is empty
    """
    if not entries:
        raise EmptyArchiveError()

    rng = random.Random(date_seed(when))
    return entries[rng.randrange(len(entries))]
