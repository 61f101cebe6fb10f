#!/usr/bin/env python3
"""
Error types for the archive pipeline.

Only EmptyArchiveError is raised out of the core. The others are recovered
where they happen and carried on result objects so callers can log them.
"""


class LandingPageError(Exception):
    """Base class for all errors raised by the landing page service"""


class FetchError(LandingPageError):
    """The archive index could not be retrieved (network, timeout, bad status)"""


class ParseError(LandingPageError):
    """The archive index did not have the expected shape"""


class CacheReadError(LandingPageError):
    """The durable cache could not be read or held a corrupt snapshot"""


class CacheWriteError(LandingPageError):
    """The durable cache rejected a snapshot write"""


class EmptyArchiveError(LandingPageError):
    """No archive entries are available to select from"""

    def __init__(self, message: str = "No APOD entries available for selection"):
        super().__init__(message)
