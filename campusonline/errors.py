"""
Error types raised by the CAMPUSonline client.

Only transport and parse failures are surfaced to callers. Noisy records
inside a feed (missing attributes, broken timestamps, malformed course links)
are dropped where they are read and never become exceptions.
"""

from __future__ import annotations


class CampusOnlineError(Exception):
    """Base class for all errors raised by this package."""


class FetchError(CampusOnlineError):
    """A request to CAMPUSonline failed (network error or bad HTTP status)."""


class FeedParseError(CampusOnlineError):
    """A feed could not be parsed into the expected XML document."""


class CourseNotFoundError(CampusOnlineError):
    """The course search did not yield a matching course export."""
