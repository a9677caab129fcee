"""
Grouping of filtered occurrences into Course aggregates.

Important rules:
- one pass, left to right, no backtracking
- a course is created by the first accepted occurrence; its title and slug
  come from that occurrence and are never overwritten
- broken occurrences (no course link, non-numeric id, bad timestamps) are
  dropped one by one, never the whole course
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, tzinfo
from typing import Dict, Iterable, List, Optional

from campusonline.model import CalendarEntry, Course, Event, RawEvent

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"
COURSE_ID_MARKER = "pStpSpNr="

_TIMESTAMP = re.compile(r"[0-9]{8}T[0-9]{6}")
_COURSE_ID = re.compile(r"\+?[0-9]+")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_timestamp(value: str, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse 'YYYYMMDDThhmmss'. Returns None for anything else.

    With tz the wall-clock time is interpreted in that zone.
    """
    if not _TIMESTAMP.fullmatch(value):
        return None
    try:
        parsed = datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        return None
    if tz is not None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def extract_course_id(link: str) -> Optional[int]:
    """
    Extract the course number from a '...?pStpSpNr=<id>' link.
    """
    parts = link.split(COURSE_ID_MARKER)
    if len(parts) != 2:
        return None
    if not _COURSE_ID.fullmatch(parts[1]):
        return None
    return int(parts[1])


def sort_events(events: List[Event]) -> List[Event]:
    """Stable sort by start; equal starts keep feed order."""
    return sorted(events, key=lambda e: e.start)


def sort_courses(courses: List[Course]) -> List[Course]:
    return sorted(courses, key=lambda c: (c.title.casefold(), c.course_id))


# ---------------------------------------------------------------------------
# Slugs
# ---------------------------------------------------------------------------


def generate_course_slug(title: str) -> str:
    """
    First character of every space separated word, if it is a letter or digit.

    "Einführung in die Informatik 1" -> "EidI1"
    """
    slug = ""
    for word in title.split(" "):
        if word and word[0].isalnum():
            slug += word[0]
    return slug


class SlugRegistry:
    """
    Hands out unique slugs within one grouping run.

    The first claim of a slug gets it unchanged, later claims get the number
    of earlier claims appended: ABC, ABC1, ABC2, ...
    """

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}

    def claim(self, slug: str) -> str:
        count = self._counts.get(slug)
        if count is None:
            self._counts[slug] = 1
            return slug
        self._counts[slug] = count + 1
        return f"{slug}{count}"


# ---------------------------------------------------------------------------
# Organisation calendar
# ---------------------------------------------------------------------------


def group_by_course(entries: Iterable[CalendarEntry], tz: Optional[tzinfo] = None) -> List[Course]:
    """
    Group calendar entries by the course number in their description link.

    Courses come back in order of first appearance, each with its events
    sorted by start.
    """
    slugs = SlugRegistry()
    courses: Dict[int, Course] = {}

    for entry in entries:
        course_id = extract_course_id(entry.link)
        if course_id is None:
            logger.debug("dropping %r: no course id in %r", entry.summary, entry.link)
            continue

        start = parse_timestamp(entry.dtstart, tz)
        end = parse_timestamp(entry.dtend, tz)
        if start is None or end is None:
            logger.debug("dropping %r: bad timestamps %r - %r", entry.summary, entry.dtstart, entry.dtend)
            continue

        event = Event(
            start=start,
            end=end,
            room_name=entry.location,
            comment=entry.comment,
            imported=True,
        )

        course = courses.get(course_id)
        if course is None:
            courses[course_id] = Course(
                course_id=course_id,
                title=entry.summary,
                slug=slugs.claim(generate_course_slug(entry.summary)),
                events=[event],
            )
        else:
            course.events.append(event)

    out = list(courses.values())
    for course in out:
        course.events = sort_events(course.events)
    return out


# ---------------------------------------------------------------------------
# Room schedule
# ---------------------------------------------------------------------------


def group_by_title(
    events: Iterable[RawEvent],
    room_id: int,
    tz: Optional[tzinfo] = None,
) -> List[Course]:
    """
    Group room schedule events by their eventTitle attribute.

    The room schedule carries no course number, so course_id stays 0 until
    a course search resolves it. A title creates its course even when none
    of its occurrences has usable timestamps; such a course has no events.
    """
    slugs = SlugRegistry()
    courses: Dict[str, Course] = {}

    for raw in events:
        title, found = raw.lookup("eventTitle")
        if not found:
            continue

        course = courses.get(title)
        if course is None:
            course = courses[title] = Course(
                course_id=0,
                title=title,
                slug=slugs.claim(generate_course_slug(title)),
            )

        start_str, found_start = raw.lookup("dtstart")
        end_str, found_end = raw.lookup("dtend")
        if not (found_start and found_end):
            continue
        start = parse_timestamp(start_str, tz)
        end = parse_timestamp(end_str, tz)
        if start is None or end is None:
            continue

        course.events.append(Event(start=start, end=end, room_id=room_id))

    out = list(courses.values())
    for course in out:
        course.events = sort_events(course.events)
    return out
