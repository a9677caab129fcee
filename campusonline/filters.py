"""
Filtering of raw feed records.

Two surfaces:
- attribute-bag events from the room schedule, filtered by (key, value)
- calendar entries from the organisation xCal feed, filtered by category,
  status, room and comment and then cleaned up for display

All functions are pure: they return new lists and never reorder.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Dict, Iterable, List, Sequence, Tuple

from campusonline.config import FilterConfig
from campusonline.model import CalendarEntry, RawEvent

logger = logging.getLogger(__name__)

# the feed prepends a numeric sort key to summaries: "101 Einführung ..."
_LEADING_DIGITS = re.compile(r"^[0-9]+")


# ---------------------------------------------------------------------------
# Attribute bags
# ---------------------------------------------------------------------------


def filter_by_attribute(events: Iterable[RawEvent], key: str, expected: str) -> List[RawEvent]:
    """
    Keep exactly the events whose attribute `key` exists and equals `expected`.
    """
    out: List[RawEvent] = []
    for event in events:
        value, found = event.lookup(key)
        if found and value == expected:
            out.append(event)
    return out


def filter_lectures(
    events: Iterable[RawEvent],
    criteria: Sequence[Tuple[str, str]],
) -> List[RawEvent]:
    """
    Apply filter_by_attribute once per (key, value) pair (logical AND).
    """
    out = list(events)
    for key, expected in criteria:
        out = filter_by_attribute(out, key, expected)
    return out


# ---------------------------------------------------------------------------
# Calendar entries
# ---------------------------------------------------------------------------


def in_room_list(location: str, rooms: Dict[str, str]) -> bool:
    return any(key in location for key in rooms)


def translate_location(location: str, rooms: Dict[str, str]) -> str:
    """
    Rewrite a CAMPUSonline location to its readable label.

    First matching key wins; unknown locations are returned unchanged.
    """
    for key, label in rooms.items():
        if key in location:
            return label
    return location


def clean_summary(summary: str) -> str:
    return _LEADING_DIGITS.sub("", summary).strip()


def _apply_lab_course_override(entry: CalendarEntry, config: FilterConfig) -> CalendarEntry:
    marker = config.lab_course_marker
    if marker and marker in entry.summary:
        return dataclasses.replace(
            entry,
            category=config.lab_course_category,
            location=config.lab_course_location,
        )
    return entry


def is_lecture(entry: CalendarEntry, config: FilterConfig) -> bool:
    """
    True if the entry is a confirmed lecture in a known room and not a
    video relay of another lecture.
    """
    category = entry.category.lower()
    if not any(c.lower() in category for c in config.lecture_categories):
        return False
    if entry.status not in config.allowed_statuses:
        return False
    if not in_room_list(entry.location, config.rooms):
        return False
    if config.exclusion_marker and config.exclusion_marker.lower() in entry.comment.lower():
        return False
    return True


def filter_calendar(entries: Iterable[CalendarEntry], config: FilterConfig) -> List[CalendarEntry]:
    """
    Keep lecture entries and clean their summary and location.
    """
    out: List[CalendarEntry] = []
    dropped = 0
    for entry in entries:
        entry = _apply_lab_course_override(entry, config)
        if not is_lecture(entry, config):
            dropped += 1
            continue
        out.append(
            dataclasses.replace(
                entry,
                summary=clean_summary(entry.summary),
                location=translate_location(entry.location, config.rooms),
            )
        )

    logger.debug("calendar filter: kept %d, dropped %d", len(out), dropped)
    return out
