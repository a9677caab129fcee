"""
Central data model definitions used across the project.

Two groups of types live here:
- read-only views over the CAMPUSonline feeds (RawEvent, CalendarEntry,
  CourseExport, SearchRow)
- the aggregates handed back to callers (Course, Event, ContactPerson)

The room schedule feed stores all event metadata in a flat attribute bag,
so RawEvent exposes its fields only through lookup().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


# ---------------------------------------------------------------------------
# Feed records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RawEvent:
    """
    One occurrence from the room schedule feed.

    attributes keeps the (attrID, value) pairs in feed order.
    """

    type_id: str
    attributes: Tuple[Tuple[str, str], ...] = ()

    def lookup(self, key: str) -> Tuple[str, bool]:
        """
        Return (value, found) for the first attribute named key.

        A missing attribute is normal for this feed and yields ("", False).
        """
        for attr_id, value in self.attributes:
            if attr_id == key:
                return value, True
        return "", False


def get_attribute(event: RawEvent, key: str) -> Tuple[str, bool]:
    return event.lookup(key)


@dataclass(frozen=True)
class CalendarEntry:
    """
    One vevent from the organisation xCal feed, all fields as raw strings.

    link is the altrep URL of the description which carries pStpSpNr=<id>.
    """

    summary: str = ""
    category: str = ""
    status: str = ""
    location: str = ""
    comment: str = ""
    link: str = ""
    dtstart: str = ""
    dtend: str = ""


@dataclass(frozen=True)
class ExportPerson:
    given: str
    family: str
    email: str
    roles: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CourseExport:
    """Course export record: the course title and its contact persons."""

    title: str
    persons: Tuple[ExportPerson, ...] = ()


@dataclass(frozen=True)
class SearchRow:
    """One row of the course search rowset."""

    course_id: str
    course_type: str
    title: str
    lecturers: str


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


@dataclass
class Event:
    """
    Represents one concrete occurrence of a course.

    imported marks events that came from this import pass.
    """

    start: datetime
    end: datetime
    room_name: str = ""
    comment: str = ""
    imported: bool = True
    title: str = ""
    room_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "room_name": self.room_name,
            "room_id": self.room_id,
            "comment": self.comment,
            "import": self.imported,
        }


@dataclass
class ContactPerson:
    first_name: str
    last_name: str
    email: str
    role: str
    main_contact: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "role": self.role,
            "main_contact": self.main_contact,
        }


@dataclass
class Course:
    """
    Represents one course with all of its occurrences.

    course_id is the CAMPUSonline course number (pStpSpNr) and identifies
    the course; 0 means it could not be resolved.
    """

    course_id: int
    title: str
    slug: str = ""
    events: List[Event] = field(default_factory=list)
    contacts: List[ContactPerson] = field(default_factory=list)
    imported: bool = False

    @property
    def main_contact(self) -> Optional[ContactPerson]:
        for contact in self.contacts:
            if contact.main_contact:
                return contact
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "course_id": self.course_id,
            "title": self.title,
            "slug": self.slug,
            "import": self.imported,
            "events": [e.to_dict() for e in self.events],
            "contacts": [c.to_dict() for c in self.contacts],
        }
