"""
Parsing (XML -> record model).

- Room schedule (RDM): attribute-bag events -> list[RawEvent]
- Organisation calendar (xCal): vevents -> list[CalendarEntry]
- Course export (CDM): course title + contact persons -> CourseExport
- Course search (rowset): list[SearchRow]

Every parser takes the raw response bytes. A document without the expected
root element is a FeedParseError; missing fields below the root are read
as empty strings.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

from campusonline.errors import FeedParseError
from campusonline.model import (
    CalendarEntry,
    CourseExport,
    ExportPerson,
    RawEvent,
    SearchRow,
)

logger = logging.getLogger(__name__)

Feed = Union[bytes, str]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_root(data: Feed, root_name: str) -> Tag:
    """
    Parse an XML document and return its root element.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    # the "xml" feature is lxml's XML parser
    soup = BeautifulSoup(data, "xml")
    root = soup.find(root_name, recursive=False)
    if root is None:
        first = soup.find(True, recursive=False)
        found = first.name if first is not None else "nothing"
        raise FeedParseError(f"expected <{root_name}> document, got {found}")
    return root


def _child_text(parent: Optional[Tag], name: str) -> str:
    if parent is None:
        return ""
    child = parent.find(name)
    if child is None:
        return ""
    return child.get_text(strip=True)


# ---------------------------------------------------------------------------
# Room schedule (RDM)
# ---------------------------------------------------------------------------


def parse_room_schedule(data: Feed) -> List[RawEvent]:
    """
    Parse a room schedule document into attribute-bag events.

    The event list sits at RDM/resource/description/resourceGroup/description;
    each child resource there is one occurrence.
    """
    root = _load_root(data, "RDM")

    group = root.find("resourceGroup")
    if group is None:
        return []
    container = group.find("description", recursive=False)
    if container is None:
        return []

    events: List[RawEvent] = []
    for resource in container.find_all("resource", recursive=False):
        description = resource.find("description", recursive=False)
        attributes = []
        if description is not None:
            for attr in description.find_all("attribute", recursive=False):
                attributes.append((attr.get("attrID", ""), attr.get_text(strip=True)))
        events.append(RawEvent(type_id=resource.get("typeID", ""), attributes=tuple(attributes)))

    logger.debug("room schedule: %d events", len(events))
    return events


# ---------------------------------------------------------------------------
# Organisation calendar (xCal)
# ---------------------------------------------------------------------------


def parse_calendar(data: Feed) -> List[CalendarEntry]:
    """
    Parse an xCal organisation export into calendar entries (feed order).
    """
    root = _load_root(data, "iCalendar")

    entries: List[CalendarEntry] = []
    for vevent in root.find_all("vevent"):
        description = vevent.find("description")
        link = description.get("altrep", "") if description is not None else ""

        entries.append(
            CalendarEntry(
                summary=_child_text(vevent, "summary"),
                category=_child_text(vevent.find("categories"), "item"),
                status=_child_text(vevent, "status"),
                location=_child_text(vevent, "location"),
                comment=_child_text(vevent, "comment"),
                link=link,
                dtstart=_child_text(vevent, "dtstart"),
                dtend=_child_text(vevent, "dtend"),
            )
        )

    logger.debug("calendar: %d entries", len(entries))
    return entries


# ---------------------------------------------------------------------------
# Course export (CDM)
# ---------------------------------------------------------------------------


def parse_course_export(data: Feed) -> Optional[CourseExport]:
    """
    Parse a course export. Returns None if the document holds no course.
    """
    root = _load_root(data, "CDM")

    course = root.find("course")
    if course is None:
        return None

    # courseName carries the title either directly or in a <text> child
    title = ""
    course_name = course.find("courseName")
    if course_name is not None:
        text = course_name.find("text")
        title = (text if text is not None else course_name).get_text(strip=True)

    persons: List[ExportPerson] = []
    contacts = course.find("contacts")
    if contacts is not None:
        for person in contacts.find_all("person", recursive=False):
            name = person.find("name")
            roles = tuple(r.get_text(strip=True) for r in person.find_all("role", recursive=False))
            persons.append(
                ExportPerson(
                    given=_child_text(name, "given"),
                    family=_child_text(name, "family"),
                    email=_child_text(person.find("contactData"), "email"),
                    roles=roles,
                )
            )

    return CourseExport(title=title, persons=tuple(persons))


# ---------------------------------------------------------------------------
# Course search (rowset)
# ---------------------------------------------------------------------------


def parse_course_search(data: Feed) -> List[SearchRow]:
    root = _load_root(data, "rowset")
    return [
        SearchRow(
            course_id=_child_text(row, "stp_sp_nr"),
            course_type=_child_text(row, "stp_lv_art_kurz"),
            title=_child_text(row, "stp_sp_titel"),
            lecturers=_child_text(row, "vortragende_mitwirkende"),
        )
        for row in root.find_all("row", recursive=False)
    ]
