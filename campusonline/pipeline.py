"""
Ingestion pipelines (raw feed bytes -> sorted Course list).

    calendar:      parse -> filter_calendar -> group_by_course -> contacts -> sort
    room schedule: parse -> filter_lectures -> group_by_title -> search -> sort

Both take already fetched bytes plus optional fetch callables for the
follow-up requests, so they run the same against CAMPUSonline or test data.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from campusonline.config import FilterConfig
from campusonline.contacts import EnrichmentResult, FetchExport, enrich_courses
from campusonline.errors import CampusOnlineError, CourseNotFoundError
from campusonline.filters import filter_calendar, filter_lectures
from campusonline.grouping import group_by_course, group_by_title, sort_courses
from campusonline.model import ContactPerson
from campusonline.parse import Feed, parse_calendar, parse_room_schedule

logger = logging.getLogger(__name__)

CourseLookup = Callable[[str], Tuple[int, List[ContactPerson]]]


def courses_from_calendar(
    data: Feed,
    config: Optional[FilterConfig] = None,
    fetch_export: Optional[FetchExport] = None,
) -> EnrichmentResult:
    """
    Build courses from an organisation calendar export.

    Without fetch_export the courses come back without contacts.
    """
    config = config or FilterConfig()

    entries = parse_calendar(data)
    lectures = filter_calendar(entries, config)
    courses = group_by_course(lectures, tz=config.tz())
    logger.info("calendar: %d entries, %d lectures, %d courses", len(entries), len(lectures), len(courses))

    if fetch_export is None:
        result = EnrichmentResult(courses=courses)
    else:
        result = enrich_courses(courses, fetch_export, config)

    result.courses = sort_courses(result.courses)
    return result


def courses_from_room_schedule(
    data: Feed,
    room_id: int,
    config: Optional[FilterConfig] = None,
    lookup: Optional[CourseLookup] = None,
) -> EnrichmentResult:
    """
    Build courses from a room schedule.

    lookup resolves a course title to (course_id, contacts); a course it
    cannot find keeps course_id 0 and no contacts.
    """
    config = config or FilterConfig()

    events = parse_room_schedule(data)
    lectures = filter_lectures(events, config.lecture_criteria)
    courses = group_by_title(lectures, room_id, tz=config.tz())
    logger.info("room %d: %d events, %d lectures, %d courses", room_id, len(events), len(lectures), len(courses))

    result = EnrichmentResult(courses=courses)
    if lookup is not None:
        for course in courses:
            try:
                course.course_id, contacts = lookup(course.title)
            except CourseNotFoundError as exc:
                logger.info("%s", exc)
                continue
            except CampusOnlineError as exc:
                logger.warning("course lookup for %r failed: %s", course.title, exc)
                result.failures[course.slug] = exc
                continue
            course.contacts.extend(contacts)

    result.courses = sort_courses(result.courses)
    return result
