"""
Contact persons for courses.

Each course gets its contacts from the course export (one request per
course). Exactly one contact per course is flagged as main contact: the
first person whose roles mention a lead role keyword, otherwise the first
person of the export.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from campusonline.config import FilterConfig
from campusonline.errors import CampusOnlineError, CourseNotFoundError, FetchError
from campusonline.model import ContactPerson, Course, CourseExport
from campusonline.parse import parse_course_export, parse_course_search

logger = logging.getLogger(__name__)

# fetch functions should raise FetchError; anything else is wrapped into one
FetchExport = Callable[[int], bytes]
SearchCourses = Callable[[str, str], bytes]

# Praktikum, Vorlesung, Vorlesung mit integrierten Übungen
SEARCH_COURSE_TYPES = ("PR", "VO", "VI")

# "Einführung in die Informatik 1 [IN0001]" -> "Einführung in die Informatik 1"
_BRACKETS = re.compile(r"(\(.*\))|(\[.*])")


@dataclass
class EnrichmentResult:
    """
    Courses after enrichment plus the errors of courses that failed.

    failures maps course slug -> error. Those courses are still in `courses`,
    just without (new) contacts.
    """

    courses: List[Course]
    failures: Dict[str, CampusOnlineError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        if not self.failures:
            return
        slugs = ", ".join(self.failures)
        first = next(iter(self.failures.values()))
        raise CampusOnlineError(f"contact lookup failed for courses: {slugs}") from first


# ---------------------------------------------------------------------------
# Contacts from an export
# ---------------------------------------------------------------------------


def _is_lead_role(role: str, keywords: Sequence[str]) -> bool:
    role = role.lower()
    return any(k.lower() in role for k in keywords)


def build_contacts(export: CourseExport, lead_role_keywords: Sequence[str]) -> List[ContactPerson]:
    contacts: List[ContactPerson] = []
    has_main_contact = False

    for person in export.persons:
        role = ", ".join(person.roles)
        is_main_contact = not has_main_contact and _is_lead_role(role, lead_role_keywords)
        if is_main_contact:
            has_main_contact = True
        contacts.append(
            ContactPerson(
                first_name=person.given,
                last_name=person.family,
                email=person.email,
                role=role,
                main_contact=is_main_contact,
            )
        )

    if not has_main_contact and contacts:
        contacts[0].main_contact = True
    return contacts


# ---------------------------------------------------------------------------
# Enrichment
# ---------------------------------------------------------------------------


def enrich_course(course: Course, fetch_export: FetchExport, config: FilterConfig) -> bool:
    """
    Attach contacts from the course export to one course.

    Returns False if the export has no course record or (with
    config.verify_title) a different title. Fetch and parse errors propagate
    as CampusOnlineError.
    """
    try:
        data = fetch_export(course.course_id)
    except CampusOnlineError:
        raise
    except Exception as exc:
        raise FetchError(f"course export {course.course_id} failed: {exc}") from exc

    export = parse_course_export(data)
    if export is None:
        logger.info("no course export for %d (%s)", course.course_id, course.title)
        return False
    if config.verify_title and export.title != course.title:
        logger.info("export title %r does not match %r, skipping", export.title, course.title)
        return False

    course.contacts.extend(build_contacts(export, config.lead_role_keywords))
    return True


def enrich_courses(
    courses: Iterable[Course],
    fetch_export: FetchExport,
    config: FilterConfig,
) -> EnrichmentResult:
    """
    Enrich courses one after another; a failing course does not stop the rest.
    """
    result = EnrichmentResult(courses=list(courses))
    for course in result.courses:
        try:
            enrich_course(course, fetch_export, config)
        except CampusOnlineError as exc:
            logger.warning("could not load contacts for %d (%s): %s", course.course_id, course.title, exc)
            result.failures[course.slug] = exc
    return result


# ---------------------------------------------------------------------------
# Course search
# ---------------------------------------------------------------------------


def find_course(
    title: str,
    semester: str,
    search: SearchCourses,
    fetch_export: FetchExport,
    config: FilterConfig,
) -> Tuple[int, List[ContactPerson]]:
    """
    Resolve a course title to (course_id, contacts) through the course search.

    Only lecture-like search hits with lecturers are considered, and a hit is
    accepted only if its export carries exactly the given title.
    """
    query = _BRACKETS.sub("", title).strip()
    rows = parse_course_search(search(query, semester))

    for row in rows:
        if row.course_type not in SEARCH_COURSE_TYPES or not row.lecturers:
            continue
        try:
            course_id = int(row.course_id)
        except ValueError:
            continue

        try:
            export = parse_course_export(fetch_export(course_id))
        except CampusOnlineError as exc:
            logger.warning("course export %d failed: %s", course_id, exc)
            continue
        if export is None or export.title != title:
            continue

        return course_id, build_contacts(export, config.lead_role_keywords)

    raise CourseNotFoundError(f"can't find course id for {title!r}")
