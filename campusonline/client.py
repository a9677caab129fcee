"""
HTTP client for the CAMPUSonline web services.

All raw responses go through a FetchCache, so repeated calls within the
cache TTL do not hit CAMPUSonline again.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

import requests

from campusonline.cache import FetchCache, cache_key
from campusonline.config import FilterConfig, Settings
from campusonline.contacts import EnrichmentResult, find_course
from campusonline.errors import FetchError
from campusonline.model import ContactPerson
from campusonline.pipeline import courses_from_calendar, courses_from_room_schedule

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

ROOM_SCHEDULE_PATH = "rdm/room/schedule/xml"
ORG_CALENDAR_PATH = "xcal/organization/courses/xml"
COURSE_EXPORT_PATH = "cdm/course/xml"
COURSE_SEARCH_PATH = "veranstaltungenSuche"

DATE_FORMAT = "%Y%m%d"

# default room schedule window: today until roughly one semester ahead
DEFAULT_SCHEDULE_DAYS = 7 * 30 * 5


class CampusOnline:
    """
    Client for one CAMPUSonline instance.

    session and cache can be injected (tests, shared caches between clients).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        cache: Optional[FetchCache] = None,
        filter_config: Optional[FilterConfig] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.session = session or requests.Session()
        self.cache = cache or FetchCache(ttl=self.settings.cache_ttl)
        self.filter_config = filter_config or FilterConfig()

    # -----------------------------------------------------------------------
    # Transport
    # -----------------------------------------------------------------------

    def _get(self, url: str, params: Dict[str, Any]) -> bytes:
        logger.debug("GET %s", url)
        try:
            resp = self.session.get(url, params=params, timeout=self.settings.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            # never log params, they carry the token
            raise FetchError(f"GET {url} failed: {exc}") from exc
        return resp.content

    def _cached_get(self, key: str, url: str, params: Dict[str, Any]) -> bytes:
        return self.cache.get_or_fetch(key, lambda: self._get(url, params))

    # -----------------------------------------------------------------------
    # Raw feeds
    # -----------------------------------------------------------------------

    def fetch_room_schedule(self, room_id: int, from_date: date, until_date: date) -> bytes:
        params = {
            "token": self.settings.token,
            "timeMode": "absolute",
            "roomID": room_id,
            "buildingCode": "",
            "fromDate": from_date.strftime(DATE_FORMAT),
            "untilDate": until_date.strftime(DATE_FORMAT),
        }
        url = self.settings.base_url + ROOM_SCHEDULE_PATH
        return self._cached_get(cache_key("roomschedule", room_id), url, params)

    def fetch_org_calendar(self, org_id: int, from_date: date, until_date: date) -> bytes:
        params = {
            "token": self.settings.token,
            "timeMode": "absolute",
            "orgUnitID": org_id,
            "fromDate": from_date.strftime(DATE_FORMAT),
            "untilDate": until_date.strftime(DATE_FORMAT),
        }
        url = self.settings.base_url + ORG_CALENDAR_PATH
        return self._cached_get(cache_key("xcalorg", org_id), url, params)

    def fetch_course_export(self, course_id: int) -> bytes:
        params = {"token": self.settings.token, "courseID": course_id}
        url = self.settings.base_url + COURSE_EXPORT_PATH
        return self._cached_get(cache_key("courseexport", course_id), url, params)

    def search_courses(self, text: str, semester: str) -> bytes:
        params = {"pToken": self.settings.basic_token, "pSuche": text, "pSemester": semester}
        url = self.settings.basic_base_url + COURSE_SEARCH_PATH
        return self._cached_get(cache_key("coursesearch", f"{semester}/{text}"), url, params)

    # -----------------------------------------------------------------------
    # Courses
    # -----------------------------------------------------------------------

    def get_org_courses(
        self,
        org_id: int,
        from_date: date,
        until_date: date,
        with_contacts: bool = True,
    ) -> EnrichmentResult:
        """
        All lectures of an organisation between from_date and until_date.

        The calendar is cached per organisation, not per date window: a second
        call for the same org_id within the cache TTL returns the first
        call's calendar even if the dates differ. Call cache.clear() first
        to force a fresh window.
        """
        data = self.fetch_org_calendar(org_id, from_date, until_date)
        fetch_export = self.fetch_course_export if with_contacts else None
        return courses_from_calendar(data, self.filter_config, fetch_export)

    def find_course(self, title: str, semester: str) -> Tuple[int, List[ContactPerson]]:
        return find_course(title, semester, self.search_courses, self.fetch_course_export, self.filter_config)

    def get_room_schedule(
        self,
        room_id: int,
        semester: str,
        from_date: Optional[date] = None,
        until_date: Optional[date] = None,
    ) -> EnrichmentResult:
        """
        Lectures held in one room, each resolved to its course via the course search.

        Like get_org_courses, the schedule is cached per room regardless of
        the date window.
        """
        from_date = from_date or date.today()
        until_date = until_date or from_date + timedelta(days=DEFAULT_SCHEDULE_DAYS)

        data = self.fetch_room_schedule(room_id, from_date, until_date)
        return courses_from_room_schedule(
            data,
            room_id,
            self.filter_config,
            lookup=lambda title: self.find_course(title, semester),
        )
