"""
Configuration for the CAMPUSonline client.

Two kinds of settings live here:
- Settings: where to reach CAMPUSonline and with which tokens
- FilterConfig: the editorial tables that decide which calendar entries are
  real lectures in real rooms and who counts as a course's main contact

Both are plain dataclasses so tests can build their own variants.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Dict, Optional, Tuple
from zoneinfo import ZoneInfo


# ---------------------------------------------------------------------------
# URLs & organisation ids
# ---------------------------------------------------------------------------

BASE_URL = "https://campus.tum.de/tumonlinej/ws/webservice_v1.0/"
BASIC_BASE_URL = "https://campus.tum.de/tumonline/wbservicesbasic."

IN_ORG_ID = 14189  # Informatik
MA_ORG_ID = 14178  # Mathematik
PH_ORG_ID = 14179  # Physik


# ---------------------------------------------------------------------------
# Editorial tables
# ---------------------------------------------------------------------------

# Substring of the CAMPUSonline location -> readable room label.
# The same table is used as room whitelist and for translation, so the first
# matching key decides both.
DEFAULT_ROOMS: Dict[str, str] = {
    "5602.EG.001": "MI HS1",
    "5604.EG.011": "MI HS2",
    "5606.EG.011": "MI HS3",
    "5608.EG.038": "00.08.038",
    "5613.EG.009A": "00.13.009A",
    "5620.01.101": "Interims I 101",
    "5620.01.102": "Interims I 102",
    "5510.02.001": "MW 2001",
    "5510.EG.001": "MW 0001",
}

DEFAULT_LAB_COURSE_LOCATION = (
    '5620.01.102 (102, Hörsaal 2, "Interims I"), Boltzmannstr. 5(5620), 85748 Garching b. München'
)

# eventTypeID=LV -> Lehrveranstaltung, courseType=VO -> Vorlesung,
# status=fix -> neither deleted nor moved
DEFAULT_LECTURE_CRITERIA: Tuple[Tuple[str, str], ...] = (
    ("eventTypeID", "LV"),
    ("courseType", "VO"),
    ("status", "fix"),
)


@dataclass
class FilterConfig:
    lecture_categories: Tuple[str, ...] = ("vorlesung",)
    allowed_statuses: Tuple[str, ...] = ("fix", "geplant")
    rooms: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ROOMS))
    exclusion_marker: str = "videoübertragung aus"
    lab_course_marker: Optional[str] = "Praktikum Systemadministration"
    lab_course_category: str = "Vorlesung"
    lab_course_location: str = DEFAULT_LAB_COURSE_LOCATION
    lecture_criteria: Tuple[Tuple[str, str], ...] = DEFAULT_LECTURE_CRITERIA
    timezone: Optional[str] = None
    lead_role_keywords: Tuple[str, ...] = ("leiter", "prüfer")
    verify_title: bool = False

    def tz(self) -> Optional[tzinfo]:
        """Zone attached to parsed timestamps, None keeps them naive (local)."""
        return ZoneInfo(self.timezone) if self.timezone else None


# ---------------------------------------------------------------------------
# Process settings
# ---------------------------------------------------------------------------


@dataclass
class Settings:
    token: str = ""
    basic_token: str = ""
    base_url: str = BASE_URL
    basic_base_url: str = BASIC_BASE_URL
    timeout: float = 30.0
    cache_ttl: float = 60.0

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from CAMPUSONLINE_* environment variables.

        Missing variables fall back to the defaults above; tokens default to
        an empty string and CAMPUSonline will answer with an error page.
        """
        return cls(
            token=os.getenv("CAMPUSONLINE_TOKEN", ""),
            basic_token=os.getenv("CAMPUSONLINE_BASIC_TOKEN", ""),
            base_url=os.getenv("CAMPUSONLINE_BASE_URL", BASE_URL),
            basic_base_url=os.getenv("CAMPUSONLINE_BASIC_BASE_URL", BASIC_BASE_URL),
            timeout=float(os.getenv("CAMPUSONLINE_TIMEOUT", "30")),
            cache_ttl=float(os.getenv("CAMPUSONLINE_CACHE_TTL", "60")),
        )
