"""
Small builders for CAMPUSonline XML documents used across the tests.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

COURSE_LINK = "https://campus.tum.de/tumonline/wbLv.wbShowLVDetail?pStpSpNr={}"


def vevent(
    summary: str = "101 Einführung in die Informatik 1",
    category: str = "Vorlesung",
    status: str = "fix",
    location: str = "5602.EG.001 (Hörsaal 1), Boltzmannstr. 3(5602), 85748 Garching",
    comment: str = "",
    link: str = COURSE_LINK.format(950123),
    dtstart: str = "20211018T101500",
    dtend: str = "20211018T114500",
) -> str:
    return (
        "<vevent>"
        f"<summary>{summary}</summary>"
        f"<categories><item>{category}</item></categories>"
        f"<status>{status}</status>"
        f"<location>{location}</location>"
        f"<comment>{comment}</comment>"
        f'<description altrep="{link}">Details</description>'
        f"<dtstart>{dtstart}</dtstart>"
        f"<dtend>{dtend}</dtend>"
        "</vevent>"
    )


def xcal(events: Iterable[str]) -> bytes:
    body = "".join(events)
    doc = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<iCalendar xmlns="urn:ietf:params:xml:ns:xcal">'
        f'<vcalendar method="PUBLISH" version="2.0">{body}</vcalendar>'
        "</iCalendar>"
    )
    return doc.encode("utf-8")


def rdm_event(attributes: Sequence[Tuple[str, str]], type_id: str = "event") -> str:
    attrs = "".join(f'<attribute attrID="{k}" attrDataType="string">{v}</attribute>' for k, v in attributes)
    return f'<resource typeID="{type_id}"><description>{attrs}</description></resource>'


def rdm(events: Iterable[str]) -> bytes:
    body = "".join(events)
    doc = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        "<RDM>"
        '<resource typeID="room"><description>'
        '<attribute attrID="roomCode" attrDataType="string">5602.EG.001</attribute>'
        f'<resourceGroup typeID="eventList"><description>{body}</description></resourceGroup>'
        "</description></resource>"
        "</RDM>"
    )
    return doc.encode("utf-8")


def person(given: str, family: str, email: str, roles: Sequence[str]) -> str:
    role_xml = "".join(f"<role>{r}</role>" for r in roles)
    return (
        "<person>"
        f"<name><given>{given}</given><family>{family}</family></name>"
        f"{role_xml}"
        f"<contactData><email>{email}</email></contactData>"
        "</person>"
    )


def cdm(title: str, persons: Iterable[str] = ()) -> bytes:
    doc = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        "<CDM><course>"
        f'<courseName><text xml:lang="de">{title}</text></courseName>'
        f"<contacts>{''.join(persons)}</contacts>"
        "</course></CDM>"
    )
    return doc.encode("utf-8")


def empty_cdm() -> bytes:
    return b'<?xml version="1.0" encoding="UTF-8"?><CDM></CDM>'


def search_row(course_id: str, course_type: str, title: str, lecturers: str = "Prof. Dr. X") -> str:
    return (
        "<row>"
        f"<stp_sp_nr>{course_id}</stp_sp_nr>"
        f"<stp_lv_art_kurz>{course_type}</stp_lv_art_kurz>"
        f"<stp_sp_titel>{title}</stp_sp_titel>"
        f"<vortragende_mitwirkende>{lecturers}</vortragende_mitwirkende>"
        "</row>"
    )


def rowset(rows: Iterable[str]) -> bytes:
    return f'<?xml version="1.0" encoding="UTF-8"?><rowset>{"".join(rows)}</rowset>'.encode("utf-8")
