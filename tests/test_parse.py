"""
Unit tests for XML parsing and attribute lookup.

Parsing contract:
- wrong or missing root element -> FeedParseError
- missing fields below the root -> empty strings, never errors
"""

import unittest

from campusonline.errors import FeedParseError
from campusonline.model import RawEvent, get_attribute
from campusonline.parse import (
    parse_calendar,
    parse_course_export,
    parse_course_search,
    parse_room_schedule,
)

from xml_fixtures import cdm, empty_cdm, person, rdm, rdm_event, rowset, search_row, vevent, xcal


class TestAttributeLookup(unittest.TestCase):
    def test_found(self) -> None:
        ev = RawEvent("event", (("status", "fix"), ("courseType", "VO")))
        self.assertEqual(ev.lookup("courseType"), ("VO", True))

    def test_missing_is_not_an_error(self) -> None:
        ev = RawEvent("event", (("status", "fix"),))
        self.assertEqual(get_attribute(ev, "eventTitle"), ("", False))

    def test_first_match_wins(self) -> None:
        ev = RawEvent("event", (("status", "fix"), ("status", "deleted")))
        self.assertEqual(ev.lookup("status"), ("fix", True))


class TestParseRoomSchedule(unittest.TestCase):
    def test_events_with_attributes_in_feed_order(self) -> None:
        data = rdm(
            [
                rdm_event([("eventTypeID", "LV"), ("eventTitle", "Analysis 1"), ("dtstart", "20211018T101500")]),
                rdm_event([("eventTypeID", "PT")], type_id="other"),
            ]
        )
        events = parse_room_schedule(data)

        self.assertEqual(len(events), 2)
        self.assertEqual(events[0].type_id, "event")
        self.assertEqual(
            events[0].attributes,
            (("eventTypeID", "LV"), ("eventTitle", "Analysis 1"), ("dtstart", "20211018T101500")),
        )
        self.assertEqual(events[1].type_id, "other")

    def test_room_attributes_are_not_events(self) -> None:
        events = parse_room_schedule(rdm([]))
        self.assertEqual(events, [])

    def test_wrong_document_raises(self) -> None:
        with self.assertRaises(FeedParseError):
            parse_room_schedule(b"<html><body>Token invalid</body></html>")


class TestParseCalendar(unittest.TestCase):
    def test_fields(self) -> None:
        entries = parse_calendar(xcal([vevent(comment="Hinweis")]))

        self.assertEqual(len(entries), 1)
        entry = entries[0]
        self.assertEqual(entry.summary, "101 Einführung in die Informatik 1")
        self.assertEqual(entry.category, "Vorlesung")
        self.assertEqual(entry.status, "fix")
        self.assertTrue(entry.location.startswith("5602.EG.001"))
        self.assertEqual(entry.comment, "Hinweis")
        self.assertTrue(entry.link.endswith("pStpSpNr=950123"))
        self.assertEqual(entry.dtstart, "20211018T101500")
        self.assertEqual(entry.dtend, "20211018T114500")

    def test_missing_fields_are_empty(self) -> None:
        doc = b'<iCalendar><vcalendar><vevent><summary>X</summary></vevent></vcalendar></iCalendar>'
        entry = parse_calendar(doc)[0]
        self.assertEqual(entry.summary, "X")
        self.assertEqual(entry.category, "")
        self.assertEqual(entry.link, "")

    def test_accepts_str(self) -> None:
        entries = parse_calendar(xcal([vevent()]).decode("utf-8"))
        self.assertEqual(len(entries), 1)

    def test_wrong_document_raises(self) -> None:
        with self.assertRaises(FeedParseError):
            parse_calendar(b"<Error><message>no access</message></Error>")


class TestParseCourseExport(unittest.TestCase):
    def test_title_and_persons(self) -> None:
        data = cdm(
            "Einführung in die Informatik 1",
            [person("Ada", "Lovelace", "ada@tum.de", ["Leiter/in", "Prüfer/in"])],
        )
        export = parse_course_export(data)

        assert export is not None
        self.assertEqual(export.title, "Einführung in die Informatik 1")
        self.assertEqual(len(export.persons), 1)
        p = export.persons[0]
        self.assertEqual((p.given, p.family, p.email), ("Ada", "Lovelace", "ada@tum.de"))
        self.assertEqual(p.roles, ("Leiter/in", "Prüfer/in"))

    def test_no_course_returns_none(self) -> None:
        self.assertIsNone(parse_course_export(empty_cdm()))


class TestParseCourseSearch(unittest.TestCase):
    def test_rows(self) -> None:
        rows = parse_course_search(rowset([search_row("950123", "VO", "Analysis 1"), search_row("1", "UE", "Ü")]))
        self.assertEqual([r.course_id for r in rows], ["950123", "1"])
        self.assertEqual(rows[0].course_type, "VO")
        self.assertEqual(rows[0].lecturers, "Prof. Dr. X")


if __name__ == "__main__":
    unittest.main()
