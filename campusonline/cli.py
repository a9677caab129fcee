"""
CLI (Command Line Interface).

Quick terminal commands to look at what the pipelines produce, e.g.:

    campusonline org --org-id 14189 --from 2021-10-01 --until 2022-03-31
    campusonline room 12345 --semester 21W --json

Tokens are read from CAMPUSONLINE_TOKEN / CAMPUSONLINE_BASIC_TOKEN.
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from campusonline.client import CampusOnline
from campusonline.config import IN_ORG_ID, Settings
from campusonline.contacts import EnrichmentResult
from campusonline.errors import CampusOnlineError
from campusonline.model import Course

console = Console()


def _iso_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a date (YYYY-MM-DD): {text!r}")


def _print_courses(courses: List[Course]) -> None:
    if not courses:
        console.print("No courses.")
        return

    table = Table(box=box.SIMPLE)
    table.add_column("Course ID", justify="right")
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Events", justify="right")
    table.add_column("First event")
    table.add_column("Main contact")

    for course in courses:
        first = course.events[0].start.strftime("%Y-%m-%d %H:%M") if course.events else "-"
        main = course.main_contact
        contact = f"{main.first_name} {main.last_name}" if main else "-"
        table.add_row(str(course.course_id), course.slug, course.title, str(len(course.events)), first, contact)

    console.print(table)


def _report(result: EnrichmentResult, as_json: bool) -> int:
    if as_json:
        print(json.dumps([c.to_dict() for c in result.courses], ensure_ascii=False, indent=2))
    else:
        _print_courses(result.courses)

    for slug, exc in result.failures.items():
        console.print(f"[yellow]Warning:[/yellow] no contacts for {slug}: {exc}")
    return 0


def _cmd_org(args: argparse.Namespace, client: CampusOnline) -> int:
    if args.until < args.from_date:
        print("--until must not be before --from.")
        return 1
    result = client.get_org_courses(
        args.org_id,
        args.from_date,
        args.until,
        with_contacts=not args.no_contacts,
    )
    return _report(result, args.json)


def _cmd_room(args: argparse.Namespace, client: CampusOnline) -> int:
    result = client.get_room_schedule(args.room_id, args.semester)
    return _report(result, args.json)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="campusonline", description="CAMPUSonline course feeds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log pipeline details")
    sub = parser.add_subparsers(dest="command", required=True)

    p_org = sub.add_parser("org", help="Lectures of an organisation")
    p_org.add_argument("--org-id", type=int, default=IN_ORG_ID, help="Organisation unit id")
    p_org.add_argument("--from", dest="from_date", type=_iso_date, default=date.today(), help="First day")
    p_org.add_argument("--until", type=_iso_date, required=True, help="Last day")
    p_org.add_argument("--no-contacts", action="store_true", help="Skip the course export lookups")
    p_org.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    p_room = sub.add_parser("room", help="Lectures held in a room")
    p_room.add_argument("room_id", type=int, help="CAMPUSonline room id")
    p_room.add_argument("--semester", "-s", type=str, default="", help="Semester code for the course search (e.g. 21W)")
    p_room.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    return parser


def main(argv: Optional[List[str]] = None, client: Optional[CampusOnline] = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    client = client or CampusOnline(Settings.from_env())

    try:
        if args.command == "org":
            raise SystemExit(_cmd_org(args, client))
        if args.command == "room":
            raise SystemExit(_cmd_room(args, client))
    except CampusOnlineError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)

    raise SystemExit(2)
