"""Command-line entry for planner_lite.

Subcommands:
  expand    print the occurrences a repeat rule produces
  add       build, expand and save an event for a user
  list      list a user's stored events
  navigate  drive the calendar view over a headless widget
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from . import __version__
from .calendar_session import CalendarSession
from .config_loader import Config, apply_env_overrides, load_config
from .core.http_client import close_all_clients
from .lite_event_builder import build_event, default_draft
from .lite_exceptions import GatewayError, InvalidMonthError, PlannerError
from .lite_logging import configure_lite_logging
from .lite_models import EventDraft, Granularity, RepeatRule
from .lite_persistence import FirestorePersistenceGateway, InMemoryPersistenceGateway, PersistenceGateway
from .lite_recurrence import expand, repeat_options
from .lite_view_controller import ViewController
from .lite_widget import HeadlessCalendarWidget

logger = logging.getLogger(__name__)


def _add_event_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--title", required=True, help="Event title")
    parser.add_argument("--date", default=None, help="Date as YYYY-MM-DD (default: today)")
    parser.add_argument("--start", default="09:00", help="Start time as HH:MM (default: 09:00)")
    parser.add_argument("--end", default="10:00", help="End time as HH:MM (default: 10:00)")
    parser.add_argument("--location", default="", help="Free-text location")
    parser.add_argument("--notes", default="", help="Free-text notes")
    parser.add_argument(
        "--repeat",
        default=RepeatRule.NONE.value,
        choices=[value for value, _ in repeat_options()],
        help="Repeat rule (default: none)",
    )


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the planner_lite CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="planner_lite",
        description="planner_lite - calendar recurrence and view tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m planner_lite expand --title Standup --date 2024-01-01 --start 09:00 --end 09:15 --repeat weekdays
  python -m planner_lite add --user u1 --title Review --date 2024-06-01 --repeat biweekly
  python -m planner_lite navigate --view month next next 2024-03
        """,
    )
    parser.add_argument("--config", metavar="PATH", help="Path to planner.yaml / .json config file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    expand_parser = sub.add_parser("expand", help="Print the occurrences for a repeat rule")
    _add_event_arguments(expand_parser)

    add_parser = sub.add_parser("add", help="Save an event (and its repeats) for a user")
    add_parser.add_argument("--user", required=True, help="Owner user id")
    add_parser.add_argument("--id-token", default=None, help="Firebase ID token for the store")
    _add_event_arguments(add_parser)

    list_parser = sub.add_parser("list", help="List a user's stored events")
    list_parser.add_argument("--user", required=True, help="Owner user id")
    list_parser.add_argument("--id-token", default=None, help="Firebase ID token for the store")

    nav_parser = sub.add_parser("navigate", help="Drive the calendar view over a headless widget")
    nav_parser.add_argument(
        "--view",
        default=None,
        choices=[g.value for g in Granularity],
        help="Initial view (default: from config)",
    )
    nav_parser.add_argument("--start-date", default=None, help="Widget start date as YYYY-MM-DD")
    nav_parser.add_argument(
        "steps",
        nargs="*",
        help="prev | next | today | day | week | month | YYYY-MM",
    )

    return parser


def _build_gateway(cfg: Config, id_token: Optional[str]) -> PersistenceGateway:
    if cfg.firestore_project_id:
        return FirestorePersistenceGateway(
            project_id=cfg.firestore_project_id,
            collection=cfg.firestore_collection,
            database=cfg.firestore_database,
            api_key=cfg.firestore_api_key,
            id_token=id_token,
            timeout_seconds=cfg.save_timeout_seconds,
        )
    logger.warning("No firestore_project_id configured; using in-memory store (nothing is kept)")
    return InMemoryPersistenceGateway()


def _draft_from_args(args: argparse.Namespace) -> EventDraft:
    draft = default_draft()
    return draft.model_copy(
        update={
            "title": args.title,
            "date": args.date or draft.date,
            "start_time": args.start,
            "end_time": args.end,
            "location": args.location,
            "notes": args.notes,
            "repeat": RepeatRule.coerce(args.repeat),
        }
    )


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2))


def _cmd_expand(args: argparse.Namespace) -> int:
    draft = _draft_from_args(args)
    base = build_event(
        draft.title.strip(),
        draft.date,
        draft.start_time,
        draft.end_time,
        location=draft.location.strip(),
        notes=draft.notes.strip(),
    )
    if base is None:
        print("error: title, date, start and end are required and must be valid", file=sys.stderr)
        return 2
    _print_json([occ.model_dump(mode="json") for occ in expand(base, draft.repeat)])
    return 0


async def _cmd_add(args: argparse.Namespace, cfg: Config) -> int:
    session = CalendarSession(_build_gateway(cfg, args.id_token), user_id=args.user)
    try:
        result = await session.submit(_draft_from_args(args))
    finally:
        await close_all_clients()

    if not result.success:
        for notice in session.notices:
            print(notice, file=sys.stderr)
        if result.error:
            print(f"error: {result.error}", file=sys.stderr)
        return 1
    _print_json([evt.model_dump(mode="json") for evt in result.events])
    return 0


async def _cmd_list(args: argparse.Namespace, cfg: Config) -> int:
    gateway = _build_gateway(cfg, args.id_token)
    try:
        events = await gateway.list_events(args.user)
    except GatewayError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        await close_all_clients()
    _print_json([evt.model_dump(mode="json") for evt in events])
    return 0


def _cmd_navigate(args: argparse.Namespace, cfg: Config) -> int:
    start = date.fromisoformat(args.start_date) if args.start_date else None
    granularity = Granularity(args.view) if args.view else cfg.granularity
    widget = HeadlessCalendarWidget(current=start, granularity=granularity)
    controller = ViewController(widget, granularity=granularity)
    print(controller.displayed_title)

    for step in args.steps:
        if step == "prev":
            controller.prev()
        elif step == "next":
            controller.next()
        elif step == "today":
            controller.go_today()
        elif step in {g.value for g in Granularity}:
            controller.change_view(step)
        else:
            try:
                controller.jump_to_month(step)
            except InvalidMonthError as e:
                print(f"error: {e}", file=sys.stderr)
                return 2
        print(controller.displayed_title)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Run the planner_lite CLI and return the process exit code."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    try:
        cfg = apply_env_overrides(load_config(args.config), env_file=Path.cwd() / ".env")
    except PlannerError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    configure_lite_logging(debug_mode=args.debug, level_name=cfg.log_level)

    if args.command == "expand":
        return _cmd_expand(args)
    if args.command == "add":
        return asyncio.run(_cmd_add(args, cfg))
    if args.command == "list":
        return asyncio.run(_cmd_list(args, cfg))
    return _cmd_navigate(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
