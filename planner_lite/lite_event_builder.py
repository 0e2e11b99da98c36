"""Event form helpers for planner_lite.

Builds the base occurrence from raw form fields and prepares pre-filled
drafts for the ways a new event can be started (date click, range select,
the add button).
"""

from __future__ import annotations

import logging
import random
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser

from .lite_models import EventColor, EventDraft, Occurrence

logger = logging.getLogger(__name__)

PALETTE: tuple[EventColor, ...] = tuple(EventColor)

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "10:00"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def combine_local(date_str: str, time_str: str) -> datetime:
    """Combine ``YYYY-MM-DD`` and ``HH:MM`` strings into a naive local datetime.

    Raises:
        ValueError: If either string cannot be parsed
    """
    day = datetime.strptime(date_str.strip(), DATE_FORMAT).date()
    clock = datetime.strptime(time_str.strip(), TIME_FORMAT).time()
    return datetime.combine(day, clock)


def build_event(
    title: Optional[str],
    date_str: Optional[str],
    start_time: Optional[str],
    end_time: Optional[str],
    location: str = "",
    notes: str = "",
    rng: Optional[random.Random] = None,
) -> Optional[Occurrence]:
    """Build one base occurrence from form fields.

    Args:
        title: Event title
        date_str: Date as YYYY-MM-DD
        start_time: Start time as HH:MM
        end_time: End time as HH:MM
        location: Copied verbatim
        notes: Copied verbatim
        rng: Random source for the color draw (module RNG when omitted)

    Returns:
        The base occurrence, or None when a required field is blank or
        cannot be parsed. Start-before-end is not checked.
    """
    if any(_is_blank(v) for v in (title, date_str, start_time, end_time)):
        logger.debug("Event form incomplete; nothing to build")
        return None

    try:
        start = combine_local(date_str, start_time)  # type: ignore[arg-type]
        end = combine_local(date_str, end_time)  # type: ignore[arg-type]
    except ValueError as e:
        logger.warning(
            "Could not parse event date/time date=%r start=%r end=%r: %s",
            date_str,
            start_time,
            end_time,
            e,
        )
        return None

    chooser = rng or random
    color = chooser.choice(PALETTE)  # nosec B311 - cosmetic color pick

    return Occurrence(
        title=title,  # type: ignore[arg-type]
        start=start,
        end=end,
        color=color,
        location=location or "",
        notes=notes or "",
    )


def time_options() -> list[tuple[str, str]]:
    """The 24 hourly (value, label) choices offered for start and end times."""
    options = []
    for hour in range(24):
        moment = datetime(2000, 1, 1, hour)
        options.append((moment.strftime(TIME_FORMAT), moment.strftime("%I:%M %p")))
    return options


def draft_for_date_click(date_str: str, base: Optional[EventDraft] = None) -> EventDraft:
    """Draft opened by clicking a day cell: that date, default hours."""
    return _open_draft(base, date_str, DEFAULT_START_TIME, DEFAULT_END_TIME)


def draft_for_range_select(
    start: datetime | str,
    end: Optional[datetime | str] = None,
    base: Optional[EventDraft] = None,
) -> EventDraft:
    """Draft opened by dragging a time range in the widget.

    The end time is one hour after the reported end, or after the start when
    the widget reports no end.
    """
    start_dt = _as_datetime(start)
    end_dt = _as_datetime(end) if end is not None else start_dt
    end_dt = end_dt + timedelta(hours=1)
    return _open_draft(
        base,
        start_dt.strftime(DATE_FORMAT),
        start_dt.strftime(TIME_FORMAT),
        end_dt.strftime(TIME_FORMAT),
    )


def draft_for_add_button(now: Optional[datetime] = None, base: Optional[EventDraft] = None) -> EventDraft:
    """Draft opened by the add button: today, from this hour to the next."""
    now = now or datetime.now()
    this_hour = now.replace(minute=0, second=0, microsecond=0)
    return _open_draft(
        base,
        this_hour.strftime(DATE_FORMAT),
        this_hour.strftime(TIME_FORMAT),
        (this_hour + timedelta(hours=1)).strftime(TIME_FORMAT),
    )


def default_draft(today: Optional[date] = None) -> EventDraft:
    today = today or date.today()
    return EventDraft(date=today.strftime(DATE_FORMAT))


def _open_draft(base: Optional[EventDraft], date_str: str, start: str, end: str) -> EventDraft:
    # Previously typed title/location/notes/repeat carry over into the new draft
    if base is None:
        return EventDraft(date=date_str, start_time=start, end_time=end)
    return base.model_copy(update={"date": date_str, "start_time": start, "end_time": end})


def _as_datetime(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        return value
    return date_parser.isoparse(value)
