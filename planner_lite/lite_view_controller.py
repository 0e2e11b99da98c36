"""Calendar view controller for planner_lite.

Owns the visible range, granularity and title of one calendar session and
keeps them in step with the embedded calendar widget. Navigation goes through
the widget and the controller re-reads the widget's date afterwards; a month
jump sets the anchor and title directly because a month picker carries no day
or view information.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional, Protocol, Union

from .lite_exceptions import InvalidMonthError
from .lite_models import Granularity, ViewState

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


class CalendarWidgetPort(Protocol):
    """Read and command interface of the embedded calendar widget."""

    def get_current_date(self) -> date:
        """Return the date the widget's visible range is derived from."""
        ...

    def prev(self) -> None: ...

    def next(self) -> None: ...

    def today(self) -> None: ...

    def change_view(self, granularity: Granularity) -> None:
        """Switch the widget to the given display resolution."""
        ...

    def goto_date(self, target: date) -> None:
        """Move the widget's visible range to contain ``target``."""
        ...


def format_title(anchor: date, granularity: Granularity) -> str:
    """Title for a visible range, ``"March 2024"`` for every granularity."""
    return f"{anchor:%B} {anchor.year}"


def parse_month(value: str) -> date:
    """Parse a ``YYYY-MM`` month picker value into the first of that month.

    Raises:
        InvalidMonthError: If the value is not a valid month
    """
    match = _MONTH_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidMonthError(f"Expected YYYY-MM month value, got {value!r}")
    year, month = int(match.group(1)), int(match.group(2))
    try:
        return date(year, month, 1)
    except ValueError as e:
        raise InvalidMonthError(f"Invalid month value {value!r}: {e}") from e


class ViewController:
    """State machine over ViewState, reconciled against a widget port.

    Transitions are synchronous and finish updating ``displayed_title`` before
    returning. With no widget attached every navigation command is a no-op.
    """

    def __init__(
        self,
        widget: Optional[CalendarWidgetPort] = None,
        granularity: Union[Granularity, str] = Granularity.DAY,
        today: Optional[date] = None,
    ):
        """Initialize controller state.

        Args:
            widget: Mounted widget port, if already available
            granularity: Initial display resolution
            today: Initial anchor date when no widget is attached yet
        """
        self._widget = widget
        initial = Granularity(granularity)
        anchor = widget.get_current_date() if widget is not None else (today or date.today())
        self.state = ViewState(granularity=initial, anchor_date=anchor)
        self._refresh_title()

    @property
    def widget(self) -> Optional[CalendarWidgetPort]:
        return self._widget

    @property
    def is_mounted(self) -> bool:
        return self._widget is not None

    @property
    def displayed_title(self) -> str:
        return self.state.displayed_title

    @property
    def granularity(self) -> Granularity:
        return self.state.granularity

    @property
    def anchor_date(self) -> date:
        return self.state.anchor_date

    def attach_widget(self, widget: CalendarWidgetPort) -> None:
        """Mount a widget and adopt its current date."""
        self._widget = widget
        logger.debug("Calendar widget attached: %r", widget)
        self._sync_from_widget()

    def detach_widget(self) -> None:
        self._widget = None
        logger.debug("Calendar widget detached")

    def prev(self) -> None:
        widget = self._mounted("prev")
        if widget is None:
            return
        widget.prev()
        self._sync_from_widget()

    def next(self) -> None:
        widget = self._mounted("next")
        if widget is None:
            return
        widget.next()
        self._sync_from_widget()

    def go_today(self) -> None:
        widget = self._mounted("today")
        if widget is None:
            return
        widget.today()
        self._sync_from_widget()

    def change_view(self, granularity: Union[Granularity, str]) -> None:
        """Switch display resolution and re-derive anchor and title."""
        widget = self._mounted("change_view")
        if widget is None:
            return
        target = Granularity(granularity)
        widget.change_view(target)
        self.state.granularity = target
        self._sync_from_widget()

    def jump_to_month(self, month: str) -> None:
        """Jump to the first day of a ``YYYY-MM`` month.

        The anchor and title are set directly; the widget is moved but its
        reported date is not read back.

        Raises:
            InvalidMonthError: If ``month`` is not a valid month value
        """
        first = parse_month(month)
        widget = self._mounted("jump_to_month")
        if widget is None:
            return
        widget.goto_date(first)
        self.state.anchor_date = first
        self.state.title_override = format_title(first, Granularity.MONTH)
        self.state.month_picker = f"{first:%Y-%m}"
        self._refresh_title()

    def _mounted(self, command: str) -> Optional[CalendarWidgetPort]:
        if self._widget is None:
            logger.debug("Ignoring %s: calendar widget not mounted", command)
        return self._widget

    def _sync_from_widget(self) -> None:
        # Caller guarantees a widget is attached
        current = self._widget.get_current_date()  # type: ignore[union-attr]
        self.state.anchor_date = current
        self.state.title_override = None
        self.state.month_picker = f"{current:%Y-%m}"
        self._refresh_title()

    def _refresh_title(self) -> None:
        state = self.state
        if not state.month_picker:
            state.month_picker = f"{state.anchor_date:%Y-%m}"
        state.displayed_title = state.title_override or format_title(
            state.anchor_date, state.granularity
        )
        logger.debug(
            "View state: granularity=%s anchor=%s title=%r",
            state.granularity.value,
            state.anchor_date.isoformat(),
            state.displayed_title,
        )
