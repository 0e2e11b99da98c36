"""Headless calendar widget for planner_lite.

Implements the widget port without a display so the view controller can be
driven from the command line and from tests. Steps are one day, seven days or
one calendar month depending on the current view.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

from .lite_models import Granularity

logger = logging.getLogger(__name__)


class HeadlessCalendarWidget:
    """In-process stand-in for the embedded calendar widget."""

    def __init__(
        self,
        current: Optional[date] = None,
        granularity: Granularity = Granularity.DAY,
        clock: Optional[Callable[[], date]] = None,
    ):
        self._clock = clock or date.today
        self._current = current or self._clock()
        self._granularity = granularity
        self.commands: list[str] = []

    def __repr__(self) -> str:
        return (
            f"HeadlessCalendarWidget(current={self._current.isoformat()}, "
            f"view={self._granularity.view_key})"
        )

    @property
    def view_key(self) -> str:
        return self._granularity.view_key

    def _step(self) -> relativedelta:
        if self._granularity is Granularity.MONTH:
            return relativedelta(months=1)
        if self._granularity is Granularity.WEEK:
            return relativedelta(weeks=1)
        return relativedelta(days=1)

    def get_current_date(self) -> date:
        return self._current

    def prev(self) -> None:
        self.commands.append("prev")
        self._current = self._current - self._step()

    def next(self) -> None:
        self.commands.append("next")
        self._current = self._current + self._step()

    def today(self) -> None:
        self.commands.append("today")
        self._current = self._clock()

    def change_view(self, granularity: Granularity) -> None:
        self.commands.append(f"change_view:{granularity.value}")
        self._granularity = Granularity(granularity)

    def goto_date(self, target: date) -> None:
        self.commands.append(f"goto_date:{target.isoformat()}")
        self._current = target
