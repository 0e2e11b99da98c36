"""Repeat-rule expansion for planner_lite.

Turns one base occurrence plus a repeat rule into the concrete, finite list of
occurrences the event form saves. Every rule maps to a fixed pattern; nothing
here performs I/O or validation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Union

from dateutil.relativedelta import relativedelta

from .lite_models import Occurrence, RepeatRule

logger = logging.getLogger(__name__)

# Upper bound on iterations for any rule in the table
MAX_SCAN = 30


class StepUnit(str, Enum):
    """Calendar unit a pattern advances by."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    def offset(self, amount: int) -> relativedelta:
        """Return a calendar offset of ``amount`` units.

        Month and year offsets clamp to the last valid day of the target month.
        """
        if self is StepUnit.HOUR:
            return relativedelta(hours=amount)
        if self is StepUnit.DAY:
            return relativedelta(days=amount)
        if self is StepUnit.WEEK:
            return relativedelta(weeks=amount)
        if self is StepUnit.MONTH:
            return relativedelta(months=amount)
        return relativedelta(years=amount)


DayFilter = Callable[[datetime], bool]


def is_weekday(moment: datetime) -> bool:
    """Monday through Friday."""
    return moment.weekday() < 5


def is_weekend(moment: datetime) -> bool:
    """Saturday or Sunday."""
    return moment.weekday() >= 5


@dataclass(frozen=True)
class RecurrencePattern:
    """Fixed expansion pattern for one repeat rule.

    Unfiltered patterns emit exactly ``count`` occurrences. Filtered patterns
    treat ``count`` as a scan window and emit one occurrence per scanned slot
    the filter accepts.
    """

    count: int
    step: int = 1
    unit: Optional[StepUnit] = None
    day_filter: Optional[DayFilter] = None
    label: str = ""

    @property
    def is_single(self) -> bool:
        return self.unit is None


RECURRENCE_TABLE: dict[RepeatRule, RecurrencePattern] = {
    RepeatRule.NONE: RecurrencePattern(count=1, label="None"),
    RepeatRule.HOURLY: RecurrencePattern(count=12, unit=StepUnit.HOUR, label="Hourly"),
    RepeatRule.DAILY: RecurrencePattern(count=12, unit=StepUnit.DAY, label="Daily"),
    RepeatRule.WEEKDAYS: RecurrencePattern(
        count=30, unit=StepUnit.DAY, day_filter=is_weekday, label="Weekdays"
    ),
    RepeatRule.WEEKENDS: RecurrencePattern(
        count=30, unit=StepUnit.DAY, day_filter=is_weekend, label="Weekends"
    ),
    RepeatRule.WEEKLY: RecurrencePattern(count=8, unit=StepUnit.WEEK, label="Weekly"),
    RepeatRule.BIWEEKLY: RecurrencePattern(count=8, step=2, unit=StepUnit.WEEK, label="Biweekly"),
    RepeatRule.MONTHLY: RecurrencePattern(count=6, unit=StepUnit.MONTH, label="Monthly"),
    RepeatRule.EVERY3: RecurrencePattern(
        count=4, step=3, unit=StepUnit.MONTH, label="Every 3 months"
    ),
    RepeatRule.EVERY6: RecurrencePattern(
        count=2, step=6, unit=StepUnit.MONTH, label="Every 6 months"
    ),
    RepeatRule.YEARLY: RecurrencePattern(count=2, unit=StepUnit.YEAR, label="Yearly"),
}

_missing_rules = set(RepeatRule) - set(RECURRENCE_TABLE)
if _missing_rules:
    raise RuntimeError(f"RECURRENCE_TABLE has no pattern for: {sorted(r.value for r in _missing_rules)}")
if any(p.count > MAX_SCAN for p in RECURRENCE_TABLE.values()):
    raise RuntimeError(f"RECURRENCE_TABLE patterns must not exceed {MAX_SCAN} iterations")


def pattern_for(rule: Union[RepeatRule, str, None]) -> RecurrencePattern:
    """Look up the pattern for a rule, treating unknown tags as ``none``."""
    return RECURRENCE_TABLE[RepeatRule.coerce(rule)]


def describe_rule(rule: Union[RepeatRule, str, None]) -> str:
    """Human-readable label shown by the repeat selector."""
    return pattern_for(rule).label


def repeat_options() -> list[tuple[str, str]]:
    """(value, label) pairs for every rule, in table order."""
    return [(rule.value, pattern.label) for rule, pattern in RECURRENCE_TABLE.items()]


def expand(base: Occurrence, rule: Union[RepeatRule, str, None]) -> list[Occurrence]:
    """Expand a base occurrence according to a repeat rule.

    Args:
        base: Validated base occurrence
        rule: Repeat rule tag; anything outside the closed set acts as ``none``

    Returns:
        Occurrences in chronological order, each with the base's duration
    """
    resolved = RepeatRule.coerce(rule)
    pattern = RECURRENCE_TABLE[resolved]

    if pattern.is_single:
        return [base]

    duration = base.end - base.start
    occurrences: list[Occurrence] = []

    for i in range(pattern.count):
        start = base.start + pattern.unit.offset(i * pattern.step)
        if pattern.day_filter is not None and not pattern.day_filter(start):
            continue
        occurrences.append(base.model_copy(update={"start": start, "end": start + duration}))

    logger.debug(
        "Expanded %r with rule=%s: %d occurrences (scanned %d)",
        base.title,
        resolved.value,
        len(occurrences),
        pattern.count,
    )
    return occurrences
