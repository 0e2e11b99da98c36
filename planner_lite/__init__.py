"""planner_lite - calendar core of a personal productivity planner.

Builds events from form input, expands repeat rules into concrete occurrences,
saves them as an all-or-nothing batch, and keeps the calendar view title and
range in step with the embedded calendar widget.
"""

__version__ = "0.1.0"

from .calendar_session import CalendarSession, SubmissionResult, SubmissionStatus, save_batch
from .lite_event_builder import build_event
from .lite_models import EventColor, EventDraft, Granularity, Occurrence, PersistedOccurrence, RepeatRule, ViewState
from .lite_recurrence import expand
from .lite_view_controller import CalendarWidgetPort, ViewController

__all__ = [
    "CalendarSession",
    "CalendarWidgetPort",
    "EventColor",
    "EventDraft",
    "Granularity",
    "Occurrence",
    "PersistedOccurrence",
    "RepeatRule",
    "SubmissionResult",
    "SubmissionStatus",
    "ViewController",
    "ViewState",
    "__version__",
    "build_event",
    "expand",
    "save_batch",
]
