"""Unit tests for planner_lite.lite_event_builder."""

import random
from datetime import datetime

import pytest

from planner_lite.lite_event_builder import (
    PALETTE,
    build_event,
    combine_local,
    default_draft,
    draft_for_add_button,
    draft_for_date_click,
    draft_for_range_select,
    time_options,
)
from planner_lite.lite_models import EventColor, EventDraft, RepeatRule

pytestmark = pytest.mark.unit


class _LastChoice:
    """Random stand-in that always picks the last element."""

    def choice(self, seq):
        return seq[-1]


REQUIRED = ("title", "date_str", "start_time", "end_time")
VALID = {"title": "Standup", "date_str": "2024-01-01", "start_time": "09:00", "end_time": "09:15"}


@pytest.mark.parametrize("field", REQUIRED)
@pytest.mark.parametrize("blank", [None, "", "   ", "\t\n"])
def test_build_returns_none_when_required_field_blank(field, blank):
    kwargs = dict(VALID)
    kwargs[field] = blank
    assert build_event(**kwargs) is None


def test_build_combines_date_and_times(seeded_rng):
    occurrence = build_event(**VALID, location="Room 1", notes="  daily  ", rng=seeded_rng)

    assert occurrence is not None
    assert occurrence.title == "Standup"
    assert occurrence.start == datetime(2024, 1, 1, 9, 0)
    assert occurrence.end == datetime(2024, 1, 1, 9, 15)
    assert occurrence.location == "Room 1"
    # notes are copied verbatim
    assert occurrence.notes == "  daily  "
    assert occurrence.all_day is False


def test_build_picks_color_from_palette(seeded_rng):
    colors = {build_event(**VALID, rng=seeded_rng).color for _ in range(50)}

    assert colors <= set(EventColor)
    assert len(colors) > 1


def test_build_uses_injected_random_source():
    occurrence = build_event(**VALID, rng=_LastChoice())
    assert occurrence.color is PALETTE[-1]


def test_build_does_not_require_start_before_end():
    occurrence = build_event("Late", "2024-01-01", "17:00", "08:00")

    assert occurrence is not None
    assert occurrence.end < occurrence.start


@pytest.mark.parametrize(
    "date_str,start,end",
    [
        ("2024-13-45", "09:00", "10:00"),
        ("yesterday", "09:00", "10:00"),
        ("2024-01-01", "9am", "10:00"),
        ("2024-01-01", "09:00", "25:00"),
    ],
)
def test_build_returns_none_for_unparseable_values(date_str, start, end):
    assert build_event("Meeting", date_str, start, end) is None


def test_build_defaults_missing_extras_to_empty_strings():
    occurrence = build_event(**VALID, location=None, notes=None)
    assert occurrence.location == ""
    assert occurrence.notes == ""


def test_combine_local_is_naive():
    combined = combine_local("2024-03-10", "02:00")
    assert combined == datetime(2024, 3, 10, 2, 0)
    assert combined.tzinfo is None


def test_time_options_are_24_hourly_labels():
    options = time_options()

    assert len(options) == 24
    assert options[0] == ("00:00", "12:00 AM")
    assert options[9] == ("09:00", "09:00 AM")
    assert options[12] == ("12:00", "12:00 PM")
    assert options[23] == ("23:00", "11:00 PM")


def test_date_click_draft_uses_default_hours():
    draft = draft_for_date_click("2024-04-02")

    assert draft.date == "2024-04-02"
    assert draft.start_time == "09:00"
    assert draft.end_time == "10:00"
    assert draft.repeat is RepeatRule.NONE


def test_date_click_keeps_previous_form_text():
    previous = EventDraft(title="Dentist", notes="bring card", date="2024-01-01", repeat=RepeatRule.YEARLY)

    draft = draft_for_date_click("2024-04-02", base=previous)

    assert draft.title == "Dentist"
    assert draft.notes == "bring card"
    assert draft.repeat is RepeatRule.YEARLY
    assert draft.date == "2024-04-02"


def test_range_select_without_end_defaults_to_one_hour():
    draft = draft_for_range_select(datetime(2024, 3, 4, 14, 0))

    assert draft.date == "2024-03-04"
    assert draft.start_time == "14:00"
    assert draft.end_time == "15:00"


def test_range_select_adds_an_hour_to_reported_end():
    draft = draft_for_range_select("2024-03-04T14:00:00", "2024-03-04T15:30:00")

    assert draft.start_time == "14:00"
    assert draft.end_time == "16:30"


def test_add_button_draft_spans_current_hour():
    draft = draft_for_add_button(datetime(2024, 3, 4, 14, 25))

    assert draft.date == "2024-03-04"
    assert draft.start_time == "14:00"
    assert draft.end_time == "15:00"


def test_default_draft():
    draft = default_draft(datetime(2024, 7, 9).date())

    assert draft == EventDraft(date="2024-07-09")
    assert (draft.start_time, draft.end_time) == ("09:00", "10:00")


def test_palette_has_five_colors():
    assert len(PALETTE) == 5
    assert random.Random(0).choice(PALETTE) in EventColor
