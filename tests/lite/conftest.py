"""Shared fixtures for planner_lite tests."""

import random
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

import pytest

from planner_lite.lite_models import EventColor, EventDraft, Granularity, Occurrence
from planner_lite.lite_persistence import InMemoryPersistenceGateway
from planner_lite.lite_widget import HeadlessCalendarWidget


def pytest_configure(config: Any) -> None:
    """Register markers used by the lite suite."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Tests spanning several modules")


@pytest.fixture
def make_occurrence() -> Callable[..., Occurrence]:
    """Factory for base occurrences with sensible defaults."""

    def _make(
        start: datetime = datetime(2024, 1, 1, 9, 0),
        end: datetime = datetime(2024, 1, 1, 10, 0),
        title: str = "Standup",
        **extra: Any,
    ) -> Occurrence:
        return Occurrence(
            title=title,
            start=start,
            end=end,
            color=extra.pop("color", EventColor.TEAL),
            **extra,
        )

    return _make


@pytest.fixture
def seeded_rng() -> random.Random:
    """Deterministic random source for color draws."""
    return random.Random(1234)


@pytest.fixture
def memory_gateway() -> InMemoryPersistenceGateway:
    return InMemoryPersistenceGateway()


@pytest.fixture
def event_draft() -> EventDraft:
    return EventDraft(
        title="Team sync",
        location="Room 4",
        date="2024-06-01",
        start_time="09:00",
        end_time="10:00",
        notes="Agenda in doc",
    )


@pytest.fixture
def month_widget() -> HeadlessCalendarWidget:
    """Headless widget in month view on 2024-01-15 with a fixed clock."""
    return HeadlessCalendarWidget(
        current=date(2024, 1, 15),
        granularity=Granularity.MONTH,
        clock=lambda: date(2024, 5, 20),
    )


@pytest.fixture(autouse=True)
def clean_planner_environment(monkeypatch: Any) -> None:
    """Keep PLANNER_* variables from the host out of the tests."""
    for key in (
        "PLANNER_DEBUG",
        "PLANNER_LOG_LEVEL",
        "PLANNER_FIRESTORE_PROJECT",
        "PLANNER_FIRESTORE_DATABASE",
        "PLANNER_FIRESTORE_COLLECTION",
        "PLANNER_FIRESTORE_API_KEY",
        "PLANNER_DEFAULT_VIEW",
        "PLANNER_SAVE_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)
