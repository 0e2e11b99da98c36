"""Calendar session: event submission and visible event state for planner_lite.

A submission builds the base occurrence, expands it with the selected repeat
rule, saves every occurrence concurrently and merges the batch into the
visible events only when every write succeeded.

Note the asymmetry: when one write fails the others may already be stored.
Only the visible merge is atomic; nothing is rolled back or retried.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .lite_event_builder import build_event
from .lite_exceptions import BatchPersistenceError
from .lite_models import EventDraft, Occurrence, PersistedOccurrence
from .lite_persistence import PersistenceGateway
from .lite_recurrence import expand

logger = logging.getLogger(__name__)

SAVE_FAILED_NOTICE = "Failed to save event."


class SubmissionStatus(str, Enum):
    """Outcome of one form submission."""

    SAVED = "saved"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass
class SubmissionResult:
    """Result of one form submission."""

    status: SubmissionStatus
    events: list[PersistedOccurrence] = field(default_factory=list)
    expanded_count: int = 0
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status is SubmissionStatus.SAVED


async def save_batch(
    gateway: PersistenceGateway,
    occurrences: list[Occurrence],
    user_id: str,
) -> list[PersistedOccurrence]:
    """Save occurrences concurrently and join on all of them.

    Args:
        gateway: Store to write to
        occurrences: Occurrences to save, one write each
        user_id: Owner identity passed to every write

    Returns:
        Persisted occurrences in input order

    Raises:
        BatchPersistenceError: If any write failed; raised only after every
            write has settled
    """
    tasks = [asyncio.create_task(gateway.save(occurrence, user_id)) for occurrence in occurrences]
    results = await asyncio.gather(*tasks, return_exceptions=True)

    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        for i, result in enumerate(results):
            if isinstance(result, BaseException):
                logger.error("Write %d/%d failed: %s", i + 1, len(results), result)
        raise BatchPersistenceError(
            f"{len(failures)} of {len(results)} writes failed", failures=failures, total=len(results)
        )

    return [
        PersistedOccurrence.from_occurrence(identifier, occurrence)
        for identifier, occurrence in zip(results, occurrences)
    ]


class CalendarSession:
    """Visible calendar state for one signed-in user.

    Args:
        gateway: Persistence gateway
        user_id: Identity threaded into every gateway call
        rng: Optional random source for event colors
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        user_id: str,
        rng: Optional[random.Random] = None,
    ):
        self.gateway = gateway
        self.user_id = user_id
        self.events: list[PersistedOccurrence] = []
        self.notices: list[str] = []
        self.draft: Optional[EventDraft] = None
        self.saving = False
        self._rng = rng

    def open_draft(self, draft: EventDraft) -> None:
        self.draft = draft

    def close_draft(self) -> None:
        self.draft = None

    async def load(self) -> list[PersistedOccurrence]:
        """Replace visible events with the user's stored events.

        A failed load is logged and leaves the visible events untouched.
        """
        if not self.user_id:
            return self.events
        try:
            self.events = await self.gateway.list_events(self.user_id)
        except Exception:
            logger.exception("Failed to load events for user %s", self.user_id)
        return self.events

    async def submit(self, draft: Optional[EventDraft] = None) -> SubmissionResult:
        """Submit the event form.

        Args:
            draft: Form contents; the open draft when omitted

        Returns:
            SubmissionResult describing what became visible
        """
        form = draft or self.draft
        if form is None:
            return SubmissionResult(status=SubmissionStatus.INVALID, error="No event form open")

        base = build_event(
            form.title.strip(),
            form.date,
            form.start_time,
            form.end_time,
            location=form.location.strip(),
            notes=form.notes.strip(),
            rng=self._rng,
        )
        if base is None:
            return SubmissionResult(status=SubmissionStatus.INVALID, error="Missing required field")

        occurrences = expand(base, form.repeat)
        logger.info(
            "Saving %d occurrence(s) of %r (repeat=%s)",
            len(occurrences),
            base.title,
            form.repeat.value,
        )

        self.saving = True
        try:
            persisted = await save_batch(self.gateway, occurrences, self.user_id)
        except BatchPersistenceError as e:
            logger.exception("Error saving event batch for %r", base.title)
            self.notices.append(SAVE_FAILED_NOTICE)
            return SubmissionResult(
                status=SubmissionStatus.FAILED,
                expanded_count=len(occurrences),
                error=str(e),
            )
        finally:
            self.saving = False

        self.events.extend(persisted)
        self.close_draft()
        return SubmissionResult(
            status=SubmissionStatus.SAVED,
            events=persisted,
            expanded_count=len(occurrences),
        )
