"""Custom exception hierarchy for planner_lite.

Specific exception types let callers tell a failed write apart from a bad
navigation input or a broken configuration file, and keep the original cause
chained for diagnostics.
"""

from __future__ import annotations

from typing import Optional


class PlannerError(Exception):
    """Base exception for all planner_lite errors."""


class GatewayError(PlannerError):
    """A single persistence call failed.

    Raised when:
    - The remote document store rejects a write or query
    - The HTTP transport fails (timeout, connection refused)
    - The store returns a payload without a document name
    """


class NotAuthenticatedError(GatewayError):
    """A persistence call was made without a user identity."""


class BatchPersistenceError(PlannerError):
    """At least one write in a batch failed.

    The successful writes of the same batch may still exist in the store;
    only the visible merge is all-or-nothing.
    """

    def __init__(self, message: str, failures: Optional[list[BaseException]] = None, total: int = 0):
        super().__init__(message)
        self.failures = list(failures or [])
        self.total = total

    @property
    def failed_count(self) -> int:
        """Number of writes in the batch that failed."""
        return len(self.failures)


class InvalidMonthError(PlannerError, ValueError):
    """Month picker value is not a valid ``YYYY-MM`` string."""


class ConfigError(PlannerError):
    """Configuration file could not be interpreted."""
