"""Persistence gateways for planner_lite.

The calendar core only needs two things from storage: save one occurrence
for a user and get back its identifier, and list a user's stored events.
The identity is always passed explicitly.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol

import httpx
from dateutil import parser as date_parser

from .core.http_client import build_timeout, get_shared_client
from .lite_exceptions import GatewayError, NotAuthenticatedError
from .lite_models import DEFAULT_STORED_COLOR, Occurrence, PersistedOccurrence

logger = logging.getLogger(__name__)

FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"


class PersistenceGateway(Protocol):
    """Durable store for calendar occurrences."""

    async def save(self, occurrence: Occurrence, user_id: str) -> str:
        """Store one occurrence for a user.

        Args:
            occurrence: Occurrence to store
            user_id: Owner identity

        Returns:
            Store-assigned identifier

        Raises:
            GatewayError: If the write fails
        """
        ...

    async def list_events(self, user_id: str) -> list[PersistedOccurrence]:
        """Return every stored occurrence owned by ``user_id``."""
        ...


def _require_user(user_id: str) -> None:
    if not user_id or not str(user_id).strip():
        raise NotAuthenticatedError("Not logged in")


class InMemoryPersistenceGateway:
    """Dict-backed gateway used by the CLI fallback and by tests.

    Args:
        fail_when: Optional predicate; writes of occurrences it accepts fail
        delay: Seconds each write waits before completing
    """

    def __init__(
        self,
        fail_when: Optional[Callable[[Occurrence], bool]] = None,
        delay: float = 0.0,
    ):
        self._records: dict[str, tuple[str, PersistedOccurrence]] = {}
        self._fail_when = fail_when
        self._delay = delay
        self.save_calls = 0

    def __len__(self) -> int:
        return len(self._records)

    async def save(self, occurrence: Occurrence, user_id: str) -> str:
        _require_user(user_id)
        self.save_calls += 1
        await asyncio.sleep(self._delay)
        if self._fail_when is not None and self._fail_when(occurrence):
            raise GatewayError(f"Write rejected for {occurrence.title!r} at {occurrence.start.isoformat()}")
        identifier = uuid.uuid4().hex
        self._records[identifier] = (user_id, PersistedOccurrence.from_occurrence(identifier, occurrence))
        return identifier

    async def list_events(self, user_id: str) -> list[PersistedOccurrence]:
        _require_user(user_id)
        return [record for owner, record in self._records.values() if owner == user_id]


def _to_timestamp(value: datetime) -> str:
    # Naive values are local wall-clock times
    aware = value.astimezone() if value.tzinfo is None else value
    return aware.isoformat()


def _from_timestamp(value: str) -> datetime:
    return date_parser.isoparse(value).astimezone().replace(tzinfo=None)


def encode_fields(occurrence: Occurrence, user_id: str, created_at: datetime) -> dict[str, Any]:
    """Encode an occurrence as Firestore typed field values."""
    return {
        "userId": {"stringValue": user_id},
        "title": {"stringValue": occurrence.title},
        "start": {"timestampValue": _to_timestamp(occurrence.start)},
        "end": {"timestampValue": _to_timestamp(occurrence.end)},
        "color": {"stringValue": occurrence.color.value},
        "location": {"stringValue": occurrence.location or ""},
        "notes": {"stringValue": occurrence.notes or ""},
        "allDay": {"booleanValue": occurrence.all_day},
        "createdAt": {"timestampValue": created_at.isoformat()},
    }


def _field_value(fields: dict[str, Any], name: str, default: Any = None) -> Any:
    raw = fields.get(name)
    if not isinstance(raw, dict) or not raw:
        return default
    kind, value = next(iter(raw.items()))
    if kind == "nullValue":
        return default
    if kind == "timestampValue":
        return _from_timestamp(value)
    if kind == "integerValue":
        return int(value)
    return value


def document_id(name: str) -> str:
    """Last path segment of a Firestore document resource name."""
    return name.rstrip("/").rsplit("/", 1)[-1]


def decode_document(document: dict[str, Any]) -> PersistedOccurrence:
    """Decode a Firestore document into a PersistedOccurrence.

    Raises:
        GatewayError: If the document lacks a name, title or times
    """
    name = document.get("name")
    fields = document.get("fields") or {}
    try:
        return PersistedOccurrence(
            id=document_id(name),
            title=_field_value(fields, "title"),
            start=_field_value(fields, "start"),
            end=_field_value(fields, "end"),
            color=_field_value(fields, "color") or DEFAULT_STORED_COLOR,
            location=_field_value(fields, "location", ""),
            notes=_field_value(fields, "notes", ""),
            all_day=bool(_field_value(fields, "allDay", False)),
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise GatewayError(f"Malformed event document {name!r}: {e}") from e


class FirestorePersistenceGateway:
    """Gateway backed by the Firestore REST API.

    Args:
        project_id: Firebase/GCP project id
        collection: Collection holding event documents
        database: Firestore database id
        api_key: Optional web API key appended as ``key``
        id_token: Optional Firebase ID token sent as a bearer token
        client: Optional httpx client; the shared pooled client when omitted
        timeout_seconds: Read timeout for each request
    """

    def __init__(
        self,
        project_id: str,
        collection: str = "events",
        database: str = "(default)",
        api_key: Optional[str] = None,
        id_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 30.0,
    ):
        if not project_id:
            raise ValueError("project_id is required")
        self.project_id = project_id
        self.collection = collection
        self.database = database
        self.api_key = api_key
        self.id_token = id_token
        self._client = client
        self._timeout = build_timeout(timeout_seconds)

    @property
    def documents_url(self) -> str:
        return f"{FIRESTORE_BASE_URL}/projects/{self.project_id}/databases/{self.database}/documents"

    def _params(self) -> dict[str, str]:
        return {"key": self.api_key} if self.api_key else {}

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.id_token}"} if self.id_token else {}

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = await get_shared_client("firestore", timeout=self._timeout)
        return self._client

    async def _post(self, url: str, payload: dict[str, Any]) -> Any:
        client = await self._get_client()
        try:
            response = await client.post(
                url,
                json=payload,
                params=self._params(),
                headers=self._headers(),
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Firestore request to %s failed with HTTP %d", url, e.response.status_code
            )
            raise GatewayError(f"Firestore returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Firestore request to %s failed: %s", url, e)
            raise GatewayError(f"Firestore request failed: {e}") from e
        except ValueError as e:
            raise GatewayError(f"Firestore returned invalid JSON: {e}") from e

    async def save(self, occurrence: Occurrence, user_id: str) -> str:
        _require_user(user_id)
        payload = {"fields": encode_fields(occurrence, user_id, datetime.now(timezone.utc))}
        body = await self._post(f"{self.documents_url}/{self.collection}", payload)
        name = body.get("name") if isinstance(body, dict) else None
        if not name:
            raise GatewayError("Firestore response did not include a document name")
        identifier = document_id(name)
        logger.debug("Saved %r as %s", occurrence.title, identifier)
        return identifier

    async def list_events(self, user_id: str) -> list[PersistedOccurrence]:
        _require_user(user_id)
        query = {
            "structuredQuery": {
                "from": [{"collectionId": self.collection}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": "userId"},
                        "op": "EQUAL",
                        "value": {"stringValue": user_id},
                    }
                },
            }
        }
        rows = await self._post(f"{self.documents_url}:runQuery", query)
        if not isinstance(rows, list):
            raise GatewayError("Firestore runQuery response was not a list")
        events = [decode_document(row["document"]) for row in rows if isinstance(row, dict) and "document" in row]
        logger.debug("Loaded %d events for user %s", len(events), user_id)
        return events
