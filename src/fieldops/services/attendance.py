"""Recording clock actions and reading an employee's clock status."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from fieldops.auth.tokens import Caller
from fieldops.core.exceptions import Conflict, DocumentStoreError, Internal, InvalidRequest
from fieldops.core.protocols import IDocumentStore
from fieldops.models.attendance import AttendanceEvent, ClockRequest, ClockStatus, EventType

logger = logging.getLogger(__name__)


def parse_event(record: dict[str, Any]) -> AttendanceEvent | None:
    """Build an AttendanceEvent from a stored record; None if malformed."""
    try:
        return AttendanceEvent.model_validate(record)
    except ValidationError as exc:
        logger.warning("Skipping malformed attendance record %s: %s",
                       record.get("id"), exc.error_count())
        return None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AttendanceService:
    """Appends clock events to the attendance collection."""

    def __init__(
        self,
        *,
        store: IDocumentStore,
        attendance_path: str,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: uuid4().hex,
    ) -> None:
        self._store = store
        self._attendance_path = attendance_path
        self._clock = clock
        self._new_id = id_factory

    def history(self, user_id: str) -> list[AttendanceEvent]:
        """All of an employee's events, newest first."""
        records = self._store.query(self._attendance_path, {"userId": user_id})
        events = [e for e in (parse_event(r) for r in records) if e is not None]
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events

    def status(self, user_id: str, limit: int = 10) -> ClockStatus:
        events = self.history(user_id)
        return ClockStatus(
            clocked_in=bool(events) and events[0].type == EventType.CLOCK_IN,
            recent=events[:limit],
        )

    def record(self, caller: Caller, request: ClockRequest) -> AttendanceEvent:
        history = self.history(caller.id)
        clocked_in = bool(history) and history[0].type == EventType.CLOCK_IN

        location = request.location
        if request.type == EventType.CLOCK_IN:
            if location is None:
                raise InvalidRequest("Location is required to clock in.")
            if clocked_in:
                raise Conflict("You are already clocked in.")
        else:
            if not clocked_in:
                raise Conflict("You are not clocked in.")
            if location is None:
                location = next((e.location for e in history if e.location is not None), None)

        event = AttendanceEvent(
            id=self._new_id(),
            user_id=caller.id,
            type=request.type,
            timestamp=self._clock(),
            location=location,
            user_email=caller.email or None,
        )
        try:
            self._store.write(self._attendance_path, event.id, event.to_record())
        except DocumentStoreError as exc:
            logger.exception("Failed to record %s for %s", event.type.value, caller.id)
            raise Internal("A server error occurred while recording attendance.") from exc

        logger.info("Recorded %s for %s at %s", event.type.value, caller.id, event.timestamp.isoformat())
        return event
