"""Attendance event models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EventType(StrEnum):
    CLOCK_IN = "clock-in"
    CLOCK_OUT = "clock-out"


class GeoPoint(BaseModel):
    """Location captured by the field client at clock time."""

    lat: float
    lng: float


class AttendanceEvent(BaseModel):
    """Immutable clock-in/clock-out fact. Append-only."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = ""
    user_id: str
    type: EventType
    timestamp: datetime
    location: Optional[GeoPoint] = None
    user_email: Optional[str] = None

    def to_record(self) -> dict:
        record = self.model_dump(by_alias=True, exclude={"id"})
        record["type"] = self.type.value
        record["timestamp"] = self.timestamp.isoformat()
        return record


class ClockRequest(BaseModel):
    """Body of a clock action."""

    type: EventType
    location: Optional[GeoPoint] = None


class ClockStatus(BaseModel):
    """Whether an employee is currently clocked in, with recent history."""

    clocked_in: bool = False
    recent: list[AttendanceEvent] = Field(default_factory=list)
