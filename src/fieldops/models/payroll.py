"""Derived payroll models. Recomputed per request, never persisted."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, computed_field

from fieldops.models.attendance import AttendanceEvent
from fieldops.models.employee import Money


class DailyRecord(BaseModel):
    """One (day, employee) bucket after resolving its clock bookends."""

    date: dt.date
    clock_in: Optional[dt.datetime] = None  # earliest clock-in of the day
    clock_out: Optional[dt.datetime] = None  # latest clock-out of the day
    pay_for_day: Money = Decimal("0")

    @computed_field
    @property
    def complete(self) -> bool:
        return self.clock_in is not None and self.clock_out is not None

    @computed_field
    @property
    def missing(self) -> Optional[Literal["clock-in", "clock-out"]]:
        if self.clock_in is None:
            return "clock-in"
        if self.clock_out is None:
            return "clock-out"
        return None


class PayrollSummary(BaseModel):
    """Days worked and pay owed for one employee over the queried window."""

    employee_id: str
    name: str
    email: str
    daily_rate: Money = Decimal("0")
    records: list[DailyRecord] = Field(default_factory=list)
    days_worked: int = 0
    total_pay: Money = Decimal("0")


class PayrollReport(BaseModel):
    """Summaries plus the events that matched no roster entry."""

    summaries: list[PayrollSummary] = Field(default_factory=list)
    orphaned_events: list[AttendanceEvent] = Field(default_factory=list)
    skipped_records: int = 0  # stored events that could not be parsed
    clock_ins_per_day: dict[dt.date, int] = Field(default_factory=dict)

    @computed_field
    @property
    def orphaned_count(self) -> int:
        return len(self.orphaned_events)
