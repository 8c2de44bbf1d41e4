"""Loads roster and attendance from the store and runs the payroll engine."""

from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from fieldops.core.protocols import IDocumentStore
from fieldops.models.attendance import AttendanceEvent
from fieldops.models.employee import EmployeeProfile
from fieldops.models.payroll import PayrollReport
from fieldops.payroll.engine import clock_ins_per_day, compute_payroll, filter_window
from fieldops.services.attendance import parse_event

logger = logging.getLogger(__name__)


class PayrollService:
    """Builds payroll reports over a window of business-local time."""

    def __init__(
        self,
        *,
        store: IDocumentStore,
        employees_path: str,
        attendance_path: str,
        business_timezone: str = "UTC",
    ) -> None:
        self._store = store
        self._employees_path = employees_path
        self._attendance_path = attendance_path
        self._tz = ZoneInfo(business_timezone)

    def to_local(self, ts: datetime) -> datetime:
        """Naive business-local time; naive input is taken as already local."""
        if ts.tzinfo is None:
            return ts
        return ts.astimezone(self._tz).replace(tzinfo=None)

    def now(self) -> datetime:
        return datetime.now(self._tz).replace(tzinfo=None)

    def roster(self) -> list[EmployeeProfile]:
        profiles: list[EmployeeProfile] = []
        for record in self._store.query(self._employees_path):
            try:
                profiles.append(EmployeeProfile.from_record(record))
            except ValidationError as exc:
                logger.warning("Skipping malformed employee record %s: %s", record.get("id"), exc)
        return profiles

    def report(self, start: datetime, end: datetime) -> PayrollReport:
        """Payroll for events with ``start <= local timestamp <= end``."""
        events: list[AttendanceEvent] = []
        skipped = 0
        for record in self._store.query(self._attendance_path):
            event = parse_event(record)
            if event is None:
                skipped += 1
                continue
            events.append(event.model_copy(update={"timestamp": self.to_local(event.timestamp)}))

        window = filter_window(events, self.to_local(start), self.to_local(end))
        report = compute_payroll(window, self.roster())
        if report.orphaned_count:
            logger.warning("%d attendance event(s) reference employees missing from the roster",
                           report.orphaned_count)
        report.skipped_records = skipped
        report.clock_ins_per_day = clock_ins_per_day(window)
        return report
