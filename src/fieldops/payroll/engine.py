"""Attendance aggregation and day-count payroll.

``compute_payroll`` is a pure function of its inputs: events are bucketed by
(calendar date, employee), each bucket resolves to its earliest clock-in and
latest clock-out, and a bucket with both bookends counts as one paid day at
the employee's day rate regardless of the hours between them.

Timestamps must already be expressed in the business timezone. The date
component is taken as given; no conversion happens here. Aware timestamps
have their tzinfo dropped so naive and aware inputs can be mixed.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from fieldops.models.attendance import AttendanceEvent, EventType
from fieldops.models.employee import EmployeeProfile
from fieldops.models.payroll import DailyRecord, PayrollReport, PayrollSummary


def _wall_clock(event: AttendanceEvent) -> AttendanceEvent:
    """Drop tzinfo, keeping the wall-clock time, so mixed inputs compare."""
    if event.timestamp.tzinfo is None:
        return event
    return event.model_copy(update={"timestamp": event.timestamp.replace(tzinfo=None)})


def _bucket(events: Iterable[AttendanceEvent]) -> dict[tuple[date, str], DailyRecord]:
    buckets: dict[tuple[date, str], DailyRecord] = {}
    for event in events:
        key = (event.timestamp.date(), event.user_id)
        record = buckets.get(key)
        if record is None:
            record = buckets[key] = DailyRecord(date=key[0])

        if event.type == EventType.CLOCK_IN:
            if record.clock_in is None or event.timestamp < record.clock_in:
                record.clock_in = event.timestamp
        elif event.type == EventType.CLOCK_OUT:
            if record.clock_out is None or event.timestamp > record.clock_out:
                record.clock_out = event.timestamp
    return buckets


def compute_payroll(
    events: Iterable[AttendanceEvent], employees: Iterable[EmployeeProfile]
) -> PayrollReport:
    """Derive per-employee days worked and pay from raw clock events.

    Every roster employee appears in the output, including those with no
    events. Events for ids missing from the roster are excluded from all
    totals and returned in ``orphaned_events``.
    """
    events = [_wall_clock(e) for e in events]
    roster: dict[str, EmployeeProfile] = {}
    for emp in employees:
        roster.setdefault(emp.employee_id, emp)

    summaries = {
        emp_id: PayrollSummary(
            employee_id=emp_id,
            name=emp.display_name,
            email=emp.email or "N/A",
            daily_rate=emp.daily_rate,
        )
        for emp_id, emp in roster.items()
    }

    orphaned = [e for e in events if e.user_id not in roster]
    buckets = _bucket(e for e in events if e.user_id in roster)

    for (_, emp_id), record in sorted(buckets.items()):
        summary = summaries[emp_id]
        if record.complete:
            record.pay_for_day = summary.daily_rate
            summary.days_worked += 1
        summary.records.append(record)

    for summary in summaries.values():
        summary.total_pay = summary.daily_rate * summary.days_worked

    ordered = sorted(summaries.values(), key=lambda s: (s.name, s.employee_id))
    orphaned.sort(key=lambda e: (e.timestamp, e.user_id, e.type.value, e.id))
    return PayrollReport(summaries=ordered, orphaned_events=orphaned)


# ---------------------------------------------------------------------------
# Window helpers
# ---------------------------------------------------------------------------

def filter_window(
    events: Iterable[AttendanceEvent], start: datetime, end: datetime
) -> list[AttendanceEvent]:
    """Events with ``start <= timestamp <= end``."""
    return [e for e in events if start <= e.timestamp <= end]


def last_n_days(days: int, now: datetime) -> tuple[datetime, datetime]:
    """From midnight ``days`` days ago through the last instant of today."""
    start = datetime.combine((now - timedelta(days=days)).date(), time.min, tzinfo=now.tzinfo)
    end = datetime.combine(now.date(), time.max, tzinfo=now.tzinfo)
    return start, end


def clock_ins_per_day(events: Iterable[AttendanceEvent]) -> dict[date, int]:
    """Number of clock-in events per calendar date, in date order."""
    counts: dict[date, int] = {}
    for event in events:
        if event.type == EventType.CLOCK_IN:
            day = event.timestamp.date()
            counts[day] = counts.get(day, 0) + 1
    return dict(sorted(counts.items()))


def total_payroll(report: PayrollReport) -> Decimal:
    """Sum of total pay across all summaries."""
    return sum((s.total_pay for s in report.summaries), Decimal("0"))
