"""Clock actions and payroll reports."""

from __future__ import annotations

from datetime import date, datetime, time

from fastapi import APIRouter, Depends, Query

from fieldops.api.dependencies import current_caller, get_attendance, get_payroll
from fieldops.auth.permissions import can_read_payroll
from fieldops.auth.tokens import Caller
from fieldops.core.exceptions import Forbidden, InvalidRequest
from fieldops.models.attendance import ClockRequest
from fieldops.payroll.engine import last_n_days, total_payroll
from fieldops.services.attendance import AttendanceService
from fieldops.services.payroll import PayrollService

router = APIRouter(tags=["attendance"])


@router.post("/attendance/clock", status_code=201)
def clock(
    clock_request: ClockRequest,
    caller: Caller = Depends(current_caller),
    service: AttendanceService = Depends(get_attendance),
) -> dict:
    event = service.record(caller, clock_request)
    return event.model_dump(mode="json", by_alias=True)


@router.get("/attendance/status")
def clock_status(
    limit: int = Query(10, ge=1, le=100),
    caller: Caller = Depends(current_caller),
    service: AttendanceService = Depends(get_attendance),
) -> dict:
    return service.status(caller.id, limit=limit).model_dump(mode="json", by_alias=True)


@router.get("/payroll")
def payroll_report(
    start: date | None = None,
    end: date | None = None,
    days: int = Query(7, ge=0, le=366),
    caller: Caller = Depends(current_caller),
    service: PayrollService = Depends(get_payroll),
) -> dict:
    """Payroll over [start, end] (whole local days) or the last ``days`` days."""
    if not can_read_payroll(caller.role):
        raise Forbidden("Forbidden: Your role does not have permission to view payroll.")

    if start is not None or end is not None:
        if start is None or end is None:
            raise InvalidRequest("Both start and end are required.")
        if end < start:
            raise InvalidRequest("end must not be before start.")
        window = (datetime.combine(start, time.min), datetime.combine(end, time.max))
    else:
        window = last_n_days(days, service.now())

    report = service.report(*window)
    body = report.model_dump(mode="json")
    body.update({
        "start": window[0].isoformat(),
        "end": window[1].isoformat(),
        "total_pay": float(total_payroll(report)),
    })
    return body
