"""FastAPI dependencies resolving services and the calling principal."""

from __future__ import annotations

from fastapi import Header, Request

from fieldops.auth.tokens import Caller, authenticate
from fieldops.core.config import AppSettings
from fieldops.services.attendance import AttendanceService
from fieldops.services.payroll import PayrollService
from fieldops.services.profiles import ProfileService
from fieldops.services.provisioning import ProvisioningService


def cors_headers(settings: AppSettings) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.cors_allow_origin,
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
    }


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_provisioning(request: Request) -> ProvisioningService:
    return request.app.state.provisioning


def get_profiles(request: Request) -> ProfileService:
    return request.app.state.profiles


def get_attendance(request: Request) -> AttendanceService:
    return request.app.state.attendance


def get_payroll(request: Request) -> PayrollService:
    return request.app.state.payroll


def current_caller(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
) -> Caller:
    """Require a valid bearer token; resolves to the calling principal."""
    caller = authenticate(request.app.state.identity, authorization)
    request.state.caller = caller
    return caller
