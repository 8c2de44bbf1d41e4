"""User provisioning and profile endpoints."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Body, Depends, Header, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from fieldops.api.dependencies import (
    cors_headers,
    current_caller,
    get_profiles,
    get_provisioning,
    get_settings,
)
from fieldops.auth.tokens import Caller, authenticate
from fieldops.core.config import AppSettings
from fieldops.core.exceptions import InvalidRequest
from fieldops.services.profiles import ProfileService
from fieldops.services.provisioning import ProvisioningService

router = APIRouter(tags=["users"])

PROVISION_PATH = "/provisionUser"


@router.options(PROVISION_PATH)
def provision_preflight(settings: AppSettings = Depends(get_settings)) -> Response:
    return Response(status_code=204, headers=cors_headers(settings))


@router.post(PROVISION_PATH, status_code=201)
async def provision_user(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
    service: ProvisioningService = Depends(get_provisioning),
    settings: AppSettings = Depends(get_settings),
) -> JSONResponse:
    """Create an identity and employee profile on behalf of the caller.

    The token is checked before the body is parsed.
    """
    caller = await run_in_threadpool(authenticate, request.app.state.identity, authorization)
    raw = await request.body()
    try:
        body = json.loads(raw) if raw.strip() else {}
    except ValueError as exc:
        raise InvalidRequest("Invalid request body format.") from exc

    result = await run_in_threadpool(service.provision_for, caller, body)
    return JSONResponse(result.model_dump(), status_code=201, headers=cors_headers(settings))


@router.api_route(PROVISION_PATH, methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def provision_method_not_allowed(settings: AppSettings = Depends(get_settings)) -> JSONResponse:
    headers = {**cors_headers(settings), "Allow": "POST, OPTIONS"}
    return JSONResponse({"error": "Method Not Allowed"}, status_code=405, headers=headers)


@router.patch("/employees/{employee_id}")
def update_employee(
    employee_id: str,
    changes: Any = Body(None),
    caller: Caller = Depends(current_caller),
    service: ProfileService = Depends(get_profiles),
) -> dict:
    """Apply HR edits to an employee profile."""
    profile = service.update_profile(caller, employee_id, changes if changes is not None else {})
    return profile.model_dump(mode="json", by_alias=True)
