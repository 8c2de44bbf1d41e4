"""User provisioning: authenticate, validate, authorize, then create the
identity and its employee profile.

The identity store and the document store share no transaction, so a failure
after the identity exists is undone by deleting that identity again before
the original error is surfaced.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from fieldops.auth.permissions import can_create
from fieldops.auth.tokens import Caller, authenticate
from fieldops.core.exceptions import (
    Conflict,
    DocumentStoreError,
    EmailAlreadyExists,
    Forbidden,
    IdentityProviderError,
    Internal,
    InvalidEmail,
    InvalidPassword,
    InvalidRequest,
)
from fieldops.core.protocols import IDocumentStore, IIdentityProvider
from fieldops.models.employee import (
    EmployeeProfile,
    ProvisionRequest,
    ProvisionResult,
    Role,
    coerce_rate,
    parse_role,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("email", "password", "role", "firstName", "lastName", "designation")
MIN_PASSWORD_LENGTH = 6


def _present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _supplied(field: str, value: Any) -> bool:
    # Passwords are taken verbatim; whitespace counts toward the length.
    if field == "password":
        return isinstance(value, str) and value != ""
    return _present(value)


def _optional(value: Any) -> str | None:
    return value.strip() if _present(value) else None


def validate_request(body: Any) -> ProvisionRequest:
    """Check a raw request body and build a ProvisionRequest.

    Raises InvalidRequest; never touches a collaborator.
    """
    if not isinstance(body, dict):
        raise InvalidRequest("Invalid request body format.")

    missing = [f for f in REQUIRED_FIELDS if not _supplied(f, body.get(f))]
    if missing:
        logger.info("Validation failed: missing required fields %s", missing)
        raise InvalidRequest(f"Missing required fields: {', '.join(missing)}.")

    if len(body["password"]) < MIN_PASSWORD_LENGTH:
        raise InvalidRequest(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")

    role = parse_role(body["role"])
    if role is None:
        allowed = ", ".join(r.value for r in Role)
        raise InvalidRequest(f"Invalid role specified: {body['role']}. Must be one of: {allowed}")

    project_id = _optional(body.get("projectId"))
    if role == Role.FIELD_EMPLOYEE and project_id is None:
        raise InvalidRequest("Project assignment is required for Field Employees.")

    return ProvisionRequest(
        email=body["email"].strip(),
        password=body["password"],
        role=role,
        first_name=body["firstName"].strip(),
        last_name=body["lastName"].strip(),
        designation=body["designation"].strip(),
        project_id=project_id if role == Role.FIELD_EMPLOYEE else None,
        daily_rate=coerce_rate(body.get("dailyRate")),
        department=_optional(body.get("department")),
        contact_number=_optional(body.get("contactNumber")),
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProvisioningService:
    """Creates accounts on behalf of privileged callers."""

    def __init__(
        self,
        *,
        identity: IIdentityProvider,
        store: IDocumentStore,
        employees_path: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._identity = identity
        self._store = store
        self._employees_path = employees_path
        self._clock = clock

    def provision_user(self, authorization: str | None, body: Any) -> ProvisionResult:
        """Full request flow: token, validation, permission, provisioning."""
        caller = authenticate(self._identity, authorization)
        return self.provision_for(caller, body)

    def provision_for(self, caller: Caller, body: Any) -> ProvisionResult:
        request = validate_request(body)

        if not can_create(caller.role, request.role):
            logger.warning(
                "Authorization denied: caller %s with role %r attempted to create role %r",
                caller.id, caller.role, request.role.value,
            )
            raise Forbidden(
                "Forbidden: Your role does not have permission to create this type of user."
            )

        logger.info("Caller %s (%s) provisioning %s as %s",
                    caller.id, caller.role, request.email, request.role.value)
        return self._provision(request)

    def bootstrap_admin(self, body: Any) -> ProvisionResult:
        """Create the first Admin without a caller token.

        Refused once any Admin profile exists, so this cannot be used to
        mint further privileged accounts.
        """
        request = validate_request(body)
        if request.role != Role.ADMIN:
            raise InvalidRequest("Bootstrap can only create an Admin account.")

        existing = self._store.query(self._employees_path, {"role": Role.ADMIN.value})
        if existing:
            logger.warning("Bootstrap refused: %d Admin profile(s) already exist", len(existing))
            raise Forbidden("An Admin account already exists; bootstrap is disabled.")

        logger.warning("Bootstrapping initial Admin %s", request.email)
        return self._provision(request)

    # ---- internals ----

    def _provision(self, request: ProvisionRequest) -> ProvisionResult:
        try:
            uid = self._identity.create_identity(
                request.email, request.password, request.display_name,
            )
        except EmailAlreadyExists as exc:
            raise Conflict("This email address is already in use by another account.") from exc
        except InvalidEmail as exc:
            raise InvalidRequest("The email address is badly formatted.") from exc
        except InvalidPassword as exc:
            raise InvalidRequest("Password is invalid (must be at least 6 characters).") from exc
        except IdentityProviderError as exc:
            logger.error("Identity creation failed for %s: %s", request.email, exc)
            raise Internal("An unexpected error occurred while creating the user.") from exc
        logger.info("Created identity %s for %s", uid, request.email)

        try:
            self._identity.set_role_claim(uid, request.role.value)
            logger.info("Set role claim %r on %s", request.role.value, uid)

            profile = EmployeeProfile(
                id=uid,
                user_id=uid,
                email=request.email,
                role=request.role,
                first_name=request.first_name,
                last_name=request.last_name,
                designation=request.designation,
                department=request.department,
                contact_number=request.contact_number,
                daily_rate=request.daily_rate,
                project_id=request.project_id,
                created_at=self._clock(),
            )
            self._store.write(self._employees_path, uid, profile.to_record())
        except Exception as exc:
            logger.exception("Provisioning of %s failed after identity %s was created", request.email, uid)
            self._compensate(uid)
            if isinstance(exc, DocumentStoreError):
                raise Internal(
                    "A server error occurred while saving user data. Please try again later."
                ) from exc
            raise Internal("An unexpected error occurred while creating the user.") from exc

        logger.info("Wrote employee profile %s/%s", self._employees_path, uid)
        return ProvisionResult(
            uid=uid,
            message=f"User {request.email} created successfully with role {request.role.value}.",
        )

    def _compensate(self, uid: str) -> None:
        try:
            self._identity.delete_identity(uid)
        except Exception:
            logger.critical(
                "ORPHANED IDENTITY %s: compensating delete failed, manual cleanup required",
                uid, exc_info=True,
            )
        else:
            logger.warning("Deleted partially provisioned identity %s", uid)
