"""FieldOps exception hierarchy.

Request-facing errors carry the HTTP status and a message that is safe to
show to the client. Backend errors carry provider detail and are translated
by the service layer before they reach the API.
"""

from __future__ import annotations


class FieldOpsError(Exception):
    """Base exception for all FieldOps errors."""


# ---------------------------------------------------------------------------
# Request-facing taxonomy
# ---------------------------------------------------------------------------

class RequestError(FieldOpsError):
    """Error surfaced to an HTTP caller."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class Unauthenticated(RequestError):
    """Missing, invalid or expired bearer token."""

    status_code = 401


class InvalidRequest(RequestError):
    """Request failed validation; nothing was mutated."""

    status_code = 400


class Forbidden(RequestError):
    """Caller's role does not permit the operation."""

    status_code = 403


class NotFound(RequestError):
    """Referenced record does not exist."""

    status_code = 404


class Conflict(RequestError):
    """Operation conflicts with existing state (e.g. email already in use)."""

    status_code = 409


class Internal(RequestError):
    """Unclassified downstream failure."""

    status_code = 500


# ---------------------------------------------------------------------------
# Identity collaborator
# ---------------------------------------------------------------------------

class IdentityProviderError(FieldOpsError):
    """Identity provider call failed."""


class InvalidToken(IdentityProviderError):
    """Token could not be verified (malformed, revoked or expired)."""


class EmailAlreadyExists(IdentityProviderError):
    """An identity with this email already exists."""


class InvalidEmail(IdentityProviderError):
    """Email rejected by the identity provider."""


class InvalidPassword(IdentityProviderError):
    """Password rejected by the identity provider's policy."""


class IdentityNotFound(IdentityProviderError):
    """No identity with the given id."""


# ---------------------------------------------------------------------------
# Document store collaborator
# ---------------------------------------------------------------------------

class DocumentStoreError(FieldOpsError):
    """Document store read or write failed."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")
