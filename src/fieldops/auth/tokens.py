"""Bearer token extraction and caller resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fieldops.core.exceptions import IdentityProviderError, InvalidToken, Unauthenticated
from fieldops.core.protocols import IIdentityProvider
from fieldops.models.employee import Role, parse_role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Caller:
    """Authenticated principal behind a request."""

    id: str
    email: str
    role: Role | None  # None when the identity carries no (known) role claim


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def authenticate(identity: IIdentityProvider, authorization: str | None) -> Caller:
    """Resolve the caller from an ``Authorization`` header value.

    Raises Unauthenticated when the token is missing, invalid or expired.
    A caller without a role claim is returned with ``role=None``; it is up
    to the permission check to refuse it.
    """
    token = extract_bearer_token(authorization)
    if not token:
        logger.warning("Authentication failed: no bearer token provided")
        raise Unauthenticated("Unauthorized: No token provided.")

    try:
        claims = identity.verify_token(token)
    except InvalidToken as exc:
        logger.warning("Authentication failed: invalid token (%s)", exc)
        raise Unauthenticated("Unauthorized: Invalid or expired token.") from exc
    except IdentityProviderError as exc:
        logger.error("Authentication failed: identity provider error: %s", exc)
        raise Unauthenticated("Unauthorized: Invalid or expired token.") from exc

    role_claim = claims.get("role_claim")
    role = parse_role(role_claim)
    if role is None:
        logger.warning("Caller %s has no usable role claim (%r)", claims.get("id"), role_claim)

    return Caller(id=claims["id"], email=claims.get("email") or "", role=role)
