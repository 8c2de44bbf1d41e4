"""In-memory backends: dict-backed collaborators for local runs and tests.

Both fakes keep a ``calls`` log of mutating operations and accept injected
failures through ``fail_on[method_name] = exception``.
"""

from __future__ import annotations

import copy
import re
from typing import Any
from uuid import uuid4

from fieldops.core.exceptions import (
    EmailAlreadyExists,
    IdentityNotFound,
    InvalidEmail,
    InvalidPassword,
    InvalidToken,
)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class _FailureInjection:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.fail_on: dict[str, Exception] = {}

    def _enter(self, method: str, *args: Any) -> None:
        self.calls.append((method, *args))
        exc = self.fail_on.get(method)
        if exc is not None:
            raise exc

    def called(self, method: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == method]


class MemoryIdentityProvider(_FailureInjection):
    """Dict-backed IIdentityProvider for unit tests."""

    def __init__(self) -> None:
        super().__init__()
        self._identities: dict[str, dict[str, Any]] = {}
        self._tokens: dict[str, str] = {}

    # ---- test helpers ----

    def add_identity(self, email: str, role: str | None = None, password: str = "secret123") -> tuple[str, str]:
        """Seed an identity directly; returns (id, token)."""
        identity_id = uuid4().hex
        self._identities[identity_id] = {
            "email": email.lower(), "password": password, "display_name": "", "role": role,
        }
        return identity_id, self.issue_token(identity_id)

    def issue_token(self, identity_id: str) -> str:
        token = f"token-{uuid4().hex}"
        self._tokens[token] = identity_id
        return token

    def revoke_token(self, token: str) -> None:
        self._tokens.pop(token, None)

    def exists(self, identity_id: str) -> bool:
        return identity_id in self._identities

    def count(self) -> int:
        return len(self._identities)

    # ---- IIdentityProvider ----

    def verify_token(self, token: str) -> dict[str, Any]:
        identity_id = self._tokens.get(token)
        if identity_id is None or identity_id not in self._identities:
            raise InvalidToken("Token is invalid or expired")
        ident = self._identities[identity_id]
        return {"id": identity_id, "email": ident["email"], "role_claim": ident["role"]}

    def create_identity(self, email: str, password: str, display_name: str = "") -> str:
        self._enter("create_identity", email)
        normalized = email.strip().lower()
        if not _EMAIL_RE.match(normalized):
            raise InvalidEmail(f"Malformed email {email!r}")
        if len(password) < 6:
            raise InvalidPassword("Password must be at least 6 characters")
        if any(i["email"] == normalized for i in self._identities.values()):
            raise EmailAlreadyExists(normalized)

        identity_id = uuid4().hex
        self._identities[identity_id] = {
            "email": normalized, "password": password, "display_name": display_name, "role": None,
        }
        return identity_id

    def set_role_claim(self, identity_id: str, role: str) -> None:
        self._enter("set_role_claim", identity_id, role)
        if identity_id not in self._identities:
            raise IdentityNotFound(identity_id)
        self._identities[identity_id]["role"] = role

    def get_role_claim(self, identity_id: str) -> str | None:
        self._enter("get_role_claim", identity_id)
        if identity_id not in self._identities:
            raise IdentityNotFound(identity_id)
        return self._identities[identity_id]["role"]

    def delete_identity(self, identity_id: str) -> None:
        self._enter("delete_identity", identity_id)
        if self._identities.pop(identity_id, None) is None:
            raise IdentityNotFound(identity_id)


class MemoryDocumentStore(_FailureInjection):
    """Dict-backed IDocumentStore for unit tests."""

    def __init__(self) -> None:
        super().__init__()
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def write(self, path: str, record_id: str, record: dict[str, Any]) -> None:
        self._enter("write", path, record_id)
        self._collections.setdefault(path, {})[record_id] = copy.deepcopy(record)

    def get(self, path: str, record_id: str) -> dict[str, Any] | None:
        record = self._collections.get(path, {}).get(record_id)
        if record is None:
            return None
        return {**copy.deepcopy(record), "id": record_id}

    def query(self, path: str, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        self._enter("query", path)
        filters = filters or {}
        return [
            {**copy.deepcopy(rec), "id": rid}
            for rid, rec in self._collections.get(path, {}).items()
            if all(rec.get(k) == v for k, v in filters.items())
        ]
