"""Protocol interfaces for the external collaborators.

Services depend on these Protocols only; structural typing, no inheritance
required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from fieldops.core.types import CollectionPath, IdentityId, JsonDict


# ---------------------------------------------------------------------------
# Identity Provider
# ---------------------------------------------------------------------------

@runtime_checkable
class IIdentityProvider(Protocol):
    """Externally managed principals and their role claim."""

    def verify_token(self, token: str) -> JsonDict:
        """Return ``{"id", "email", "role_claim"}`` or raise InvalidToken."""
        ...

    def create_identity(self, email: str, password: str, display_name: str = "") -> IdentityId: ...

    def set_role_claim(self, identity_id: IdentityId, role: str) -> None: ...

    def get_role_claim(self, identity_id: IdentityId) -> str | None: ...

    def delete_identity(self, identity_id: IdentityId) -> None: ...


# ---------------------------------------------------------------------------
# Document Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IDocumentStore(Protocol):
    """Collection-scoped document storage."""

    def write(self, path: CollectionPath, record_id: str, record: JsonDict) -> None: ...

    def get(self, path: CollectionPath, record_id: str) -> JsonDict | None: ...

    def query(self, path: CollectionPath, filters: dict[str, Any] | None = None) -> list[JsonDict]:
        """Return all records in ``path`` whose fields equal every filter value.

        Each returned record carries its key under ``"id"``.
        """
        ...
