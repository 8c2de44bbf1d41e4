"""Type aliases used across the FieldOps core."""

from __future__ import annotations

from typing import Any

JsonDict = dict[str, Any]
IdentityId = str
CollectionPath = str
