"""Shared test doubles: re-export memory backends."""

from __future__ import annotations

from fieldops.persistence.memory_backend import MemoryDocumentStore, MemoryIdentityProvider

__all__ = ["MemoryDocumentStore", "MemoryIdentityProvider"]
