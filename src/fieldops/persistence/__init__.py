"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from fieldops.core.config import AppSettings
from fieldops.core.protocols import IDocumentStore, IIdentityProvider
from fieldops.persistence.cognito_backend import CognitoIdentityProvider
from fieldops.persistence.dynamodb_backend import DynamoDBDocumentStore
from fieldops.persistence.memory_backend import MemoryDocumentStore, MemoryIdentityProvider


def create_persistence(settings: AppSettings | None = None) -> tuple[IIdentityProvider, IDocumentStore]:
    """Create wired-up collaborators from application settings.

    Returns:
        Tuple of (identity_provider, document_store).
    """
    if settings is None:
        settings = AppSettings()

    identity: IIdentityProvider
    if settings.identity_backend == "cognito":
        identity = CognitoIdentityProvider(
            user_pool_id=settings.cognito.user_pool_id,
            region=settings.cognito.region,
            endpoint_url=settings.cognito.endpoint_url,
            role_attribute=settings.cognito.role_attribute,
        )
    else:
        identity = MemoryIdentityProvider()

    store: IDocumentStore
    if settings.store_backend == "dynamodb":
        store = DynamoDBDocumentStore(
            table_name=settings.dynamodb.table_name,
            table_suffix=settings.dynamodb.table_suffix,
            region=settings.dynamodb.region,
            endpoint_url=settings.dynamodb.endpoint_url,
        )
    else:
        store = MemoryDocumentStore()

    return identity, store
