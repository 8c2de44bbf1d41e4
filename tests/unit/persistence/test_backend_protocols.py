"""Every backend satisfies its collaborator Protocol."""

from __future__ import annotations

import boto3
from moto import mock_aws

from fieldops.core.config import AppSettings, CognitoConfig, DynamoDBConfig
from fieldops.core.protocols import IDocumentStore, IIdentityProvider
from fieldops.persistence import create_persistence
from fieldops.persistence.cognito_backend import CognitoIdentityProvider
from fieldops.persistence.dynamodb_backend import DynamoDBDocumentStore
from tests.fakes import MemoryDocumentStore, MemoryIdentityProvider


def test_memory_backends():
    assert isinstance(MemoryIdentityProvider(), IIdentityProvider)
    assert isinstance(MemoryDocumentStore(), IDocumentStore)


def test_aws_backends():
    client = boto3.client("cognito-idp", region_name="us-east-1")
    assert isinstance(CognitoIdentityProvider("us-east-1_Pool", client=client), IIdentityProvider)
    with mock_aws():
        assert isinstance(DynamoDBDocumentStore("fieldops-documents"), IDocumentStore)


def test_create_persistence_defaults_to_memory(settings):
    identity, store = create_persistence(settings)
    assert isinstance(identity, MemoryIdentityProvider)
    assert isinstance(store, MemoryDocumentStore)


def test_create_persistence_aws():
    settings = AppSettings(
        identity_backend="cognito",
        store_backend="dynamodb",
        cognito=CognitoConfig(user_pool_id="us-east-1_Pool"),
        dynamodb=DynamoDBConfig(table_suffix="-dev"),
    )
    with mock_aws():
        identity, store = create_persistence(settings)
    assert isinstance(identity, CognitoIdentityProvider)
    assert isinstance(store, DynamoDBDocumentStore)
    assert store._table_name == "fieldops-documents-dev"
