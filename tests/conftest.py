"""Shared fixtures: fake AWS credentials and in-memory collaborators."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fieldops.core.config import AppSettings
from tests.fakes import MemoryDocumentStore, MemoryIdentityProvider

EMPLOYEES_PATH = "artifacts/test-app/public/data/employees"
ATTENDANCE_PATH = "artifacts/test-app/public/data/attendance"
FIXED_NOW = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Keep boto3 away from any real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(app_id="test-app", identity_backend="memory", store_backend="memory")


@pytest.fixture
def identity() -> MemoryIdentityProvider:
    return MemoryIdentityProvider()


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


def valid_request(**overrides) -> dict:
    body = {
        "email": "New.Hire@Example.com",
        "password": "s3cret!",
        "role": "Office Staff",
        "firstName": "Nina",
        "lastName": "Reyes",
        "designation": "Clerk",
        "dailyRate": "750",
        "department": "Finance",
        "contactNumber": "",
    }
    body.update(overrides)
    return body
