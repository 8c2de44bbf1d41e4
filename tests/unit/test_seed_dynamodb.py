"""Tests for the DynamoDB seed script."""

from __future__ import annotations

import sys
from pathlib import Path

import boto3
import pytest
from moto import mock_aws

# Make scripts/ importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "scripts"))

from seed_dynamodb import SAMPLE_EMPLOYEES, create_table, seed_sample_data  # noqa: E402

from fieldops.persistence.dynamodb_backend import DynamoDBDocumentStore  # noqa: E402
from fieldops.services.payroll import PayrollService  # noqa: E402


@pytest.fixture
def ddb():
    with mock_aws():
        yield boto3.resource("dynamodb", region_name="us-east-1")


class TestCreateTable:
    def test_creates_document_table(self, ddb):
        assert create_table(ddb, suffix="-test") is True
        tables = boto3.client("dynamodb", region_name="us-east-1").list_tables()["TableNames"]
        assert tables == ["fieldops-documents-test"]

    def test_idempotent_skips_existing(self, ddb):
        create_table(ddb, suffix="-test")
        assert create_table(ddb, suffix="-test") is False


class TestSeedSampleData:
    def test_seeds_sample_roster(self, ddb):
        create_table(ddb, suffix="-test")
        assert seed_sample_data(ddb, suffix="-test", app_id="demo") == len(SAMPLE_EMPLOYEES)
        resp = ddb.Table("fieldops-documents-test").scan()
        assert resp["Count"] == len(SAMPLE_EMPLOYEES)
        assert {i["PK"] for i in resp["Items"]} == {"artifacts/demo/public/data/employees"}

    def test_seeded_roster_is_readable_by_the_app(self, ddb):
        create_table(ddb, suffix="-test")
        seed_sample_data(ddb, suffix="-test", app_id="demo")
        store = DynamoDBDocumentStore("fieldops-documents", table_suffix="-test")
        service = PayrollService(
            store=store,
            employees_path="artifacts/demo/public/data/employees",
            attendance_path="artifacts/demo/public/data/attendance",
        )
        roster = service.roster()
        assert sorted(p.employee_id for p in roster) == ["sample-field-1", "sample-office-1"]
        assert all(p.role is not None for p in roster)
