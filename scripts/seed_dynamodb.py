"""Create the FieldOps document table and optionally seed sample records.

Usage:
    python scripts/seed_dynamodb.py --endpoint-url http://localhost:4566 --sample
"""

from __future__ import annotations

import argparse
from decimal import Decimal
from typing import Any

import boto3

TABLE_NAME = "fieldops-documents"
APP_ID = "fieldops"

SAMPLE_EMPLOYEES: list[dict[str, Any]] = [
    {
        "SK": "sample-field-1", "userId": "sample-field-1",
        "email": "juan.delacruz@example.com", "role": "Field Employee",
        "firstName": "Juan", "lastName": "Dela Cruz", "designation": "Electrician",
        "department": "Operations", "contactNumber": None,
        "dailyRate": Decimal("650"), "projectId": "project-001",
        "createdAt": "2024-01-01T00:00:00+00:00",
    },
    {
        "SK": "sample-office-1", "userId": "sample-office-1",
        "email": "maria.santos@example.com", "role": "Office Staff",
        "firstName": "Maria", "lastName": "Santos", "designation": "Bookkeeper",
        "department": "Finance", "contactNumber": None,
        "dailyRate": Decimal("800"), "projectId": None,
        "createdAt": "2024-01-01T00:00:00+00:00",
    },
]


def create_table(ddb: Any, suffix: str = "") -> bool:
    """Create the document table. Returns False if it already exists."""
    client = ddb.meta.client
    table_name = f"{TABLE_NAME}{suffix}"
    if table_name in client.list_tables().get("TableNames", []):
        print(f"  Table {table_name} already exists, skipping")
        return False
    client.create_table(
        TableName=table_name,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    print(f"  Created table {table_name}")
    return True


def seed_sample_data(ddb: Any, suffix: str = "", app_id: str = APP_ID) -> int:
    """Write the sample roster. Returns the number of records written."""
    tbl = ddb.Table(f"{TABLE_NAME}{suffix}")
    employees_path = f"artifacts/{app_id}/public/data/employees"
    with tbl.batch_writer() as batch:
        for employee in SAMPLE_EMPLOYEES:
            batch.put_item(Item={"PK": employees_path, **employee})
    print(f"  Seeded {len(SAMPLE_EMPLOYEES)} employees under {employees_path}")
    return len(SAMPLE_EMPLOYEES)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the FieldOps DynamoDB table")
    parser.add_argument("--endpoint-url", default=None, help="DynamoDB endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table-suffix", default="", help="Table name suffix (e.g. -dev)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--app-id", default=APP_ID, help="Application id used in collection paths")
    parser.add_argument("--sample", action="store_true", help="Also seed a sample roster")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    ddb = boto3.resource("dynamodb", **kwargs)

    print("Creating table...")
    create_table(ddb, suffix=args.table_suffix)

    if args.sample:
        print("Seeding sample data...")
        seed_sample_data(ddb, suffix=args.table_suffix, app_id=args.app_id)

    print("Done!")


if __name__ == "__main__":
    main()
