"""DynamoDB backend implementing IDocumentStore.

One table holds every collection: the partition key is the collection path
and the sort key is the record id.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from fieldops.core.exceptions import DocumentStoreError


def _to_dynamodb(obj: Any) -> Any:
    """Convert floats to Decimal for DynamoDB."""
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _to_dynamodb(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_dynamodb(i) for i in obj]
    return obj


def _from_dynamodb(obj: Any) -> Any:
    """Convert Decimal values in a DynamoDB item to int/float."""
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    if isinstance(obj, dict):
        return {k: _from_dynamodb(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_from_dynamodb(i) for i in obj]
    return obj


def _to_record(item: dict[str, Any]) -> dict[str, Any]:
    record = _from_dynamodb(item)
    record["id"] = record.pop("SK")
    record.pop("PK", None)
    return record


class DynamoDBDocumentStore:
    """Production IDocumentStore backed by a single DynamoDB table."""

    def __init__(self, table_name: str, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._table_name = f"{table_name}{table_suffix}"
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)
        self._table = self._ddb.Table(self._table_name)

    def write(self, path: str, record_id: str, record: dict[str, Any]) -> None:
        item = {k: v for k, v in _to_dynamodb(record).items() if k != "id"}
        item.update({"PK": path, "SK": record_id})
        try:
            self._table.put_item(Item=item)
        except ClientError as exc:
            raise DocumentStoreError(path, f"write {record_id!r} failed: {exc}") from exc

    def get(self, path: str, record_id: str) -> dict[str, Any] | None:
        try:
            resp = self._table.get_item(Key={"PK": path, "SK": record_id})
        except ClientError as exc:
            raise DocumentStoreError(path, f"get {record_id!r} failed: {exc}") from exc
        item = resp.get("Item")
        return _to_record(item) if item else None

    def query(self, path: str, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {"KeyConditionExpression": Key("PK").eq(path)}
        condition = None
        for name, value in (filters or {}).items():
            clause = Attr(name).eq(_to_dynamodb(value))
            condition = clause if condition is None else condition & clause
        if condition is not None:
            kwargs["FilterExpression"] = condition

        items: list[dict[str, Any]] = []
        try:
            while True:
                resp = self._table.query(**kwargs)
                items.extend(resp.get("Items", []))
                last_key = resp.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as exc:
            raise DocumentStoreError(path, f"query failed: {exc}") from exc
        return [_to_record(item) for item in items]
