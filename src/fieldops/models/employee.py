"""Roles and the employee profile record."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel


class Role(StrEnum):
    """Role claim values. Wire values match what the browser client sends."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    FIELD_EMPLOYEE = "Field Employee"
    OFFICE_STAFF = "Office Staff"


def parse_role(value: Any) -> Role | None:
    """Return the Role for ``value`` or None when it is not a known role."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def coerce_rate(value: Any) -> Decimal:
    """Coerce a submitted day rate to a non-negative Decimal, 0 when invalid."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        rate = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not rate.is_finite() or rate < 0:
        return Decimal("0")
    return rate


def _as_number(value: Decimal) -> int | float:
    return int(value) if value == int(value) else float(value)


# Decimal in Python, plain JSON number on the wire.
Money = Annotated[Decimal, PlainSerializer(_as_number, when_used="json")]


class EmployeeProfile(BaseModel):
    """Employee record keyed by identity id.

    Stored field names are camelCase so records stay readable by the
    browser client.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = ""  # record key in the employees collection
    user_id: str = ""
    email: str = ""
    role: Optional[Role] = None
    first_name: str = ""
    last_name: str = ""
    designation: str = ""
    department: Optional[str] = None
    contact_number: Optional[str] = None
    daily_rate: Money = Decimal("0")
    project_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("user_id", "first_name", "last_name", "designation", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return value or ""

    @field_validator("role", mode="before")
    @classmethod
    def _known_role(cls, value: Any) -> Role | None:
        return parse_role(value)

    @field_validator("daily_rate", mode="before")
    @classmethod
    def _rate(cls, value: Any) -> Decimal:
        return coerce_rate(value)

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value: Any) -> str:
        return (value or "").strip().lower()

    @property
    def employee_id(self) -> str:
        """Key attendance events are matched on."""
        return self.user_id or self.id

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> EmployeeProfile:
        return cls.model_validate(record)

    def to_record(self) -> dict[str, Any]:
        """Serialize for the document store (record key excluded)."""
        record = self.model_dump(by_alias=True, exclude={"id"})
        record["role"] = self.role.value if self.role else None
        record["createdAt"] = self.created_at.isoformat() if self.created_at else None
        return record


class ProvisionRequest(BaseModel):
    """A validated new-account request."""

    email: str
    password: str = Field(repr=False)
    role: Role
    first_name: str
    last_name: str
    designation: str
    project_id: Optional[str] = None
    daily_rate: Decimal = Decimal("0")
    department: Optional[str] = None
    contact_number: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ProvisionResult(BaseModel):
    """Outcome of a successful provisioning call."""

    success: bool = True
    uid: str
    message: str
