"""Role-creation permission table.

Which caller role may create (or manage) which account role. Any pair not
listed is denied, as is a caller with no role claim.
"""

from __future__ import annotations

from fieldops.models.employee import Role

CREATION_MATRIX: dict[Role, frozenset[Role]] = {
    Role.ADMIN: frozenset(Role),
    Role.MANAGER: frozenset({Role.FIELD_EMPLOYEE}),
    Role.FIELD_EMPLOYEE: frozenset(),
    Role.OFFICE_STAFF: frozenset(),
}

# Roles allowed to read payroll reports.
PAYROLL_READERS: frozenset[Role] = frozenset({Role.ADMIN, Role.MANAGER})


def can_create(caller: Role | None, target: Role) -> bool:
    if caller is None:
        return False
    return target in CREATION_MATRIX.get(caller, frozenset())


def can_read_payroll(caller: Role | None) -> bool:
    return caller in PAYROLL_READERS
