"""Create the first Admin account.

Only succeeds while no Admin profile exists, so it cannot be used to mint
further privileged accounts once the system is initialised.

Usage:
    FIELDOPS_IDENTITY_BACKEND=cognito FIELDOPS_STORE_BACKEND=dynamodb \\
    FIELDOPS_COGNITO_USER_POOL_ID=... \\
    python scripts/bootstrap_admin.py --email admin@example.com \\
        --first-name Ada --last-name Reyes --designation "Operations Director"
"""

from __future__ import annotations

import argparse
import getpass
import sys
from typing import Any

from fieldops.core.config import AppSettings
from fieldops.core.exceptions import RequestError
from fieldops.core.logger import configure_logging
from fieldops.core.protocols import IDocumentStore, IIdentityProvider
from fieldops.persistence import create_persistence
from fieldops.services.provisioning import ProvisioningService


def build_request(args: argparse.Namespace, password: str) -> dict[str, Any]:
    return {
        "email": args.email,
        "password": password,
        "role": "Admin",
        "firstName": args.first_name,
        "lastName": args.last_name,
        "designation": args.designation,
        "department": args.department,
        "contactNumber": args.contact_number,
    }


def bootstrap(
    request: dict[str, Any],
    settings: AppSettings,
    identity: IIdentityProvider | None = None,
    store: IDocumentStore | None = None,
) -> str:
    """Provision the initial Admin; returns the new identity id."""
    if identity is None or store is None:
        identity, store = create_persistence(settings)
    service = ProvisioningService(identity=identity, store=store, employees_path=settings.employees_path)
    return service.bootstrap_admin(request).uid


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the first FieldOps Admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--first-name", required=True)
    parser.add_argument("--last-name", required=True)
    parser.add_argument("--designation", required=True)
    parser.add_argument("--department", default=None)
    parser.add_argument("--contact-number", default=None)
    parser.add_argument("--password", default=None, help="Prompted for when omitted")
    args = parser.parse_args(argv)

    settings = AppSettings()
    configure_logging(settings.log_level)
    password = args.password or getpass.getpass("Admin password: ")

    try:
        uid = bootstrap(build_request(args, password), settings)
    except RequestError as exc:
        print(f"Bootstrap failed ({exc.status_code}): {exc.message}", file=sys.stderr)
        return 1

    print(f"Created Admin {args.email} with id {uid}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
