"""Cognito user pool backend implementing IIdentityProvider.

The pool is expected to use email as its username attribute, so Cognito
itself enforces email uniqueness and assigns each user an opaque username,
which serves as the identity id. The role claim lives in a custom attribute.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError

from fieldops.core.exceptions import (
    EmailAlreadyExists,
    IdentityNotFound,
    IdentityProviderError,
    InvalidEmail,
    InvalidPassword,
    InvalidToken,
)

logger = logging.getLogger(__name__)

_ERROR_MAP: dict[str, type[IdentityProviderError]] = {
    "UsernameExistsException": EmailAlreadyExists,
    "AliasExistsException": EmailAlreadyExists,
    "InvalidPasswordException": InvalidPassword,
    "UserNotFoundException": IdentityNotFound,
    "NotAuthorizedException": InvalidToken,
}


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


def _translate(exc: ClientError, action: str) -> IdentityProviderError:
    code = _error_code(exc)
    if action == "create" and code == "InvalidParameterException":
        return InvalidEmail(f"Cognito rejected the email: {exc}")
    return _ERROR_MAP.get(code, IdentityProviderError)(f"Cognito {action} failed ({code}): {exc}")


def _attributes(items: list[dict[str, str]]) -> dict[str, str]:
    return {a["Name"]: a["Value"] for a in items}


class CognitoIdentityProvider:
    """Production IIdentityProvider backed by a Cognito user pool."""

    def __init__(self, user_pool_id: str, region: str = "us-east-1",
                 endpoint_url: str | None = None, role_attribute: str = "custom:role",
                 client: Any = None) -> None:
        self._user_pool_id = user_pool_id
        self._role_attribute = role_attribute
        if client is None:
            kwargs: dict = {"region_name": region}
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("cognito-idp", **kwargs)
        self._client = client

    def verify_token(self, token: str) -> dict[str, Any]:
        try:
            resp = self._client.get_user(AccessToken=token)
        except ClientError as exc:
            raise _translate(exc, "verify") from exc
        attrs = _attributes(resp.get("UserAttributes", []))
        return {
            "id": resp["Username"],
            "email": attrs.get("email", ""),
            "role_claim": attrs.get(self._role_attribute),
        }

    def create_identity(self, email: str, password: str, display_name: str = "") -> str:
        attributes = [
            {"Name": "email", "Value": email.strip().lower()},
            {"Name": "email_verified", "Value": "false"},
        ]
        if display_name:
            attributes.append({"Name": "name", "Value": display_name})
        try:
            resp = self._client.admin_create_user(
                UserPoolId=self._user_pool_id,
                Username=email.strip().lower(),
                UserAttributes=attributes,
                MessageAction="SUPPRESS",
            )
        except ClientError as exc:
            raise _translate(exc, "create") from exc

        username = resp["User"]["Username"]
        try:
            self._client.admin_set_user_password(
                UserPoolId=self._user_pool_id, Username=username,
                Password=password, Permanent=True,
            )
        except ClientError as exc:
            # The user exists without a usable password; remove it before reporting.
            self._delete_quietly(username)
            raise _translate(exc, "set password") from exc
        return username

    def set_role_claim(self, identity_id: str, role: str) -> None:
        try:
            self._client.admin_update_user_attributes(
                UserPoolId=self._user_pool_id, Username=identity_id,
                UserAttributes=[{"Name": self._role_attribute, "Value": role}],
            )
        except ClientError as exc:
            raise _translate(exc, "set role claim") from exc

    def get_role_claim(self, identity_id: str) -> str | None:
        try:
            resp = self._client.admin_get_user(UserPoolId=self._user_pool_id, Username=identity_id)
        except ClientError as exc:
            raise _translate(exc, "get user") from exc
        return _attributes(resp.get("UserAttributes", [])).get(self._role_attribute)

    def delete_identity(self, identity_id: str) -> None:
        try:
            self._client.admin_delete_user(UserPoolId=self._user_pool_id, Username=identity_id)
        except ClientError as exc:
            raise _translate(exc, "delete") from exc

    def _delete_quietly(self, username: str) -> None:
        try:
            self._client.admin_delete_user(UserPoolId=self._user_pool_id, Username=username)
        except ClientError:
            logger.critical("ORPHANED IDENTITY %s: cleanup after password rejection failed",
                            username, exc_info=True)
