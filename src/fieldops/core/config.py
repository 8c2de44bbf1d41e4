"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class CognitoConfig(BaseSettings):
    """Cognito user pool configuration (identity collaborator)."""

    model_config = {"env_prefix": "FIELDOPS_COGNITO_"}

    user_pool_id: str = ""
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override
    role_attribute: str = "custom:role"


class DynamoDBConfig(BaseSettings):
    """DynamoDB configuration (document store collaborator)."""

    model_config = {"env_prefix": "FIELDOPS_DYNAMO_"}

    table_name: str = "fieldops-documents"
    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "FIELDOPS_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    app_id: str = "fieldops"
    cors_allow_origin: str = "*"
    business_timezone: str = "UTC"

    identity_backend: Literal["memory", "cognito"] = "memory"
    store_backend: Literal["memory", "dynamodb"] = "memory"

    cognito: CognitoConfig = CognitoConfig()
    dynamodb: DynamoDBConfig = DynamoDBConfig()

    @property
    def employees_path(self) -> str:
        return f"artifacts/{self.app_id}/public/data/employees"

    @property
    def attendance_path(self) -> str:
        return f"artifacts/{self.app_id}/public/data/attendance"
