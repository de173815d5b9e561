from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..domain.shared.addresses import Address


class Settings(BaseModel):
    database_url: str

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    app_name: str = "TokenBridge"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    bridge_address: Address
    owner_address: Address
    commission_is_enabled: bool = False
    receiver_commission_proportion: int
    bridge_owner_commission_proportion: int
    fixed_native_commission_limit: int
    percentage_commission_limit: int = 100
    commission_receiver_address: Address
    bridge_owner_address: Address

    caller_signature_max_age_seconds: int = Field(default=300, gt=0)

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v:
            raise ValueError("Database URL cannot be empty")
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("Database URL must be a redis:// URL")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


def _env_bool(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    return value.lower() == "true" if value is not None else None


def _env_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    return int(value) if value is not None else None


def get_settings() -> Settings:
    """Build settings from the ``BRIDGE_*`` environment variables."""
    values = {
        "database_url": os.environ.get("BRIDGE_DATABASE_URL"),
        "api_host": os.environ.get("BRIDGE_API_HOST"),
        "api_port": _env_int("BRIDGE_API_PORT"),
        "api_debug": _env_bool("BRIDGE_API_DEBUG"),
        "api_cors_origins": os.environ["BRIDGE_API_CORS_ORIGINS"].split(",")
        if "BRIDGE_API_CORS_ORIGINS" in os.environ
        else None,
        "app_name": os.environ.get("BRIDGE_APP_NAME"),
        "app_version": os.environ.get("BRIDGE_APP_VERSION"),
        "log_level": os.environ.get("BRIDGE_LOG_LEVEL"),
        "bridge_address": os.environ.get("BRIDGE_ADDRESS"),
        "owner_address": os.environ.get("BRIDGE_OWNER_ADDRESS"),
        "commission_is_enabled": _env_bool("BRIDGE_COMMISSION_IS_ENABLED"),
        "receiver_commission_proportion": _env_int(
            "BRIDGE_RECEIVER_COMMISSION_PROPORTION"
        ),
        "bridge_owner_commission_proportion": _env_int(
            "BRIDGE_BRIDGE_OWNER_COMMISSION_PROPORTION"
        ),
        "fixed_native_commission_limit": _env_int(
            "BRIDGE_FIXED_NATIVE_COMMISSION_LIMIT"
        ),
        "percentage_commission_limit": _env_int("BRIDGE_PERCENTAGE_COMMISSION_LIMIT"),
        "commission_receiver_address": os.environ.get(
            "BRIDGE_COMMISSION_RECEIVER_ADDRESS"
        ),
        "bridge_owner_address": os.environ.get("BRIDGE_BRIDGE_OWNER_ADDRESS"),
        "caller_signature_max_age_seconds": _env_int(
            "BRIDGE_CALLER_SIGNATURE_MAX_AGE_SECONDS"
        ),
    }
    # Unset optional variables fall back to the model defaults.
    return Settings(**{key: value for key, value in values.items() if value is not None})
