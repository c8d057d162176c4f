"""
Leave Analytics Module Configuration.

Manages environment variables specific to the Leave Analytics module.
Uses prefix LEAVE_ to avoid conflicts with other modules.
"""

import json
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_LEAVE_TYPES = [
    "Annual Leave",
    "Sick Leave",
    "Personal Leave",
    "Maternity Leave",
    "Paternity Leave",
    "Emergency Leave",
    "Bereavement Leave",
    "Study Leave",
    "Unpaid Leave",
    "Compensatory Leave",
]


class LeaveSettings(BaseSettings):
    """
    Leave Analytics module settings loaded from environment variables.

    All variables use the LEAVE_ prefix for module isolation.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Leave type catalog offered to clients (comma-separated in the environment)
    leave_types: Annotated[
        list[str],
        NoDecode,
        Field(
            default_factory=lambda: list(DEFAULT_LEAVE_TYPES),
            description="Leave types offered by the submission form",
            validation_alias="LEAVE_TYPES",
        ),
    ]

    default_quick_range_days: Annotated[
        int,
        Field(
            ge=1,
            description="Window used by the quick date filter when none is given",
            validation_alias="LEAVE_DEFAULT_QUICK_RANGE_DAYS",
        ),
    ] = 30

    max_range_days: Annotated[
        int,
        Field(
            ge=1,
            description="Largest number of days accepted by one range submission",
            validation_alias="LEAVE_MAX_RANGE_DAYS",
        ),
    ] = 366

    @field_validator("leave_types", mode="before")
    @classmethod
    def split_leave_types(cls, v):
        """Accept ``"Annual Leave, Sick Leave"`` as well as a JSON list."""
        if isinstance(v, str):
            stripped = v.strip()
            if stripped.startswith("["):
                return json.loads(stripped)
            return [item.strip() for item in stripped.split(",") if item.strip()]
        return v


@lru_cache
def get_leave_settings() -> LeaveSettings:
    """
    Get cached leave analytics settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        LeaveSettings: Module settings instance.
    """
    return LeaveSettings()
