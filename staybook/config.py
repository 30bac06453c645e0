# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BookingDeletePolicy = Literal["customer_only", "any_caller"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./data/staybook.db",
        description="SQLAlchemy database URL",
    )

    # Authentication seam: the gateway in front of us verifies tokens and
    # forwards the caller id in this header.
    auth_header: str = Field(
        default="X-User-Id",
        description="Header carrying the authenticated user ID",
    )

    # Bookings
    booking_delete_policy: BookingDeletePolicy = Field(
        default="customer_only",
        description="Who may cancel a booking: its customer or any caller",
    )
    orphan_sweep_interval_minutes: int = Field(
        default=60,
        ge=1,
        le=1440,
        description="Interval between orphaned booking reconciliation sweeps",
    )

    # HTTP
    expose_docs: bool = Field(
        default=False,
        description="Serve interactive API documentation",
    )
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    # Server configuration
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=8000,
        description="Server port",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings instance.
    """
    return Settings()
