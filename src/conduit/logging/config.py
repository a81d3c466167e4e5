# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Configuration for the conduit logging system.

Settings are read from ``CONDUIT_LOGGING_*`` environment variables, e.g.
``CONDUIT_LOGGING_LEVEL=debug`` or ``CONDUIT_LOGGING_JSON_FORMAT=true``.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(IntEnum):
    """Log levels, valued as their ``logging`` numbers.

    Names are accepted case-insensitively: ``LogLevel("debug")`` is
    ``LogLevel.DEBUG``.
    """

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def _missing_(cls, value: object) -> LogLevel | None:
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None


class LoggingSettings(BaseSettings):
    """Where conduit log records go and how they are rendered."""

    model_config = SettingsConfigDict(
        env_prefix="CONDUIT_LOGGING_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    level: LogLevel = Field(default=LogLevel.INFO, description="Threshold of the conduit logger")
    json_format: bool = Field(default=False, description="Render records as JSON lines")
    include_timestamp: bool = Field(default=True, description="Prefix records with a timestamp")
    include_level: bool = Field(default=True, description="Render the level name")
    console_enabled: bool = Field(default=True, description="Write records to stdout")
    file_enabled: bool = Field(default=False, description="Write records to file_path")
    file_path: str | None = Field(default=None, description="Log file, used when file_enabled")

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> LogLevel:
        return LogLevel(value)

    @classmethod
    def load(cls) -> LoggingSettings:
        """Load settings from the environment, falling back to defaults."""
        return cls()
