# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Configuration for the mediator.

Settings are read from ``CONDUIT_MEDIATOR_*`` environment variables.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from conduit.di.registration import ServiceLifetime
from conduit.mediator.publisher import PublishStrategy


class MediatorSettings(BaseSettings):
    """Defaults used when a mediator or builder is not configured explicitly."""

    model_config = SettingsConfigDict(
        env_prefix="CONDUIT_MEDIATOR_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    publish_strategy: PublishStrategy = Field(
        default=PublishStrategy.SEQUENTIAL,
        description="How notification handlers run: sequential or concurrent",
    )
    handler_lifetime: ServiceLifetime = Field(
        default=ServiceLifetime.TRANSIENT,
        description="Lifetime used when registering discovered handlers",
    )

    @classmethod
    def load(cls) -> MediatorSettings:
        """
        Load mediator settings from environment variables or defaults.

        Returns:
            MediatorSettings: Loaded and validated settings instance.
        """
        return cls()
