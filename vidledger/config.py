"""Runtime configuration, env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
VIDLEDGER_* environment variables.
"""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler

from vidledger.models.ledger import (
    BURN_PRINCIPAL,
    DEFAULT_ADMIN_PRINCIPAL,
    DEFAULT_MAX_LISTINGS,
    DEFAULT_PLATFORM_FEE,
)


class LedgerSettings(BaseSettings):
    """Ledger settings with environment variable overrides.

    All settings can be overridden via VIDLEDGER_* environment variables
    or a .env file in the project root.

    Examples
    --------
    Override via environment::

        export VIDLEDGER_ENVIRONMENT=staging
        export VIDLEDGER_LOG_LEVEL=DEBUG
        export VIDLEDGER_PLATFORM_FEE=250

    Or via .env file::

        VIDLEDGER_ENVIRONMENT=production
        VIDLEDGER_ADMIN_PRINCIPAL=SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="VIDLEDGER_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Initial ledger configuration
    admin_principal: str = DEFAULT_ADMIN_PRINCIPAL
    burn_principal: str = BURN_PRINCIPAL
    max_listings: int = DEFAULT_MAX_LISTINGS
    platform_fee: int = DEFAULT_PLATFORM_FEE

    # Event journal
    journal_enabled: bool = True

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


def configure_logging(settings: LedgerSettings) -> None:
    """Route ``vidledger`` log records through a Rich handler.

    Idempotent: a second call only adjusts the level.
    """
    root = logging.getLogger("vidledger")
    root.setLevel(settings.log_level.upper())
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(show_path=settings.debug, markup=False))


# Module-level singleton, import as `from vidledger.config import settings`
settings = LedgerSettings()
