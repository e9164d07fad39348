"""Upgrade the configured database to the latest Alembic revision."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from alembic import command
from alembic.config import Config

from warble.core.logging_config import configure_logging
from warble.core.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def migration_url(configured: str | None = None) -> str:
    """Pick the URL migrations run against.

    ``ALEMBIC_URL`` wins, then a URL already set on the Alembic config,
    then the application's own database setting.
    """
    return os.getenv("ALEMBIC_URL") or configured or settings.database_url_sync


def alembic_config(url: str | None = None) -> Config:
    """Return an Alembic config pointed at ``migrations/`` and ``url``."""
    cfg = Config(str(MIGRATIONS_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", migration_url(url))
    return cfg


def run_upgrade_head(url: str | None = None) -> None:
    logger.info("Upgrading database schema to head")
    command.upgrade(alembic_config(url), "head")


if __name__ == "__main__":
    configure_logging()
    run_upgrade_head()
