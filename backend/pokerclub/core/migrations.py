"""Database migration utilities using Alembic."""
from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext

from .db import engine

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).parent.parent.parent


def get_alembic_config() -> Config:
    """Get Alembic configuration object."""
    alembic_ini_path = BACKEND_DIR / "alembic.ini"

    if not alembic_ini_path.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini_path}")

    alembic_cfg = Config(str(alembic_ini_path))
    alembic_cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))

    return alembic_cfg


def run_migrations() -> None:
    """Run all pending database migrations."""
    try:
        logger.info("Running database migrations...")
        command.upgrade(get_alembic_config(), "head")
        logger.info("Database migrations completed successfully")
    except Exception as e:
        logger.error(f"Error running migrations: {e}")
        raise


def stamp_database(revision: str = "head") -> None:
    """
    Mark the database as being at ``revision`` without running migration SQL.

    Used when tables were created by ``create_all`` and Alembic should take
    over from here.
    """
    logger.info(f"Stamping database with revision: {revision}")
    command.stamp(get_alembic_config(), revision)


def get_current_revision() -> str | None:
    with engine.connect() as connection:
        context = MigrationContext.configure(connection)
        return context.get_current_revision()
