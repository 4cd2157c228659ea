#!/usr/bin/env python3
"""
Database migration runner script
"""
import os
import sys
import logging
from alembic.config import Config
from alembic import command
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def run_migrations(revision: str = "head"):
    """Run pending database migrations"""
    # Load environment variables from .env file
    load_dotenv()

    # Set up Alembic config
    alembic_cfg = Config(os.path.join(os.path.dirname(os.path.abspath(__file__)), "alembic.ini"))

    # Override database URL if provided via environment
    if os.getenv("DATABASE_URL"):
        alembic_cfg.set_main_option("sqlalchemy.url", os.getenv("DATABASE_URL"))

    logger.info(f"Running database migrations up to {revision}...")
    command.upgrade(alembic_cfg, revision)
    logger.info("Migrations completed successfully")


# alembic revision --autogenerate -m "description of change"
# python migrate.py

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    try:
        run_migrations()
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        sys.exit(1)
