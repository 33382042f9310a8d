# alembic/env.py
from __future__ import annotations

import sys
import logging
from pathlib import Path
from logging.config import fileConfig
from typing import Any, Dict

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool

# -------------------------------------------------------------------
# Path setup (must happen before importing project modules)
# -------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

load_dotenv(PROJECT_ROOT / ".env")  # no crash if missing

from postal_api.config import database_uri, load_db_settings  # noqa: E402
from postal_api.extensions import db  # noqa: E402
import postal_api.models  # noqa: E402,F401  (populates metadata)

config = context.config

if config.config_file_name:
    fileConfig(config.config_file_name)
logger = logging.getLogger("alembic.env")

target_metadata = db.metadata

# Same DB_HOST / DB_NAME / PASSWORD variables as the service; PASSWORD is required
db_url_str = database_uri(load_db_settings())
config.set_main_option("sqlalchemy.url", db_url_str.replace("%", "%%"))
logger.info("Alembic using database %s", db_url_str.rsplit("/", 1)[-1])


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (no DB API connection)."""
    context.configure(
        url=db_url_str,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (uses DB API connection)."""
    ini_section: Dict[str, Any] = dict(config.get_section(config.config_ini_section) or {})
    connectable = engine_from_config(
        ini_section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
