"""Migration runner for the users/tasks schema. The URL comes from tasktrack settings, never alembic.ini."""

import os
from logging.config import fileConfig

from alembic import context

os.environ.setdefault("APP_ENV", "dev")
from tasktrack.core.config import settings
from tasktrack.core.database import build_engine
from tasktrack.models import Base, Task, User  # noqa: F401  (registers every table on Base.metadata)

config = context.config
if config.config_file_name is not None and config.file_config.has_section("loggers"):
    fileConfig(config.config_file_name)

DATABASE_URL = settings.DATABASE_URL
# SQLite cannot ALTER constraints in place; batch mode rebuilds the table instead.
RENDER_AS_BATCH = DATABASE_URL.startswith("sqlite")


def _migrate(**configure_kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata,
        render_as_batch=RENDER_AS_BATCH,
        compare_type=True,
        **configure_kwargs,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_offline() -> None:
    """Emit SQL to stdout without connecting."""
    _migrate(url=DATABASE_URL, literal_binds=True, dialect_opts={"paramstyle": "named"})


def run_online() -> None:
    engine = build_engine(DATABASE_URL)
    try:
        with engine.connect() as connection:
            _migrate(connection=connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
