import os

from alembic import context
from sqlalchemy import pool, text

from ggbench.schema.postgres import metadata
from ggbench.util.logging import configure_logging, get_logger
from ggbench.util.postgres import get_engine

configure_logging(
    humanize=os.environ.get("HUMANIZE_LOGS", "true") == "true",
    level=os.environ.get("LOG_LEVEL", "INFO"),
)

logger = get_logger(__name__)

# fail fast instead of queueing behind a vote transaction holding model rows
LOCK_TIMEOUT = os.environ.get("MIGRATION_LOCK_TIMEOUT", "10s")


def run_migrations_online() -> None:
    engine = get_engine(poolclass=pool.NullPool)

    with engine.connect() as connection:
        connection.execute(text(f"SET lock_timeout = '{LOCK_TIMEOUT}'"))
        connection.commit()
        logger.info("Running migrations", lock_timeout=LOCK_TIMEOUT)

        context.configure(
            connection=connection,
            target_metadata=metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    raise RuntimeError("ggbench migrations run against a live database only")

run_migrations_online()
