import logging

import sqlalchemy
from alembic import context
from sqlalchemy.pool import NullPool

from grader.storage.table import metadata

logger = logging.getLogger("grader.migrations")

config = context.config


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_section_option("alembic", "sqlalchemy.url"),
        target_metadata=metadata,
        literal_binds=True,
        render_as_batch=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = config.get_section_option("alembic", "sqlalchemy.url")
    assert url is not None, "alembic config has no sqlalchemy.url"
    # batch table copies require foreign keys to be unenforced
    engine = sqlalchemy.create_engine(url, poolclass=NullPool)

    with engine.connect() as connection:
        # SQLite can only alter tables by copying them
        context.configure(connection=connection, target_metadata=metadata, render_as_batch=True)
        logger.debug("running migrations", extra={"url": engine.url.render_as_string()})
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
