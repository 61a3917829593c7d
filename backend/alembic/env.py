"""
Migration environment for the wines database.

ensure_schema() passes the target as sqlalchemy.url. From the alembic
CLI the option is blank and the path comes from Config.database_path(),
the same place WineCollectionRepository reads it from.
"""

from logging.config import fileConfig

from alembic import context

config = context.config

# ensure_schema() runs inside the app and keeps its logging setup
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def wines_db_url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url

    from savemywines.config import Config
    return f"sqlite:///{Config.database_path()}"


def run_migrations_offline() -> None:
    """Emit the migration SQL without a database connection."""
    context.configure(
        url=wines_db_url(),
        target_metadata=None,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    from sqlalchemy import create_engine

    engine = create_engine(wines_db_url())
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, target_metadata=None)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
