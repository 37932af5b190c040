"""Alembic environment for the circulation schema.

The target URL is taken from ``-x url=...`` first, then from the
``sqlalchemy.url`` main option that `libris.config.build_alembic_config`
sets, and finally from ``LIBRIS_DB_URL``. Autogenerate compares column types
and server defaults; SQLite runs in batch mode because it cannot ALTER most
constraints in place.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from libris import config as libris_config
from libris.adapters.db.schema import metadata

# pylint: disable=no-member

alembic_cfg = context.config

if alembic_cfg.config_file_name is not None:
    fileConfig(alembic_cfg.config_file_name)

COMPARE_OPTIONS = {"compare_type": True, "compare_server_default": True}


def target_url() -> str:
    """Pick the database URL for this run."""
    if url := context.get_x_argument(as_dictionary=True).get("url"):
        return url
    url = alembic_cfg.get_main_option("sqlalchemy.url")
    # an unexpanded "%(...)s" placeholder counts as no URL
    if url and "%(" not in url:
        return url
    try:
        return libris_config.get_db_url()
    except libris_config.DatabaseUrlNotSetError as e:
        raise RuntimeError("Set LIBRIS_DB_URL to your database URL.") from e


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting."""
    context.configure(
        url=target_url(),
        target_metadata=metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply the migrations over a fresh, unpooled connection."""
    engine = engine_from_config(
        {"sqlalchemy.url": target_url()}, prefix="sqlalchemy.", poolclass=pool.NullPool
    )
    with engine.connect() as connection:
        on_sqlite = connection.dialect.name == "sqlite"
        if on_sqlite:
            # cascades in the loans and fines tables need enforcement from the start
            connection.exec_driver_sql("PRAGMA foreign_keys=ON")
        context.configure(
            connection=connection,
            target_metadata=metadata,
            render_as_batch=on_sqlite,
            **COMPARE_OPTIONS,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
