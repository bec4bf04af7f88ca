from __future__ import annotations

import os
from logging.config import fileConfig
from urllib.parse import quote, urlsplit, urlunsplit

from alembic import context
from sqlalchemy import engine_from_config, pool

from edutrack.db import models  # noqa: F401  register mappers
from edutrack.db.base import Base

# Alembic Config object
config = context.config

# Logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


# ----- helpers ---------------------------------------------------------------

def _sync_url(url_str: str) -> str:
    """Swap async drivers for their sync twins and percent-encode the password."""
    p = urlsplit(url_str)
    scheme = p.scheme
    if scheme.startswith("postgresql"):
        scheme = "postgresql+psycopg2"
    elif scheme.startswith("sqlite"):
        scheme = "sqlite"
    netloc = p.netloc
    if "@" in netloc:
        userinfo, hostport = netloc.split("@", 1)
        if ":" in userinfo:
            u, pw = userinfo.split(":", 1)
            userinfo = f"{u}:{quote(pw, safe='')}"
        netloc = f"{userinfo}@{hostport}"
    return urlunsplit((scheme, netloc, p.path, p.query, p.fragment))


def _choose_url() -> str:
    x = context.get_x_argument(as_dictionary=True)
    if x.get("sqlalchemy_url"):
        return x["sqlalchemy_url"]
    for k in ("ALEMBIC_DATABASE_URL", "DATABASE_URL", "ASYNC_DATABASE_URL"):
        v = os.getenv(k)
        if v:
            return v
    from edutrack.core.config import settings
    return settings.DATABASE_URL


# ----- runners ---------------------------------------------------------------

def run_migrations_offline() -> None:
    context.configure(
        url=_sync_url(_choose_url()),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    cfg = dict(config.get_section(config.config_ini_section) or {})
    cfg["sqlalchemy.url"] = _sync_url(_choose_url())

    connectable = engine_from_config(cfg, prefix="sqlalchemy.", poolclass=pool.NullPool)
    try:
        with connectable.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
