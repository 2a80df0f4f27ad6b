from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2

from ..config.loader import DatabaseConfig

"""PostgreSQL connection helpers.

DSN resolution order:
    1. DATABASE_URL / PGDSN environment variables (``.env`` is loaded with
       override=True before this runs, so it wins over the shell)
    2. ``database.dsn`` from config/import.yml
    3. individual PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each
       falling back to the matching config value
"""


class DatabaseUnavailableError(Exception):
    """The database could not be reached; the run continues extraction only."""


def resolve_dsn(db_cfg: DatabaseConfig | None = None) -> str:
    db_cfg = db_cfg or DatabaseConfig()
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def db_cursor(db_cfg: DatabaseConfig | None = None, **cursor_kwargs: Any) -> Iterator[Any]:
    """Yield a cursor on a non-autocommit connection; commits on clean exit.

    Raises:
        DatabaseUnavailableError: If the connection cannot be opened. Errors
            after that (lost connection, constraint violations) propagate as
            psycopg2 errors after a rollback.
    """
    try:
        conn = psycopg2.connect(resolve_dsn(db_cfg))
    except psycopg2.OperationalError as e:
        raise DatabaseUnavailableError(str(e)) from e
    conn.autocommit = False
    try:
        with conn.cursor(**cursor_kwargs) as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
