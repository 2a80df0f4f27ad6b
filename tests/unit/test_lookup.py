from __future__ import annotations

import pytest

from trainseed.config.loader import DatabaseConfig
from trainseed.db.connection import resolve_dsn
from trainseed.db.lookup import (
    LIST_ALL_LIMIT,
    SEARCH_LIMIT,
    InvalidQueryError,
    find_train_by_tz,
    list_trains_by_class,
    search_trains,
)

COLUMNS = ("id", "tz", "name", "class_id", "comment", "is_active", "name_since", "name_until", "class_name")


class DummyCursor:
    def __init__(self, rows=()) -> None:
        self.rows = list(rows)
        self.sql: str | None = None
        self.params: tuple | None = None
        self.description = [(c,) for c in COLUMNS]

    def execute(self, sql, params=None):
        self.sql = sql
        self.params = params

    def fetchall(self):
        return self.rows


ADLER = (1, 101, "Adler", 401, None, False, "1990-01-01", "1999-12-31", "ICE 1")


def test_find_train_by_tz_returns_dict():
    cur = DummyCursor([ADLER])
    train = find_train_by_tz(cur, "101")
    assert train["name"] == "Adler"
    assert train["class_name"] == "ICE 1"
    assert cur.params == (101,)
    assert "LEFT JOIN classes" in cur.sql


def test_find_train_by_tz_not_found():
    assert find_train_by_tz(DummyCursor(), 5) is None


def test_find_train_by_tz_invalid():
    with pytest.raises(InvalidQueryError, match="tz"):
        find_train_by_tz(DummyCursor(), "abc")


def test_search_trains_by_name():
    cur = DummyCursor([ADLER])
    [train] = search_trains(cur, "adl")
    assert train["tz"] == 101
    assert "ILIKE" in cur.sql and "t.tz" not in cur.sql.split("WHERE")[1]
    assert cur.params == ("%adl%", SEARCH_LIMIT)


def test_search_trains_numeric_query_matches_tz_or_name():
    cur = DummyCursor()
    search_trains(cur, "101")
    assert "t.tz = %s OR t.name ILIKE %s" in cur.sql
    assert cur.params == (101, "%101%", SEARCH_LIMIT)


def test_search_trains_leading_digits_match_tz():
    cur = DummyCursor()
    search_trains(cur, "101abc")
    assert "t.tz = %s OR t.name ILIKE %s" in cur.sql
    assert cur.params == (101, "%101abc%", SEARCH_LIMIT)


def test_search_trains_empty_query_lists_all():
    cur = DummyCursor()
    search_trains(cur, "")
    assert "WHERE" not in cur.sql
    assert cur.params == (LIST_ALL_LIMIT,)


def test_list_trains_by_class_orders_history():
    cur = DummyCursor([ADLER])
    assert len(list_trains_by_class(cur, 401)) == 1
    assert cur.sql.endswith("ORDER BY t.tz, t.name_since")
    with pytest.raises(InvalidQueryError, match="classId"):
        list_trains_by_class(cur, "ice")


def test_resolve_dsn_prefers_database_url(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u@h/db")
    assert resolve_dsn(DatabaseConfig(dsn="ignored")) == "postgresql://u@h/db"


def test_resolve_dsn_from_config(monkeypatch):
    for key in ("DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE"):
        monkeypatch.delenv(key, raising=False)
    cfg = DatabaseConfig(host="db", port=5433, user="app", password="pw", database="trains")
    assert resolve_dsn(cfg) == "host=db port=5433 user=app dbname=trains password=pw"
    monkeypatch.setenv("PGHOST", "override")
    assert resolve_dsn(cfg).startswith("host=override port=5433")
    assert resolve_dsn() == "host=override port=5432 user=postgres dbname=postgres"
