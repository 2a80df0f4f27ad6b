from __future__ import annotations

import re
from typing import Any

"""Read-side lookups over persisted trains.

Every result row is a dict of the ``trains`` columns plus ``class_name``
(NULL when the class is not seeded).
"""

SELECT_TRAINS = (
    "SELECT t.id, t.tz, t.name, t.class_id, t.comment, t.is_active, "
    "t.name_since, t.name_until, c.name AS class_name "
    "FROM trains t LEFT JOIN classes c ON c.id = t.class_id"
)

SEARCH_LIMIT = 50
LIST_ALL_LIMIT = 100

# leading digits of a query ("101abc" -> 101) also match the tz
_LEADING_TZ = re.compile(r"^\s*([+-]?\d+)")


class InvalidQueryError(LookupError):
    pass


def _as_int(value: Any, label: str) -> int:
    try:
        return int(str(value).strip())
    except ValueError as e:
        raise InvalidQueryError(f"Invalid {label} parameter: {value!r}") from e


def _fetch_dicts(cursor: Any) -> list[dict[str, Any]]:
    columns = [d[0] for d in cursor.description]
    return [dict(zip(columns, row, strict=True)) for row in cursor.fetchall()]


def find_train_by_tz(cursor: Any, tz: Any) -> dict[str, Any] | None:
    cursor.execute(f"{SELECT_TRAINS} WHERE t.tz = %s LIMIT 1", (_as_int(tz, "tz"),))
    rows = _fetch_dicts(cursor)
    return rows[0] if rows else None


def search_trains(cursor: Any, query: str | None) -> list[dict[str, Any]]:
    """Substring search on name; a query starting with digits also matches that tz."""
    if not query:
        cursor.execute(f"{SELECT_TRAINS} ORDER BY t.id LIMIT %s", (LIST_ALL_LIMIT,))
        return _fetch_dicts(cursor)

    pattern = f"%{query}%"
    m = _LEADING_TZ.match(query)
    if m is None:
        cursor.execute(
            f"{SELECT_TRAINS} WHERE t.name ILIKE %s ORDER BY t.id LIMIT %s",
            (pattern, SEARCH_LIMIT),
        )
    else:
        tz = int(m.group(1))
        cursor.execute(
            f"{SELECT_TRAINS} WHERE t.tz = %s OR t.name ILIKE %s ORDER BY t.id LIMIT %s",
            (tz, pattern, SEARCH_LIMIT),
        )
    return _fetch_dicts(cursor)


def list_trains_by_class(cursor: Any, class_id: Any) -> list[dict[str, Any]]:
    cursor.execute(
        f"{SELECT_TRAINS} WHERE t.class_id = %s ORDER BY t.tz, t.name_since",
        (_as_int(class_id, "classId"),),
    )
    return _fetch_dicts(cursor)
