from __future__ import annotations

import re
from collections.abc import Iterable

from ..models.table_data import ColumnRoles, RawRow
from ..models.train_record import NameWithDates, TrainRecord
from .dates import extract_main_date
from .names import extract_names_with_dates, extract_tz_number

"""Record assembly: one source row -> TrainRecords.

Dates written next to a name win over the file-level since/until columns,
except when they are a bare year; those are too coarse and the column value
is used instead.
"""

__all__ = [
    "clean_comment",
    "resolve_dates",
    "assemble_records",
    "build_row_records",
]

_BARE_YEAR = re.compile(r"^\d{4}$")
_WHITESPACE = re.compile(r"\s+")


def clean_comment(value: str | None) -> str | None:
    if not value or not value.strip():
        return None
    return _WHITESPACE.sub(" ", value).strip()


def _is_bare_year(value: str | None) -> bool:
    return bool(value) and bool(_BARE_YEAR.match(value.strip()))


def resolve_dates(
    entry: NameWithDates, main_since: str | None, main_until: str | None
) -> tuple[str, str | None]:
    """Merge a name's own dates with the main-column fallbacks -> (since, until)."""
    since = entry.since or main_since or ""
    # a dated entry without until ("seit ...") is explicitly still active
    until = entry.until if (entry.dated or entry.until is not None) else main_until

    if _is_bare_year(until):
        until = main_until
    if _is_bare_year(since):
        since = main_since or ""
    return since, until


def assemble_records(
    class_id: str,
    tz: str,
    names: Iterable[NameWithDates],
    main_since: str | None,
    main_until: str | None,
    comment: str | None,
) -> list[TrainRecord]:
    records: list[TrainRecord] = []
    for entry in names:
        since, until = resolve_dates(entry, main_since, main_until)
        records.append(
            TrainRecord(
                class_id=class_id,
                tz=tz,
                name=entry.name,
                since=since,
                until=until,
                comment=comment,
                is_active=until is None,
            )
        )
    if not records:
        records.append(
            TrainRecord(
                class_id=class_id,
                tz=tz,
                name=f"Tz {tz}",
                since=main_since or "",
                until=main_until,
                comment=comment,
                is_active=main_until is None,
            )
        )
    return records


def build_row_records(class_id: str, row: RawRow, roles: ColumnRoles) -> list[TrainRecord] | None:
    """Records for one data row; None when the row has no Tz number (dropped)."""
    first = row[0] if row else ""
    if not first.strip():
        return None
    tz = extract_tz_number(first)
    if not tz:
        return None

    main_since = extract_main_date(ColumnRoles.cell(row, roles.since_index)) or ""
    main_until = extract_main_date(ColumnRoles.cell(row, roles.until_index), until=True)
    comment = clean_comment(ColumnRoles.cell(row, roles.comment_index))

    return assemble_records(
        class_id,
        tz,
        extract_names_with_dates(first),
        main_since,
        main_until,
        comment,
    )
