from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from ..logging.error_log import ErrorLogBuffer
from ..models.train_record import TrainRecord
from .batch_insert import batch_insert

"""Persist extracted records into the ``trains`` table.

The extractor is lenient; this step is strict. A record survives only if its
dates are real ``DD.MM.YYYY`` calendar dates and its tz / class id are
integers. Rejected records are logged and skipped, the rest replace the
previous contents of the table.
"""

logger = logging.getLogger(__name__)

TRAINS_TABLE = "trains"
TRAIN_COLUMNS: tuple[str, ...] = (
    "tz",
    "name",
    "class_id",
    "comment",
    "is_active",
    "name_since",
    "name_until",
)
SEED_SOURCE = "<SEED>"


class InvalidRecordError(ValueError):
    error_type = "INVALID_RECORD"


class InvalidDateError(InvalidRecordError):
    error_type = "INVALID_DATE"


class InvalidNumberError(InvalidRecordError):
    error_type = "INVALID_NUMBER"


@dataclass(frozen=True)
class SeedResult:
    prepared: int
    skipped: int
    inserted: int


def parse_strict_date(value: str | None) -> date:
    """Parse ``DD.MM.YYYY``; the result must be exactly that day/month/year."""
    parts = (value or "").split(".")
    if len(parts) != 3:
        raise InvalidDateError(f"Invalid date format: {value!r}. Expected DD.MM.YYYY")
    try:
        day, month, year = (int(p) for p in parts)
    except ValueError as e:
        raise InvalidDateError(f"Invalid date values: {value!r}") from e
    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateError(f"Invalid date: {value!r}") from e


def parse_integer(value: str, label: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidNumberError(f"Invalid {label}: {value!r}") from e


def to_train_row(record: TrainRecord) -> tuple[Any, ...]:
    """Row values in TRAIN_COLUMNS order; raises InvalidRecordError."""
    since = parse_strict_date(record.since)
    until = parse_strict_date(record.until) if record.until else None
    return (
        parse_integer(record.tz, "tz"),
        record.name,
        parse_integer(record.class_id, "classId"),
        record.comment or None,
        until is None,
        since,
        until,
    )


def prepare_train_rows(
    records: Iterable[TrainRecord], error_log: ErrorLogBuffer
) -> tuple[list[tuple[Any, ...]], int]:
    rows: list[tuple[Any, ...]] = []
    skipped = 0
    for index, record in enumerate(records):
        try:
            rows.append(to_train_row(record))
        except InvalidRecordError as e:
            skipped += 1
            logger.debug("skip record class=%s tz=%s: %s", record.class_id, record.tz, e)
            error_log.add(SEED_SOURCE, index + 1, e.error_type, f"class={record.class_id} tz={record.tz}: {e}")
    return rows, skipped


def seed_trains(
    cursor: Any,
    records: Sequence[TrainRecord],
    error_log: ErrorLogBuffer,
    page_size: int = 1000,
) -> SeedResult:
    """Replace the persisted train set with ``records``.

    Runs inside the caller's transaction; BatchInsertError propagates so the
    caller can roll back.
    """
    rows, skipped = prepare_train_rows(records, error_log)
    logger.info(
        "Prepared %d trains for insertion (%d skipped)", len(rows), skipped
    )
    if not rows:
        logger.warning("No trains to insert; keeping existing rows")
        return SeedResult(prepared=0, skipped=skipped, inserted=0)

    cursor.execute(f"DELETE FROM {TRAINS_TABLE}")
    result = batch_insert(cursor, TRAINS_TABLE, TRAIN_COLUMNS, rows, page_size=page_size)
    logger.info("Seeded %d trains", result.inserted_rows)
    return SeedResult(prepared=len(rows), skipped=skipped, inserted=result.inserted_rows)
