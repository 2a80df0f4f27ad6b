from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from .train_record import TrainRecord

"""SourceFile domain model and FileStatus enum.

A SourceFile is the processing context of one input CSV file, tracking its
status from discovery to success / skipped / failed together with the records
it produced.
"""


class FileStatus(Enum):
    """Status enum for SourceFile processing lifecycle.

    State transitions: pending → processing → (success | skipped | failed)

    - SKIPPED: file had fewer than two tokenized rows (nothing to extract)
    - FAILED: reading or parsing raised; other files continue
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceFile:
    path: Path
    name: str
    class_id: str
    records: list[TrainRecord] = field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: FileStatus = FileStatus.PENDING
    dropped_rows: int = 0  # data rows without a Tz number
    error: str | None = None  # failure / skip reason summary
