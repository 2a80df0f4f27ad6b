from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .train_record import TrainRecord

"""Processing result models.

ProcessingResult aggregates the outcome of one extraction run over all source
files: file counters, the flat record list and per-file statistics used for
the SUMMARY line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    class_id: str
    status: str  # success/skipped/failed
    records: int  # extracted records
    dropped_rows: int  # rows without Tz
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of an extraction run."""
    success_files: int
    failed_files: int
    skipped_files: int
    total_records: int
    dropped_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_records_per_sec: float
    records: list[TrainRecord] = field(default_factory=list)
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files + self.skipped_files
