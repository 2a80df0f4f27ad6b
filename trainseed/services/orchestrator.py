from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ImportConfig
from ..extract.records import build_row_records
from ..logging.error_log import ErrorLogBuffer
from ..models.processing_result import FileStat, ProcessingResult
from ..models.source_file import FileStatus, SourceFile
from ..models.train_record import TrainRecord
from ..table.columns import resolve_columns
from ..table.reader import InsufficientRowsError, read_table_file, split_table
from .progress import ProgressTracker

"""Extraction orchestration.

Scans the source directory, extracts records file by file and aggregates
them. Files are independent: a failure in one file is logged, recorded in the
error log and counted, and the run continues with the next file. Only an
unreadable source directory is fatal.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that prevents the run (e.g. missing source directory)."""


def scan_source_files(directory: Path, extension: str = ".csv") -> list[Path]:
    """Source files in ``directory`` (non-recursive), sorted by name.

    Raises:
        ProcessingError: If the directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == extension)
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def class_id_from_path(path: Path, prefix: str = "br-") -> str:
    """``br-401.csv`` -> ``401``."""
    stem = path.stem
    if prefix and stem.startswith(prefix):
        return stem[len(prefix):]
    return stem


def process_file(path: Path, config: ImportConfig, error_log: ErrorLogBuffer) -> SourceFile:
    """Extract all records of one source file.

    Never raises for content problems: rows without Tz are dropped, files with
    fewer than two rows are SKIPPED and any other exception marks the file
    FAILED.
    """
    start_time = datetime.now(UTC)
    class_id = class_id_from_path(path, config.class_prefix)
    try:
        rows = read_table_file(path)
        table = split_table(
            rows,
            path.name,
            header_keywords=config.header_keywords,
            scan_rows=config.header_scan_rows,
        )
        roles = resolve_columns(table.header, config.column_keywords)
        logger.debug(
            "file=%s header_row=%d since_col=%s until_col=%s comment_col=%s data_rows=%d",
            path.name,
            table.header_index,
            roles.since_index,
            roles.until_index,
            roles.comment_index,
            len(table.rows),
        )

        records: list[TrainRecord] = []
        dropped = 0
        for index, row in enumerate(table.rows):
            row_records = build_row_records(class_id, row, roles)
            if row_records is None:
                # blank first cell is layout filler, not an error
                if row and row[0].strip():
                    dropped += 1
                    error_log.add(
                        path.name,
                        table.row_number(index),
                        "MISSING_TZ",
                        f"no Tz number in first column: {row[0][:60]!r}",
                    )
                continue
            records.extend(row_records)

        return SourceFile(
            path=path,
            name=path.name,
            class_id=class_id,
            records=records,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=FileStatus.SUCCESS,
            dropped_rows=dropped,
        )

    except InsufficientRowsError as e:
        logger.warning("%s", e)
        error_log.add(path.name, -1, "INSUFFICIENT_ROWS", str(e))
        return SourceFile(
            path=path,
            name=path.name,
            class_id=class_id,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=FileStatus.SKIPPED,
            error=str(e),
        )

    except Exception as e:
        logger.error("file=%s processing failed: %s", path.name, e)
        error_log.add(path.name, -1, "PROCESSING_ERROR", str(e))
        return SourceFile(
            path=path,
            name=path.name,
            class_id=class_id,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=FileStatus.FAILED,
            error=str(e),
        )


def process_all(config: ImportConfig, error_log: ErrorLogBuffer | None = None) -> ProcessingResult:
    """Process all source files in the configured directory.

    1. Scan the directory for source files
    2. Extract each file independently
    3. Aggregate records, counters and per-file stats

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    own_log = error_log is None
    if error_log is None:
        error_log = ErrorLogBuffer()

    file_paths = scan_source_files(Path(config.source_directory), config.file_extension)

    records: list[TrainRecord] = []
    file_stats: list[FileStat] = []
    counts = {status: 0 for status in FileStatus}
    dropped_rows = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            logger.info("Processing %s...", file_path.name)

            result = process_file(file_path, config, error_log)
            counts[result.status] += 1
            dropped_rows += result.dropped_rows
            records.extend(result.records)

            if result.status is FileStatus.SUCCESS:
                logger.info("  Extracted %d records", len(result.records))

            elapsed = 0.0
            if result.start_time and result.end_time:
                elapsed = (result.end_time - result.start_time).total_seconds()
            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    class_id=result.class_id,
                    status=result.status.value,
                    records=len(result.records),
                    dropped_rows=result.dropped_rows,
                    elapsed_seconds=elapsed,
                )
            )
            progress.finish_file(records=len(records), failed=counts[FileStatus.FAILED])

    if own_log:
        try:
            error_log.flush()
        except OSError as e:
            logger.warning("could not write error log: %s", e)

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput = len(records) / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ProcessingResult(
        success_files=counts[FileStatus.SUCCESS],
        failed_files=counts[FileStatus.FAILED],
        skipped_files=counts[FileStatus.SKIPPED],
        total_records=len(records),
        dropped_rows=dropped_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_records_per_sec=throughput,
        records=records,
        file_stats=file_stats,
    )
