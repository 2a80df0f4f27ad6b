from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import pandas as pd
import psycopg2
from dotenv import load_dotenv

from trainseed.config.loader import ConfigError, ImportConfig, load_config
from trainseed.db.batch_insert import BatchInsertError
from trainseed.db.connection import DatabaseUnavailableError, db_cursor
from trainseed.db.seed import seed_trains
from trainseed.logging.error_log import ErrorLogBuffer
from trainseed.logging.init import log_summary, set_debug, setup_logging
from trainseed.models.train_record import TrainRecord
from trainseed.services.export import read_records_json, write_records_json
from trainseed.services.orchestrator import (
    ProcessingError,
    class_id_from_path,
    process_all,
    scan_source_files,
)
from trainseed.services.summary import render_summary_line
from trainseed.table.columns import resolve_columns
from trainseed.table.reader import InsufficientRowsError, read_table_file, split_table

"""CLI entrypoint.

Flow:
- Load .env and config/import.yml
- Extract records from every source file (per-file failure isolation)
- Write the records as JSON
- Replace the persisted train set (skipped with DISABLE_DB_CONNECT=1 or when
  the database is unreachable)
- With --seed-from, skip extraction and seed a previously written JSON file
- Print the SUMMARY line and exit with 0 (clean), 2 (some file or the seeding
  failed) or 1 (fatal startup error)
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

DEFAULT_CONFIG_PATH = Path("config/import.yml")
INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; its values override the shell so DB settings are predictable."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Extract train-name histories from CSV exports and seed the database")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data",
        action="store_true",
        help="Print detected header, column roles and first rows per file, then exit",
    )
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to import.yml")
    p.add_argument(
        "--seed-from",
        type=Path,
        metavar="JSON",
        help="Skip extraction and seed the database from a previously written records file",
    )
    return p.parse_args(argv)


def _inspect_data(cfg: ImportConfig) -> int:
    files = scan_source_files(Path(cfg.source_directory), cfg.file_extension)
    if not files:
        print(f"inspect: no {cfg.file_extension} files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name} class_id={class_id_from_path(f, cfg.class_prefix)}")
        try:
            table = split_table(
                read_table_file(f),
                f.name,
                header_keywords=cfg.header_keywords,
                scan_rows=cfg.header_scan_rows,
            )
        except (OSError, UnicodeDecodeError, InsufficientRowsError) as e:
            print(f"  read_error: {e}")
            continue
        roles = resolve_columns(table.header, cfg.column_keywords)
        print(f"  header_row={table.header_index} cols={table.header}")
        print(f"  since={roles.since_index} until={roles.until_index} comment={roles.comment_index}")
        width = len(table.header)
        sample = [(row + [""] * width)[:width] for row in table.rows[:INSPECT_SAMPLE_ROWS]]
        frame = pd.DataFrame(sample, columns=[h or f"col{i}" for i, h in enumerate(table.header)])
        # multi-line cells are shown on one line
        frame = frame.replace(r"\s*\n\s*", " | ", regex=True)
        print(frame.to_string(index=False, max_colwidth=40))
    return EXIT_SUCCESS_ALL


def _persist(
    cfg: ImportConfig,
    records: list[TrainRecord],
    error_log: ErrorLogBuffer,
    logger: logging.Logger,
    required: bool = False,
) -> bool:
    """Seed the database; returns False when seeding failed.

    An unreachable database only counts as a failure when ``required`` is set
    (seeding is the whole run); otherwise the run stays extraction only.
    """
    try:
        with db_cursor(cfg.database) as cur:
            seed = seed_trains(cur, records, error_log)
    except DatabaseUnavailableError as e:
        if required:
            logger.error(f"DB connection failed: {e}")
            return False
        if os.getenv("SUPPRESS_DB_WARNING") == "1":
            logger.debug(f"DB connection failed -> extraction only: {e}")
        else:
            logger.info(f"DB connection failed -> extraction only: {e}")
        return True
    except (BatchInsertError, psycopg2.Error) as e:
        logger.error(f"seeding failed, transaction rolled back: {e}")
        return False
    logger.info(f"mode=live seeded={seed.inserted} skipped={seed.skipped}")
    return True


def _flush_error_log(error_log: ErrorLogBuffer, logger: logging.Logger) -> None:
    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning(f"could not write error log: {e}")
    else:
        if log_path is not None:
            logger.warning(f"diagnostics written to: {log_path}")


def _seed_from_file(cfg: ImportConfig, path: Path, logger: logging.Logger) -> int:
    """Seed from a records JSON written by an earlier run; no extraction."""
    try:
        records = read_records_json(path)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error(f"seed-from: cannot read {path}: {e}")
        return EXIT_FATAL
    logger.info(f"Loaded {len(records)} records from: {path}")

    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.warning("DB connect disabled via DISABLE_DB_CONNECT=1 -> nothing seeded")
        return EXIT_SUCCESS_ALL

    error_log = ErrorLogBuffer()
    seed_ok = _persist(cfg, records, error_log, logger, required=True)
    _flush_error_log(error_log, logger)
    return EXIT_SUCCESS_ALL if seed_ok else EXIT_PARTIAL_FAILURE


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only read sys.argv when called without arguments (tests pass [])
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    if args.seed_from is not None:
        return _seed_from_file(cfg, args.seed_from, logger)

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.inspect_data:
        try:
            return _inspect_data(cfg)
        except ProcessingError as e:
            logger.error(f"processing: {e}")
            return EXIT_FATAL

    logger.info(f"Processing files from: {directory}")
    error_log = ErrorLogBuffer()
    try:
        result = process_all(cfg, error_log)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    output = write_records_json(result.records, Path(cfg.output_path))
    logger.info(f"Total records: {result.total_records}")
    logger.info(f"Output written to: {output}")

    seed_ok = True
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> extraction only")
    else:
        seed_ok = _persist(cfg, result.records, error_log, logger)

    _flush_error_log(error_log, logger)

    log_summary(render_summary_line(result).removeprefix("SUMMARY "))

    if result.failed_files > 0 or not seed_ok:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
