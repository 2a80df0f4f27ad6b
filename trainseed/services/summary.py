from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering.

Format:
SUMMARY files={n}/{n} success={s} failed={f} skipped={k} records={r}
dropped_rows={d} elapsed_sec={e} throughput_rps={t}
"""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a finished extraction run.

    >>> from datetime import datetime, timezone
    >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
    >>> result = ProcessingResult(
    ...     success_files=1, failed_files=0, skipped_files=0, total_records=40,
    ...     dropped_rows=1, start_time=start, end_time=end,
    ...     elapsed_seconds=2.0, throughput_records_per_sec=20.0,
    ... )
    >>> render_summary_line(result)
    'SUMMARY files=1/1 success=1 failed=0 skipped=0 records=40 dropped_rows=1 elapsed_sec=2 throughput_rps=20'
    """
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"skipped={result.skipped_files} "
        f"records={result.total_records} "
        f"dropped_rows={result.dropped_rows} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_records_per_sec)}"
    )
