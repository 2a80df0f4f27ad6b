from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ..models.table_data import RawRow, TableData
from .columns import DEFAULT_HEADER_KEYWORDS, HEADER_SCAN_ROWS, locate_header

"""CSV reader for hand-maintained name-history tables.

The source files are exported spreadsheets whose first column holds a
multi-line cell ("Tz 101\\nAdler\\n(von ... bis ...)"). The tokenizer is a
permissive two-state machine: quoted fields may contain commas and line
breaks, doubled quotes escape a quote, and an unterminated quote simply runs
to the end of the input instead of raising.
"""

__all__ = [
    "InsufficientRowsError",
    "tokenize",
    "read_table_file",
    "split_table",
]

QUOTE = '"'
DELIMITER = ","


class InsufficientRowsError(Exception):
    """Raised when a file has fewer than two tokenized rows (no header + data)."""


def _emit(rows: list[RawRow], row: RawRow) -> None:
    # all-empty rows (",,,") are dropped
    if any(field != "" for field in row):
        rows.append(row)


def tokenize(content: str) -> list[RawRow]:
    """Split raw file text into rows of trimmed fields.

    Outside quotes ``,`` ends a field and ``\\n`` / ``\\r\\n`` ends a row (a
    ``\\n\\r`` pair is consumed as one break). Inside quotes every character,
    line breaks included, belongs to the field.

    >>> tokenize('a,"b,\\nc",d')
    [['a', 'b,\\nc', 'd']]
    """
    rows: list[RawRow] = []
    row: RawRow = []
    field: list[str] = []
    in_quotes = False
    i = 0
    n = len(content)

    while i < n:
        char = content[i]
        next_char = content[i + 1] if i + 1 < n else None

        if char == QUOTE:
            if in_quotes and next_char == QUOTE:
                field.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue

        if not in_quotes:
            if char == DELIMITER:
                row.append("".join(field).strip())
                field = []
                i += 1
                continue
            if char == "\n" or (char == "\r" and next_char == "\n"):
                row.append("".join(field).strip())
                _emit(rows, row)
                row = []
                field = []
                # \r\n and \n\r both count as one line break
                i += 2 if "\r" in (char, next_char) else 1
                continue

        field.append(char)
        i += 1

    tail = "".join(field).strip()
    if tail or row:
        row.append(tail)
    if row:
        _emit(rows, row)
    return rows


def read_table_file(path: Path, encoding: str = "utf-8") -> list[RawRow]:
    """Read and tokenize one source file.

    Parameters
    ----------
    path: CSV file path
    encoding: text encoding of the export (UTF-8 for the Google Sheets exports)
    """
    content = path.read_text(encoding=encoding)
    return tokenize(content)


def split_table(
    rows: Sequence[RawRow],
    name: str,
    header_keywords: Sequence[str] = DEFAULT_HEADER_KEYWORDS,
    scan_rows: int = HEADER_SCAN_ROWS,
) -> TableData:
    """Split tokenized rows into header + data rows.

    Steps:
    1. Validate at least 2 rows exist (header + one data row)
    2. Locate the header row by keyword within the first ``scan_rows`` rows
    3. Rows after the header become data rows
    """
    if len(rows) < 2:
        raise InsufficientRowsError(f"file '{name}' has insufficient rows ({len(rows)})")
    header_index = locate_header(rows, header_keywords, scan_rows)
    return TableData(
        header=list(rows[header_index]),
        header_index=header_index,
        rows=[list(r) for r in rows[header_index + 1:]],
    )
