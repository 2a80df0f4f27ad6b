from __future__ import annotations

from dataclasses import dataclass

"""Tokenized table models.

A RawRow is a plain ``list[str]`` of trimmed fields produced by the tokenizer.
TableData splits a tokenized file into its detected header row and the data
rows after it; ColumnRoles records where the since/until/comment columns are.
"""

__all__ = [
    "RawRow",
    "TableData",
    "ColumnRoles",
]

RawRow = list[str]


@dataclass(frozen=True)
class TableData:
    header: RawRow
    header_index: int  # 0-based index of the header within the tokenized rows
    rows: list[RawRow]  # data rows following the header

    def row_number(self, data_index: int) -> int:
        """1-based tokenized row number of a data row (for error records)."""
        return self.header_index + data_index + 2


@dataclass(frozen=True)
class ColumnRoles:
    """Column positions for the semantic roles; None means "not found".

    Column 0 is always the combined Tz / name-history column and is not
    part of this mapping.
    """
    since_index: int | None
    until_index: int | None
    comment_index: int | None

    @staticmethod
    def cell(row: RawRow, index: int | None) -> str:
        """Return the cell at ``index`` or "" when the role is unmapped / row too short."""
        if index is None or index >= len(row):
            return ""
        return row[index]
