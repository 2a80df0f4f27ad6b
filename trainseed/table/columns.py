from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..models.table_data import ColumnRoles, RawRow

"""Header row detection and column role resolution.

Both are keyword heuristics over lower-cased header text. The role table is
plain data so that new roles or spellings can be added (or overridden from
config/import.yml) without touching the lookup code.
"""

__all__ = [
    "HEADER_SCAN_ROWS",
    "DEFAULT_HEADER_KEYWORDS",
    "DEFAULT_COLUMN_KEYWORDS",
    "locate_header",
    "find_column_index",
    "resolve_columns",
]

HEADER_SCAN_ROWS = 10

DEFAULT_HEADER_KEYWORDS: tuple[str, ...] = (
    "triebzug",
    "zugnummer",
    "name",
    "abnahme",
    "indienststellung",
)

# role -> keyword candidates, tried in order
DEFAULT_COLUMN_KEYWORDS: Mapping[str, tuple[str, ...]] = {
    "since": ("abnahme", "indienststellung"),
    "until": ("ausmusterung", "verschrottung", "außerbetriebnahme", "außerbetriebsetzung"),
    "comment": ("bemerkung", "unfälle", "allgemeine bemerkungen", "besondere vorkommnisse"),
}


def locate_header(
    rows: Sequence[RawRow],
    keywords: Sequence[str] = DEFAULT_HEADER_KEYWORDS,
    scan_rows: int = HEADER_SCAN_ROWS,
) -> int:
    """Return the index of the first row mentioning a header keyword (0 if none)."""
    for index, row in enumerate(rows[:scan_rows]):
        text = " ".join(row).lower()
        if any(k in text for k in keywords):
            return index
    return 0


def find_column_index(header: RawRow, candidates: Sequence[str]) -> int | None:
    """Index of the first header field containing a candidate (candidate order wins)."""
    lowered = [h.lower() for h in header]
    for candidate in candidates:
        needle = candidate.lower()
        for index, text in enumerate(lowered):
            if needle in text:
                return index
    return None


def resolve_columns(
    header: RawRow,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> ColumnRoles:
    table = {**DEFAULT_COLUMN_KEYWORDS, **(keywords or {})}
    return ColumnRoles(
        since_index=find_column_index(header, table["since"]),
        until_index=find_column_index(header, table["until"]),
        comment_index=find_column_index(header, table["comment"]),
    )
