from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..models.train_record import NameWithDates
from .dates import normalize_date

"""Name-history extraction from the first column of a source row.

A cell looks like::

    Tz 101
    Adler
    (von 01.01.1990 bis 31.12.1999)
    Falke
    (seit 01.01.2000)

Every line is classified (Tz marker / date range / plain name) and the lines
are folded left to right. The fold carries at most one pending name: a plain
line opens it, the next date-range line closes it. A residual pending name
is emitted after the fold.
"""

__all__ = [
    "LineKind",
    "ClassifiedLine",
    "extract_tz_number",
    "classify_line",
    "fold_step",
    "fallback_name",
    "extract_names_with_dates",
]

_TZ_IN_CELL = re.compile(r"Tz\s*(\d+[a-z]*)", re.IGNORECASE)
_TZ_LINE = re.compile(r"^Tz\s*\d+", re.IGNORECASE)
_PARENTHESIZED = re.compile(r"\(([^)]+)\)")
_ANY_PARENS = re.compile(r"\([^)]*\)")
_VON_BIS = re.compile(r"von\s+([^b]+?)\s+bis\s+(.+)", re.IGNORECASE)
_SEIT = re.compile(r"seit\s+(.+)", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


class LineKind(Enum):
    TZ = "tz"
    RANGE = "range"  # parenthesized span with a recognized von/bis or seit
    UNRECOGNIZED_RANGE = "unrecognized_range"  # parenthesized span, no pattern matched
    PLAIN = "plain"


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    text: str
    previous: str | None = None  # text of the preceding line, for implicit names
    since: str | None = None
    until: str | None = None


def extract_tz_number(value: str | None) -> str:
    """Return the unit number from "Tz 101" style text, "" if absent."""
    if not value:
        return ""
    m = _TZ_IN_CELL.search(value)
    return m.group(1) if m else ""


def _date_or_raw(fragment: str) -> str:
    fragment = fragment.strip()
    return normalize_date(fragment) or fragment


def _parse_range(span: str) -> tuple[str, str | None] | None:
    m = _VON_BIS.search(span)
    if m:
        return _date_or_raw(m.group(1)), _date_or_raw(m.group(2))
    m = _SEIT.search(span)
    if m:
        return _date_or_raw(m.group(1)), None
    return None


def classify_line(line: str, previous: str | None = None) -> ClassifiedLine:
    if _TZ_LINE.match(line):
        return ClassifiedLine(LineKind.TZ, line, previous)
    m = _PARENTHESIZED.search(line)
    if not m:
        return ClassifiedLine(LineKind.PLAIN, line, previous)
    parsed = _parse_range(m.group(1))
    if parsed is None:
        return ClassifiedLine(LineKind.UNRECOGNIZED_RANGE, line, previous)
    since, until = parsed
    return ClassifiedLine(LineKind.RANGE, line, previous, since=since, until=until)


def _is_implicit_name(previous: str | None) -> bool:
    return bool(previous) and not _TZ_LINE.match(previous) and "(" not in previous


def fold_step(
    pending: str | None, line: ClassifiedLine
) -> tuple[str | None, list[NameWithDates]]:
    """One step of the name fold: (pending, line) -> (pending', emitted)."""
    if line.kind in (LineKind.TZ, LineKind.UNRECOGNIZED_RANGE):
        return pending, []

    if line.kind is LineKind.RANGE:
        if pending is not None:
            name = pending
        elif _is_implicit_name(line.previous):
            name = line.previous.strip()
        else:
            # range with nothing to attach to is dropped
            return None, []
        return None, [NameWithDates(name, since=line.since, until=line.until, dated=True)]

    emitted = [NameWithDates(pending)] if pending is not None else []
    cleaned = _ANY_PARENS.sub("", line.text).strip()
    return (cleaned or None), emitted


def fallback_name(value: str, tz: str) -> str:
    """Single name for cells whose lines yielded nothing ("Tz 5 | Adler")."""
    name = _TZ_IN_CELL.sub("", value, count=1)
    name = _ANY_PARENS.sub("", name).strip()
    name = re.sub(r"^\||\|$", "", name).strip()
    name = _WHITESPACE.sub(" ", name).strip()
    return name or f"Tz {tz}"


def extract_names_with_dates(value: str | None) -> list[NameWithDates]:
    """Extract every (name, since, until) tuple from a name-history cell.

    Returns [] when the cell carries no Tz number; otherwise at least one
    tuple (see fallback_name).
    """
    if not value:
        return []
    tz = extract_tz_number(value)
    if not tz:
        return []

    lines = [line.strip() for line in value.split("\n") if line.strip()]
    classified = [
        classify_line(line, lines[i - 1] if i > 0 else None) for i, line in enumerate(lines)
    ]

    names: list[NameWithDates] = []
    pending: str | None = None
    for line in classified:
        pending, emitted = fold_step(pending, line)
        names.extend(emitted)
    if pending is not None:
        names.append(NameWithDates(pending))

    if names:
        return names
    return [NameWithDates(fallback_name(value, tz))]
