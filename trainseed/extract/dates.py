from __future__ import annotations

import re
from collections.abc import Sequence

"""Date normalization for German/English free-text dates.

All dates leave this module as ``DD.MM.YYYY`` strings or None. Two inputs are
recognized: the numeric form ``5.3.1999`` and the written form
``15. März 2005`` (German or English month name, a few abbreviations).

Column cells ("Abnahme", "Ausmusterung" ...) are reduced to one fallback date
by trying an ordered tuple of search patterns; the first hit that normalizes
wins.
"""

__all__ = [
    "MONTHS",
    "DECOMMISSION_KEYWORDS",
    "normalize_date",
    "first_normalized_match",
    "extract_main_date",
]

MONTHS: dict[str, str] = {
    "januar": "01", "january": "01",
    "februar": "02", "february": "02",
    "märz": "03", "march": "03", "mär": "03",
    "april": "04",
    "mai": "05", "may": "05",
    "juni": "06", "june": "06",
    "juli": "07", "july": "07",
    "august": "08",
    "september": "09", "sep": "09",
    "oktober": "10", "october": "10", "okt": "10",
    "november": "11", "nov": "11",
    "dezember": "12", "december": "12", "dez": "12",
}

DECOMMISSION_KEYWORDS: tuple[str, ...] = (
    "ausmusterung",
    "verschrottung",
    "außerbetriebnahme",
    "außerbetriebsetzung",
)

_NUMERIC_PREFIX = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})")
_MONTH_NAME = re.compile(r"(\d{1,2})\.\s*([a-zäöü]+)\s+(\d{4})", re.IGNORECASE)

# search strategies for column cells, in priority order
_NUMERIC_SEARCH = re.compile(r"(\d{1,2}\.\d{2}\.\d{4})")
_MONTH_SEARCH = re.compile(r"(\d{1,2}\.\s*[a-zäöü]+\s+\d{4})", re.IGNORECASE)
_DECOMMISSION_VERB = re.compile(
    r"(?:ausgemustert|verschrottet|außerbetrieb)\s+(\d{1,2}\.\s*[a-zäöü]+\s+\d{4})",
    re.IGNORECASE,
)

SINCE_STRATEGIES: tuple[re.Pattern[str], ...] = (_NUMERIC_SEARCH, _MONTH_SEARCH)
UNTIL_STRATEGIES: tuple[re.Pattern[str], ...] = (_DECOMMISSION_VERB, _NUMERIC_SEARCH, _MONTH_SEARCH)


def _format(day: str, month: str, year: str) -> str:
    return f"{int(day):02d}.{int(month):02d}.{year}"


def normalize_date(text: str | None) -> str | None:
    """Convert a date fragment to ``DD.MM.YYYY``; None when unparseable.

    >>> normalize_date("5.3.1999")
    '05.03.1999'
    >>> normalize_date("15. März 2005")
    '15.03.2005'
    >>> normalize_date("März 2005") is None
    True
    """
    if not text:
        return None
    m = _NUMERIC_PREFIX.match(text)
    if m:
        return _format(*m.groups())
    m = _MONTH_NAME.search(text)
    if m:
        day, month_name, year = m.groups()
        month = MONTHS.get(month_name.lower())
        if month:
            return _format(day, month, year)
    return None


def first_normalized_match(text: str, strategies: Sequence[re.Pattern[str]]) -> str | None:
    """Try each pattern in order; return the first capture that normalizes."""
    for pattern in strategies:
        m = pattern.search(text)
        if m:
            normalized = normalize_date(m.group(1))
            if normalized:
                return normalized
    return None


def extract_main_date(value: str | None, until: bool = False) -> str | None:
    """Reduce a since/until column cell to a single date.

    since-mode reads the first line, until-mode the last one (a cell often
    lists intermediate events before the decommissioning). When that line
    does not parse, the whole cell is searched; in until-mode only if it
    mentions a decommission keyword.
    """
    if not value or not value.strip():
        return None
    lines = [line.strip() for line in value.split("\n") if line.strip()]

    if until:
        normalized = normalize_date(lines[-1])
        if normalized:
            return normalized
        lowered = value.lower()
        if any(k in lowered for k in DECOMMISSION_KEYWORDS):
            return first_normalized_match(value, UNTIL_STRATEGIES)
        return None

    normalized = normalize_date(lines[0])
    if normalized:
        return normalized
    return first_normalized_match(value, SINCE_STRATEGIES)
