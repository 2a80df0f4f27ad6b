from __future__ import annotations

import pytest

from trainseed.extract.dates import (
    SINCE_STRATEGIES,
    UNTIL_STRATEGIES,
    extract_main_date,
    first_normalized_match,
    normalize_date,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("5.3.1999", "05.03.1999"),
        ("05.03.1999", "05.03.1999"),
        ("5.3.1999 in Hamburg", "05.03.1999"),
        ("15. März 2005", "15.03.2005"),
        ("15.März 2005", "15.03.2005"),
        ("1. MAI 2010", "01.05.2010"),
        ("3. Okt 2001", "03.10.2001"),
        ("24. December 1999", "24.12.1999"),
        ("Abnahme am 2. Juni 1992", "02.06.1992"),
    ],
)
def test_normalize_date_recognized(text: str, expected: str):
    assert normalize_date(text) == expected


@pytest.mark.parametrize(
    "text",
    ["März 2005", "1999", "", None, "15. Foo 2005", "in 5.3.1999", "seit kurzem"],
)
def test_normalize_date_unparseable(text):
    assert normalize_date(text) is None


def test_since_uses_first_line():
    assert extract_main_date("1.2.1995\n3.4.1996") == "01.02.1995"


def test_since_searches_whole_cell_when_first_line_has_no_date():
    assert extract_main_date("Abnahme in Hamburg\nam 12.05.1994") == "12.05.1994"
    assert extract_main_date("geplant\n7. Juli 2001 (Ersatz)") == "07.07.2001"


def test_since_empty_or_blank():
    assert extract_main_date("") is None
    assert extract_main_date("  \n ") is None
    assert extract_main_date(None) is None


def test_until_keyword_with_month_name():
    assert extract_main_date("Ausmusterung 12. Mai 2010", until=True) == "12.05.2010"


def test_until_uses_last_line():
    assert extract_main_date("1.1.2000\n2.2.2002", until=True) == "02.02.2002"


def test_until_decommission_verb_wins_over_other_dates():
    text = "Ausmusterung\nausgemustert 5. Mai 2005\nAkte vom 01.01.2006 siehe Archiv"
    assert extract_main_date(text, until=True) == "05.05.2005"


def test_until_keyword_search_falls_back_to_numeric():
    text = "Außerbetriebnahme 17.11.2008\nnach Brand"
    assert extract_main_date(text, until=True) == "17.11.2008"


def test_until_without_keyword_does_not_search():
    assert extract_main_date("Unfall 17.11.2008\nnach Brand", until=True) is None


def test_strategy_order_is_priority_order():
    text = "ausgemustert 9. Juni 2011, Akte 01.02.2003"
    assert first_normalized_match(text, UNTIL_STRATEGIES) == "09.06.2011"
    assert first_normalized_match(text, SINCE_STRATEGIES) == "01.02.2003"
