import pytest

from conference_validator.core.normalize import parse_start_date, quarter_rank


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("March 3-5, 2026", "2026-03-03"),
        ("March 30 - April 2, 2026", "2026-03-30"),
        ("October 12th, 2026", "2026-10-12"),
        ("June 9–11, 2026", "2026-06-09"),
    ],
)
def test_parse_start_date(raw, expected):
    assert parse_start_date(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "TBD", "Dates to be announced"])
def test_parse_start_date_blank_or_tba(raw):
    assert parse_start_date(raw) == ""


def test_quarter_rank():
    assert [quarter_rank(q) for q in ("Q1", "Q2", "Q3", "Q4", "TBD")] == [1, 2, 3, 4, 5]
    assert quarter_rank(None) == 999
    assert quarter_rank("Summer") == 999
