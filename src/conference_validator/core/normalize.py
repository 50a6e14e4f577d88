from __future__ import annotations

import re
from typing import Optional

import dateparser

TBA_MARKERS = {"tba", "tbd", "tbc", "to be announced", "to be confirmed", "to be determined"}

ORDINAL_RE = re.compile(r"(\d+)(st|nd|rd|th)\b", re.I)

# "March 3-5, 2026" -> "March 3, 2026"; "March 30 - April 2, 2026" -> "March 30, 2026"
RANGE_RE = re.compile(r"^([A-Za-z]+\.?\s+\d{1,2})\s*[-–]\s*(?:[A-Za-z]+\.?\s+)?\d{1,2}(,?\s*\d{4})")

QUARTER_ORDER = {"Q1": 1, "Q2": 2, "Q3": 3, "Q4": 4, "TBD": 5}

def parse_start_date(raw: Optional[str]) -> str:
    """
    Return the ISO start date of a free-form conference date, or "".
    """
    raw_clean = " ".join(str(raw or "").split()).strip()
    if not raw_clean:
        return ""

    low = raw_clean.lower()
    if any(m in low for m in TBA_MARKERS):
        return ""

    no_ord = ORDINAL_RE.sub(r"\1", raw_clean)
    m = RANGE_RE.match(no_ord)
    if m:
        no_ord = f"{m.group(1)}{m.group(2)}"

    dt = dateparser.parse(
        no_ord,
        settings={
            "DATE_ORDER": "MDY",
            "PREFER_DAY_OF_MONTH": "first",
            "RETURN_AS_TIMEZONE_AWARE": False,
            "REQUIRE_PARTS": ["month", "year"],
        },
        languages=["en"],
    )
    if not dt:
        return ""
    return dt.date().isoformat()

def quarter_rank(quarter: Optional[str]) -> int:
    return QUARTER_ORDER.get(quarter or "", 999)
