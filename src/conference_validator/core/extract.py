from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple
from bs4 import BeautifulSoup

from .utils import absolutize

MONTHS = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

DEFAULT_CFP_KEYWORDS = (
    "call for proposals",
    "cfp",
    "submit proposal",
    "presenter application",
    "speaker application",
    "proposal submission",
    "present at",
)

FUTURE_WORDS = ("future", "upcoming")

def date_patterns(year: int) -> List[re.Pattern]:
    """
    Patterns tried in order: the bare year first, then one per month for
    ranges such as "March 3-5, 2026" or "March 3, 4 2026".
    """
    y = re.escape(str(year))
    patterns = [re.compile(y)]
    for month in MONTHS:
        patterns.append(re.compile(rf"\b{month}\s+\d+[-–,]\s*\d+,?\s*{y}", re.I))
    return patterns

def find_dates(text: str, year: int) -> List[str]:
    found: List[str] = []
    seen = set()
    for pat in date_patterns(year):
        for m in pat.finditer(text or ""):
            s = m.group(0)
            if s not in seen:
                seen.add(s)
                found.append(s)
    return found

def page_text(html: str) -> str:
    soup = BeautifulSoup(html, "lxml")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    body = soup.body or soup
    return body.get_text("\n", strip=True)

def _anchors(html: str, links: Optional[Sequence[Tuple[str, str]]] = None) -> List[Tuple[str, str]]:
    if links is not None:
        return [(text or "", href or "") for text, href in links]
    soup = BeautifulSoup(html, "lxml")
    out = []
    for a in soup.select("a[href]"):
        out.append((a.get_text(" ", strip=True), a.get("href", "")))
    return out

def find_cfp_link(
    html: str,
    base_url: str,
    keywords: Sequence[str] = DEFAULT_CFP_KEYWORDS,
    max_links: int = 100,
    links: Optional[Sequence[Tuple[str, str]]] = None,
) -> Optional[str]:
    """
    First anchor (among the first max_links) whose text mentions a CFP keyword.
    Relative hrefs are resolved against base_url. When the browser supplied
    rendered (text, href) pairs they are used instead of parsing html, so
    CSS-hidden text inside an anchor does not count.
    """
    kws = [k.lower() for k in keywords]
    for text, href in _anchors(html, links)[:max_links]:
        low = text.lower()
        if any(k in low for k in kws):
            return absolutize(base_url, href)
    return None

def find_future_links(
    html: str,
    base_url: str,
    year: int,
    limit: int = 5,
    links: Optional[Sequence[Tuple[str, str]]] = None,
) -> List[Tuple[str, str]]:
    y = str(year)
    out: List[Tuple[str, str]] = []
    for text, href in _anchors(html, links):
        full = absolutize(base_url, href)
        low = text.lower()
        if y in low or y in full.lower() or any(w in low for w in FUTURE_WORDS):
            out.append((text, full))
            if len(out) >= limit:
                break
    return out
