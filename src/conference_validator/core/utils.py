from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

_UNSAFE_RE = re.compile(r"[^a-z0-9]", re.I)

def is_http_url(url: str) -> bool:
    try:
        p = urlparse(url)
        return p.scheme in ("http", "https")
    except ValueError:
        return False

def absolutize(base: str, href: str) -> str:
    if href.startswith("http"):
        return href
    return urljoin(base, href)

def sanitize_filename(name: str) -> str:
    return _UNSAFE_RE.sub("_", name).lower()
