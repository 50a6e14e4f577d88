"""
Pytest configuration and shared fixtures.

Ensures src/ is on sys.path so that 'import conference_validator...' works
without an editable install, and provides a fake browser fetcher so the
validation pass can be tested without launching Chromium.
"""
import sys
from pathlib import Path

import pytest

src_root = Path(__file__).parent.parent / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from conference_validator.core.fetch import FetchError, PageVisit  # noqa: E402
from conference_validator.core.settings import ValidatorSettings  # noqa: E402


SUMMIT_HTML = """
<html>
  <head><title>EdTech Summit</title></head>
  <body>
    <h1>EdTech Summit</h1>
    <p>Join us March 3-5, 2026 in Austin. Also see april 10, 12 2026 workshops.</p>
    <a href="/about">About</a>
    <a href="/speakers/apply">Speaker Application</a>
    <a href="https://cfp.example.org/">Call for Proposals</a>
    <a href="/archive/2026-summit">Next year</a>
    <a href="/events">Upcoming events</a>
    <script>var launch = "December 1-2, 2026";</script>
  </body>
</html>
"""

PLAIN_HTML = """
<html><body><p>Welcome to our association. Dates TBA.</p><a href="/join">Join</a></body></html>
"""


class FakeFetcher:
    """
    Maps url -> exception or (status, html, text[, final_url[, links]]);
    records every visit.
    """

    def __init__(self, pages):
        self.pages = pages
        self.visits = []

    def visit(self, url, screenshot_path):
        self.visits.append((url, screenshot_path))
        page = self.pages[url]
        if isinstance(page, Exception):
            raise page
        status, html, text, final_url, links = (tuple(page) + (None, None))[:5]
        return PageVisit(
            url=final_url or url,
            status_code=status,
            html=html,
            text=text,
            screenshot_path=screenshot_path,
            links=links,
        )


@pytest.fixture
def settings(tmp_path):
    return ValidatorSettings(
        screenshot_dir=str(tmp_path / "shots"),
        output=str(tmp_path / "report.xlsx"),
        delay_s=0,
    )


@pytest.fixture
def fake_pages():
    return {
        "https://summit.example.org/": (200, SUMMIT_HTML, ""),
        "https://plain.example.org/": (200, PLAIN_HTML, "Welcome to our association. Dates TBA."),
        "https://gone.example.org/": (404, "<html><body>Not found</body></html>", "Not found"),
        "https://slow.example.org/": FetchError("Timeout 30000ms exceeded."),
    }


@pytest.fixture
def conference_data():
    return {
        "conferences": [
            {
                "name": "EdTech Summit",
                "organization": "EdTech Org",
                "dates": "March 3-5, 2026",
                "website": "https://summit.example.org/",
                "subject_focus": "Systems Thinking, STEM",
                "modelit_relevance": 5,
                "priority_tier": 1,
                "quarter": "Q1",
                "contact_email": "info@summit.example.org",
            },
            {
                "name": "Plain Association Meeting",
                "website": "https://plain.example.org/",
                "modelit_relevance": 3,
                "priority_tier": 3,
                "quarter": "TBD",
            },
            {
                "name": "Gone Conference",
                "website": "https://gone.example.org/",
                "priority_tier": 2,
                "quarter": "Q2",
            },
            {
                "name": "Slow Expo",
                "website": "https://slow.example.org/",
                "quarter": "Q1",
                "dates": "January 20-22, 2026",
            },
        ]
    }


@pytest.fixture
def summit_html():
    return SUMMIT_HTML


@pytest.fixture
def plain_html():
    return PLAIN_HTML
