from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from playwright.sync_api import sync_playwright, Browser, Playwright, Error as PlaywrightError

from .settings import ValidatorSettings

@dataclass
class PageVisit:
    url: str
    status_code: Optional[int]
    html: str
    text: str
    screenshot_path: str
    # (innerText, href) per anchor as rendered; None when the browser could not list them
    links: Optional[List[Tuple[str, str]]] = None

class FetchError(Exception):
    """Navigation, rendering or screenshot failure for a single site."""

ANCHORS_JS = "els => els.map(a => [a.innerText || '', a.getAttribute('href') || ''])"

class PageFetcher:
    """
    One headless Chromium for the whole run, one fresh context per site.
    Call start() before visit() and close() when done (or use as a context manager).
    """

    def __init__(self, settings: ValidatorSettings, log: Optional[logging.Logger] = None) -> None:
        self.settings = settings
        self.log = log or logging.getLogger("conference_validator")
        self._pw: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    def start(self) -> "PageFetcher":
        self.log.info("Launching browser headless=%s", self.settings.headless)
        self._pw = sync_playwright().start()
        self._browser = self._pw.chromium.launch(
            headless=self.settings.headless,
            timeout=self.settings.launch_timeout_ms,
        )
        return self

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._pw is not None:
            self._pw.stop()
            self._pw = None
        self.log.info("Browser closed")

    def __enter__(self) -> "PageFetcher":
        return self.start()

    def __exit__(self, *exc) -> None:
        self.close()

    def visit(self, url: str, screenshot_path: str) -> PageVisit:
        if self._browser is None:
            raise RuntimeError("PageFetcher.start() was not called")

        os.makedirs(os.path.dirname(screenshot_path) or ".", exist_ok=True)
        context = None
        try:
            context = self._browser.new_context(user_agent=self.settings.user_agent)
            page = context.new_page()
            resp = page.goto(url, wait_until="domcontentloaded", timeout=self.settings.timeout_ms)
            status = resp.status if resp is not None else None
            self.log.info("goto url=%s status=%s", url, status)

            # let late scripts render before capturing
            page.wait_for_timeout(self.settings.settle_ms)
            page.screenshot(path=screenshot_path, full_page=True)

            html = page.content()
            try:
                text = page.inner_text("body")
            except PlaywrightError:
                text = ""
            try:
                links = [(t, h) for t, h in page.eval_on_selector_all("a[href]", ANCHORS_JS)]
            except PlaywrightError:
                links = None

            return PageVisit(
                url=page.url,
                status_code=status,
                html=html,
                text=text,
                screenshot_path=screenshot_path,
                links=links,
            )
        except PlaywrightError as e:
            raise FetchError(e.message) from e
        finally:
            if context is not None:
                try:
                    context.close()
                except PlaywrightError as e:
                    self.log.warning("context close failed url=%s: %s", url, e.message)
