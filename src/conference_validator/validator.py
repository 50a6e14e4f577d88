from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, List, Optional, Protocol

from conference_validator.core.extract import find_cfp_link, find_dates, find_future_links, page_text
from conference_validator.core.fetch import FetchError, PageVisit
from conference_validator.core.models import ConferenceRecord, ValidationReport
from conference_validator.core.settings import ValidatorSettings
from conference_validator.core.utils import is_http_url, sanitize_filename

log = logging.getLogger("conference_validator")


class ConferenceInputError(ValueError):
    pass


class Visitor(Protocol):
    def visit(self, url: str, screenshot_path: str) -> PageVisit: ...


def load_conferences(path: str) -> List[ConferenceRecord]:
    """
    Read the conference list. Accepts {"conferences": [...]} or a bare list.
    Any problem with the file is fatal for the run.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConferenceInputError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConferenceInputError(f"Invalid JSON in {path}: {e}") from e

    items: Any = data.get("conferences") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise ConferenceInputError(f"{path}: expected a 'conferences' list")

    records: List[ConferenceRecord] = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ConferenceInputError(f"{path}: conference #{i + 1} is not an object")
        name = str(item.get("name") or "").strip()
        website = str(item.get("website") or "").strip()
        if not name or not website:
            raise ConferenceInputError(f"{path}: conference #{i + 1} needs both 'name' and 'website'")
        if not is_http_url(website):
            log.warning("Conference %r has a non-http website: %s", name, website)
        records.append(ConferenceRecord.from_input({**item, "name": name, "website": website}))
    return records


def screenshot_path_for(settings: ValidatorSettings, conference: ConferenceRecord) -> str:
    return os.path.join(settings.screenshot_dir, f"{sanitize_filename(conference.name)}_homepage.png")


def _record_status(result: ConferenceRecord, status: Optional[int], report: ValidationReport) -> None:
    if status is None:
        log.warning("    no response object, status left as %r", result.website_status)
        return

    result.website_status_code = status
    if 200 <= status < 400:
        result.website_status = "Live"
        report.websites_verified += 1
        log.info("    website is live (%s)", status)
    else:
        result.website_status = f"Error {status}"
        result.validation_notes.append(f"HTTP {status}")
        result.needs_manual_review = True
        report.websites_failed += 1
        log.warning("    website returned %s", status)


def validate_conference(
    fetcher: Visitor,
    conference: ConferenceRecord,
    report: ValidationReport,
    settings: ValidatorSettings,
    index: int = 0,
) -> ConferenceRecord:
    """Visit one conference site and enrich the record in place."""
    year = settings.target_year
    log.info("[%s] Validating: %s", index + 1, conference.name)
    log.info("    website=%s", conference.website)

    try:
        visit = fetcher.visit(conference.website, screenshot_path_for(settings, conference))
    except FetchError as e:
        message = str(e)
        log.error("    error: %s", message)
        conference.website_status = "Error"
        conference.validation_notes.append(f"Error: {message}")
        conference.needs_manual_review = True
        report.websites_failed += 1
        report.errors.append((conference.name, message))
        return conference

    _record_status(conference, visit.status_code, report)
    conference.screenshot_homepage = visit.screenshot_path

    text = visit.text or page_text(visit.html)
    dates = find_dates(text, year)
    if dates:
        conference.dates_found = "; ".join(dates)
        conference.dates_verified = "Yes"
        report.dates_confirmed += 1
        log.info("    found dates: %s", conference.dates_found[:60])
    else:
        conference.dates_verified = "Not Found"
        conference.validation_notes.append(f"No {year} dates found on homepage")
        report.dates_tbd += 1
        log.warning("    no %s dates found on homepage", year)

    base_url = visit.url or conference.website
    cfp = find_cfp_link(visit.html, base_url, settings.cfp_keywords, settings.max_links, links=visit.links)
    if cfp:
        conference.cfp_link = cfp
        conference.cfp_status_verified = "Link Found"
        report.cfp_found += 1
        log.info("    CFP link found: %s", cfp[:50])
    else:
        conference.cfp_status_verified = "Not Found"
        conference.validation_notes.append("No CFP link found on homepage")
        log.warning("    no CFP link found")

    future = find_future_links(visit.html, base_url, year, links=visit.links)
    if future:
        log.info("    found %s links to future/%s pages", len(future), year)
        conference.validation_notes.append(f"Found {len(future)} future conference links")

    return conference


def validate_all(
    fetcher: Visitor,
    conferences: List[ConferenceRecord],
    settings: ValidatorSettings,
    sleep=time.sleep,
) -> ValidationReport:
    report = ValidationReport(total_conferences=len(conferences))
    for i, conference in enumerate(conferences):
        validate_conference(fetcher, conference, report, settings, index=i)
        # be polite to the target servers
        if i < len(conferences) - 1 and settings.delay_s > 0:
            sleep(settings.delay_s)
    return report
