from __future__ import annotations

import argparse
import sys
import os
import logging
from typing import List

from rich.console import Console
from rich.table import Table

from conference_validator.core.fetch import PageFetcher
from conference_validator.core.output import write_workbook, write_json
from conference_validator.core.models import ConferenceRecord, ValidationReport
from conference_validator.core.settings import SettingsError, ValidatorSettings, load_settings
from conference_validator.validator import ConferenceInputError, load_conferences, validate_all

console = Console()

def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Validate conference listings against their websites")
    p.add_argument("--input", default="conference_data.json", help="Path to the conference list JSON")
    p.add_argument("--config", default="", help="Optional settings YAML")
    p.add_argument("--out", default=None, help="Workbook output path (.xlsx)")
    p.add_argument("--screenshots", default=None, help="Screenshot directory")
    p.add_argument("--json", default="", help="Optional JSON output path")
    p.add_argument("--log", default="out/validate.log", help="Log output path")
    p.add_argument("--year", type=int, default=None, help="Year to look for on each site")
    p.add_argument("--delay", type=float, default=None, help="Seconds to wait between sites")
    p.add_argument("--timeout-ms", type=int, default=None, help="Navigation timeout in ms")
    p.add_argument("--headed", action="store_true", help="Show the browser window")
    return p.parse_args(argv)

def setup_logging(log_path: str) -> logging.Logger:
    os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
    logger = logging.getLogger("conference_validator")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(message)s")

    # stdout
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    # file
    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    return logger

def build_settings(args: argparse.Namespace) -> ValidatorSettings:
    settings = load_settings(args.config)
    return settings.override(
        output=args.out,
        screenshot_dir=args.screenshots,
        target_year=args.year,
        delay_s=args.delay,
        timeout_ms=args.timeout_ms,
        headless=False if args.headed else None,
    )

def render_preview(records: List[ConferenceRecord], limit: int = 20) -> None:
    t = Table(title=f"Preview (first {min(limit, len(records))} of {len(records)})")
    t.add_column("name")
    t.add_column("status")
    t.add_column("code")
    t.add_column("dates")
    t.add_column("cfp")
    t.add_column("review")
    for r in records[:limit]:
        status_style = "green" if r.website_status == "Live" else "red"
        t.add_row(
            r.name,
            f"[{status_style}]{r.website_status}[/{status_style}]",
            str(r.website_status_code or ""),
            r.dates_verified,
            r.cfp_status_verified,
            "yes" if r.needs_manual_review else "",
        )
    console.print(t)

def render_summary(report: ValidationReport, year: int) -> None:
    t = Table(title="Validation complete")
    t.add_column("metric")
    t.add_column("value", justify="right")
    t.add_row("Total Conferences", str(report.total_conferences))
    t.add_row("Websites Verified", str(report.websites_verified))
    t.add_row("Websites Failed", str(report.websites_failed))
    t.add_row(f"{year} Dates Confirmed", str(report.dates_confirmed))
    t.add_row(f"{year} Dates TBD", str(report.dates_tbd))
    t.add_row("CFP Links Found", str(report.cfp_found))
    t.add_row("Success Rate", f"{report.success_rate}%")
    console.print(t)
    if report.errors:
        console.print(
            f"[yellow]Errors encountered: {len(report.errors)}[/yellow] "
            "(see the 'Validation Report' sheet)"
        )

def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    log = setup_logging(args.log)

    try:
        settings = build_settings(args)
        conferences = load_conferences(args.input)
    except (SettingsError, ConferenceInputError) as e:
        console.print(f"[red]{e}[/red]")
        log.error("%s", e)
        return 2

    log.info("Loaded %s conferences from %s", len(conferences), args.input)
    os.makedirs(settings.screenshot_dir, exist_ok=True)

    with PageFetcher(settings, log=log) as fetcher:
        report = validate_all(fetcher, conferences, settings)

    write_workbook(settings.output, conferences, report, year=settings.target_year)
    if args.json:
        write_json(args.json, conferences)

    render_preview(conferences)
    render_summary(report, settings.target_year)
    log.info("Wrote XLSX: %s", settings.output)
    log.info("Screenshots: %s", settings.screenshot_dir)
    if args.json:
        log.info("Wrote JSON: %s", args.json)
    log.info("Wrote LOG: %s", args.log)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
