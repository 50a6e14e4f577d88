from __future__ import annotations

import json
import os
from datetime import date
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .models import ConferenceRecord, ValidationReport
from .normalize import parse_start_date, quarter_rank

GREEN = "FF90EE90"
LIGHT_RED = "FFFFCCCC"
GOLD = "FFFFD700"
YELLOW = "FFFFFF99"

def columns(year: int) -> List[Tuple[str, str, int]]:
    """(header, record key, width) for every conference sheet."""
    return [
        ("Conference Name", "name", 35),
        ("Organization", "organization", 30),
        (f"{year} Dates", "dates", 20),
        ("Location", "location", 20),
        ("Format", "format", 12),
        ("Estimated Attendance", "estimated_attendance", 18),
        ("Website URL", "website", 40),
        ("Website Status", "website_status", 15),
        ("Website HTTP Code", "website_status_code", 18),
        ("Dates Verified", "dates_verified", 15),
        ("Dates Found on Site", "dates_found", 40),
        ("Proposal Deadline", "proposal_deadline", 20),
        ("Proposal Status", "proposal_status", 15),
        ("CFP Link", "cfp_link", 40),
        ("CFP Verified", "cfp_status_verified", 15),
        ("Target Audience", "target_audience", 35),
        ("Subject Focus", "subject_focus", 35),
        ("ModelIt Relevance (1-5)", "modelit_relevance", 22),
        ("Priority Tier", "priority_tier", 12),
        ("Quarter", "quarter", 10),
        ("Region", "region", 12),
        ("Screenshot Homepage", "screenshot_homepage", 50),
        ("Validation Date", "validation_date", 15),
        ("Validation Notes", "validation_notes", 50),
        ("Needs Manual Review", "needs_manual_review", 20),
    ]

def _fill(argb: str) -> PatternFill:
    return PatternFill(fill_type="solid", fgColor=argb)

def _style_header(ws: Worksheet, argb: str) -> None:
    for cell in ws[1]:
        cell.font = Font(bold=True, color="FFFFFFFF")
        cell.fill = _fill(argb)
        cell.alignment = Alignment(vertical="center", horizontal="center")
    ws.row_dimensions[1].height = 20

def _cell_value(v: Any) -> Any:
    if isinstance(v, (list, tuple)):
        v = "; ".join(str(x) for x in v)
    elif isinstance(v, dict):
        v = json.dumps(v, ensure_ascii=False)
    if isinstance(v, str):
        # scraped text can carry control characters that xlsx cannot store
        return ILLEGAL_CHARACTERS_RE.sub("", v)
    return v

def _as_number(v: Any) -> Optional[float]:
    try:
        return float(v)
    except (TypeError, ValueError):
        return None

def is_high_priority(r: ConferenceRecord) -> bool:
    tier = _as_number(r.priority_tier)
    return tier is not None and tier <= 2

def is_systems_focus(r: ConferenceRecord) -> bool:
    return bool(r.subject_focus) and "system" in str(r.subject_focus).lower()

def by_date_order(records: Sequence[ConferenceRecord]) -> List[ConferenceRecord]:
    """Quarter first; inside a quarter, dated records by start date, then the rest in input order."""
    def key(r: ConferenceRecord) -> Tuple[int, int, str]:
        start = parse_start_date(r.dates)
        return (quarter_rank(r.quarter), 0 if start else 1, start)
    return sorted(records, key=key)

def _conference_sheet(
    wb: Workbook,
    title: str,
    header_argb: str,
    cols: List[Tuple[str, str, int]],
    records: Iterable[ConferenceRecord],
    highlight: bool = False,
) -> Worksheet:
    ws = wb.create_sheet(title)
    ws.append([h for h, _, _ in cols])
    for idx, (_, _, width) in enumerate(cols, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width
    _style_header(ws, header_argb)

    keys = [k for _, k, _ in cols]
    for r in records:
        row = r.to_row()
        ws.append([_cell_value(row.get(k)) for k in keys])
        if highlight:
            _highlight_row(ws, ws.max_row, keys, r)

    ws.auto_filter.ref = f"A1:{get_column_letter(len(cols))}1"
    ws.freeze_panes = "A2"
    return ws

def _highlight_row(ws: Worksheet, row_idx: int, keys: List[str], r: ConferenceRecord) -> None:
    def cell(key: str):
        return ws.cell(row=row_idx, column=keys.index(key) + 1)

    if r.website_status == "Live":
        cell("website_status").fill = _fill(GREEN)
    elif "Error" in r.website_status:
        cell("website_status").fill = _fill(LIGHT_RED)

    if r.needs_manual_review:
        cell("needs_manual_review").fill = _fill(GOLD)

    relevance = _as_number(r.modelit_relevance)
    if relevance == 5:
        cell("modelit_relevance").fill = _fill(GREEN)
    elif relevance is not None and relevance >= 3:
        cell("modelit_relevance").fill = _fill(YELLOW)

def _report_sheet(wb: Workbook, report: ValidationReport, year: int) -> Worksheet:
    ws = wb.create_sheet("Validation Report")
    ws.append(["Metric", "Value"])
    ws.column_dimensions["A"].width = 40
    ws.column_dimensions["B"].width = 20
    _style_header(ws, "FF333333")

    ws.append(["Total Conferences", report.total_conferences])
    ws.append(["Websites Verified Live", report.websites_verified])
    ws.append(["Websites Failed/Error", report.websites_failed])
    ws.append([f"{year} Dates Confirmed", report.dates_confirmed])
    ws.append([f"{year} Dates TBD/Not Found", report.dates_tbd])
    ws.append(["CFP Links Found", report.cfp_found])
    ws.append(["Validation Date", date.today().isoformat()])
    ws.append([])
    ws.append(["Success Rate", f"{report.success_rate}%"])

    if report.errors:
        ws.append([])
        ws.append(["Errors", len(report.errors)])
        ws.cell(row=ws.max_row, column=1).font = Font(bold=True)
        for name, message in report.errors:
            ws.append([_cell_value(name), _cell_value(message)])
    return ws

def write_workbook(
    path: str,
    records: List[ConferenceRecord],
    report: ValidationReport,
    year: int = 2026,
) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    cols = columns(year)

    wb = Workbook()
    wb.remove(wb.active)

    _conference_sheet(wb, "All Conferences", "FF0066CC", cols, records, highlight=True)
    _conference_sheet(wb, "High Priority", "FFFF6600", cols, [r for r in records if is_high_priority(r)])
    _conference_sheet(wb, "Systems Thinking", "FF9933CC", cols, [r for r in records if is_systems_focus(r)])
    _conference_sheet(wb, "By Date", "FF006633", cols, by_date_order(records))
    _report_sheet(wb, report, year)

    wb.save(path)

def write_json(path: str, records: List[ConferenceRecord]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([r.to_json() for r in records], f, ensure_ascii=False, indent=2)
