from __future__ import annotations

from dataclasses import dataclass, asdict, field, fields
from datetime import date
from typing import Optional, List, Dict, Any, Tuple

INPUT_FIELDS = (
    "name",
    "organization",
    "dates",
    "location",
    "format",
    "estimated_attendance",
    "website",
    "proposal_deadline",
    "proposal_status",
    "target_audience",
    "subject_focus",
    "modelit_relevance",
    "priority_tier",
    "quarter",
    "region",
)

def _today() -> str:
    return date.today().isoformat()

@dataclass
class ConferenceRecord:
    name: str
    website: str
    organization: Optional[str] = None
    dates: Optional[str] = None
    location: Optional[str] = None
    format: Optional[str] = None
    estimated_attendance: Any = None
    proposal_deadline: Optional[str] = None
    proposal_status: Optional[str] = None
    target_audience: Optional[str] = None
    subject_focus: Optional[str] = None
    modelit_relevance: Any = None
    priority_tier: Any = None
    quarter: Optional[str] = None
    region: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    # filled in by the validation pass
    website_status: str = "Not Checked"
    website_status_code: Optional[int] = None
    dates_verified: str = "No"
    dates_found: Optional[str] = None
    cfp_link: Optional[str] = None
    cfp_status_verified: str = "No"
    screenshot_homepage: Optional[str] = None
    validation_date: str = field(default_factory=_today)
    validation_notes: List[str] = field(default_factory=list)
    needs_manual_review: bool = False

    @classmethod
    def from_input(cls, data: Dict[str, Any]) -> "ConferenceRecord":
        known = {k: data[k] for k in INPUT_FIELDS if k in data}
        extra = {k: v for k, v in data.items() if k not in INPUT_FIELDS}
        return cls(extra=extra, **known)

    def to_row(self) -> Dict[str, Any]:
        # spreadsheet-friendly
        row = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        row["validation_notes"] = "; ".join(self.validation_notes)
        return row

    def to_json(self) -> Dict[str, Any]:
        out = asdict(self)
        extra = out.pop("extra")
        for k, v in extra.items():
            out.setdefault(k, v)
        return out

@dataclass
class ValidationReport:
    total_conferences: int = 0
    websites_verified: int = 0
    websites_failed: int = 0
    dates_confirmed: int = 0
    dates_tbd: int = 0
    cfp_found: int = 0
    errors: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def success_rate(self) -> int:
        if not self.total_conferences:
            return 0
        # half-up, so 12.5 reports as 13
        return int(self.websites_verified / self.total_conferences * 100 + 0.5)
