"""Deal record -- the atomic unit every pipeline aggregation consumes.

Deals are read-only inputs: analytics functions never mutate them.
``Deal.from_row`` tolerates loose input (JSON bodies, DB rows, CSV dicts)
and falls back to safe defaults instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_float(value) -> float | None:
    """Attempt to parse a value into a finite float."""
    if value is None:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def _parse_date(value) -> datetime | None:
    """Attempt to parse a value into a datetime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        pass
    for fmt in (
        "%Y-%m-%d",
        "%Y-%m-%d %H:%M:%S",
        "%m/%d/%Y",
        "%Y/%m/%d",
    ):
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def _text(value) -> str:
    return "" if value is None else str(value)


def _optional_text(value) -> str | None:
    return None if value is None else str(value)


# ---------------------------------------------------------------------------
# Stage vocabulary
# ---------------------------------------------------------------------------


class Stage(str, Enum):
    """Known pipeline stages, in funnel order."""

    PROSPECT = "prospect"
    QUALIFIED = "qualified"
    PROPOSAL = "proposal"
    NEGOTIATION = "negotiation"
    CLOSED_WON = "closed_won"
    CLOSED_LOST = "closed_lost"


STAGE_ORDER: tuple[str, ...] = tuple(s.value for s in Stage)

TERMINAL_STAGES: frozenset[str] = frozenset(
    {Stage.CLOSED_WON.value, Stage.CLOSED_LOST.value}
)


def is_terminal(stage: str) -> bool:
    """Return True if the stage is closed_won or closed_lost."""
    return stage in TERMINAL_STAGES


# ---------------------------------------------------------------------------
# Deal
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Deal:
    """One sales opportunity."""

    id: int | str
    stage: str
    value: float = 0.0
    probability: int = 0
    transportation_mode: str = ""
    sales_rep: str = ""
    origin_city: str = ""
    created_date: datetime | None = None
    updated_date: datetime | None = None
    expected_close_date: datetime | None = None
    deal_id: str | None = None
    company_name: str | None = None
    contact_name: str | None = None
    destination_city: str | None = None
    cargo_type: str | None = None

    @property
    def is_closed(self) -> bool:
        return is_terminal(self.stage)

    @classmethod
    def from_row(cls, row: dict) -> "Deal":
        """Build a Deal from a loose mapping, defaulting malformed fields."""
        value = _safe_float(row.get("value"))
        probability = _safe_float(row.get("probability"))
        return cls(
            id=row.get("id", ""),
            stage=_text(row.get("stage")),
            value=value if value is not None else 0.0,
            probability=int(probability) if probability is not None else 0,
            transportation_mode=_text(row.get("transportation_mode")),
            sales_rep=_text(row.get("sales_rep")),
            origin_city=_text(row.get("origin_city")),
            created_date=_parse_date(row.get("created_date")),
            updated_date=_parse_date(row.get("updated_date")),
            expected_close_date=_parse_date(row.get("expected_close_date")),
            deal_id=_optional_text(row.get("deal_id")),
            company_name=_optional_text(row.get("company_name")),
            contact_name=_optional_text(row.get("contact_name")),
            destination_city=_optional_text(row.get("destination_city")),
            cargo_type=_optional_text(row.get("cargo_type")),
        )

    def to_dict(self) -> dict:
        """JSON-ready representation with ISO-formatted dates."""
        return {
            "id": self.id,
            "deal_id": self.deal_id,
            "company_name": self.company_name,
            "contact_name": self.contact_name,
            "stage": self.stage,
            "value": self.value,
            "probability": self.probability,
            "transportation_mode": self.transportation_mode,
            "sales_rep": self.sales_rep,
            "origin_city": self.origin_city,
            "destination_city": self.destination_city,
            "cargo_type": self.cargo_type,
            "created_date": self.created_date.isoformat() if self.created_date else None,
            "updated_date": self.updated_date.isoformat() if self.updated_date else None,
            "expected_close_date": (
                self.expected_close_date.isoformat() if self.expected_close_date else None
            ),
        }


def whole_days_between(start: datetime | None, end: datetime | None) -> int | None:
    """Floor of (end - start) in days, or None when either side is missing.

    Naive datetimes are treated as UTC when compared with aware ones.
    """
    if start is None or end is None:
        return None
    if (start.tzinfo is None) != (end.tzinfo is None):
        start = _as_naive_utc(start)
        end = _as_naive_utc(end)
    return (end - start) // timedelta(days=1)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
