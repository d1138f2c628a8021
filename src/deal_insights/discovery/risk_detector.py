"""Stalled-deal detection.

An open deal is at risk once it has gone ``threshold_days`` (21 by default)
without an update. Closed deals are never at risk.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from deal_insights.discovery.deal_record import Deal, whole_days_between


DEFAULT_THRESHOLD_DAYS = 21

HIGH_RISK_DAYS = 60
MEDIUM_RISK_DAYS = 40


@dataclass
class AtRiskDeal:
    """An open deal that has stalled."""

    deal: Deal
    days_since_update: int
    risk_level: str

    def to_dict(self) -> dict:
        payload = self.deal.to_dict()
        payload["daysSinceUpdate"] = self.days_since_update
        payload["riskLevel"] = self.risk_level
        return payload


@dataclass
class AtRiskSummary:
    """Headline numbers for the at-risk list."""

    count: int
    total_value: float
    avg_days_stalled: float

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "totalValue": self.total_value,
            "avgDaysStalled": self.avg_days_stalled,
        }


def risk_level(days: int) -> str:
    """High at 60+ days stalled, Medium at 40+, otherwise Low."""
    if days >= HIGH_RISK_DAYS:
        return "High"
    if days >= MEDIUM_RISK_DAYS:
        return "Medium"
    return "Low"


def find_at_risk_deals(
    deals: list[Deal],
    now: datetime,
    threshold_days: int = DEFAULT_THRESHOLD_DAYS,
) -> list[AtRiskDeal]:
    """Open deals not updated for ``threshold_days`` or more, most stalled first.

    Deals without an updated_date cannot be aged and are skipped.
    """
    flagged: list[AtRiskDeal] = []
    for deal in deals:
        if deal.is_closed:
            continue
        days = whole_days_between(deal.updated_date, now)
        if days is None or days < threshold_days:
            continue
        flagged.append(AtRiskDeal(deal=deal, days_since_update=days, risk_level=risk_level(days)))

    flagged.sort(key=lambda d: d.days_since_update, reverse=True)
    return flagged


def summarize_at_risk(at_risk: list[AtRiskDeal]) -> AtRiskSummary:
    if not at_risk:
        return AtRiskSummary(count=0, total_value=0.0, avg_days_stalled=0.0)
    return AtRiskSummary(
        count=len(at_risk),
        total_value=sum(d.deal.value for d in at_risk),
        avg_days_stalled=sum(d.days_since_update for d in at_risk) / len(at_risk),
    )
