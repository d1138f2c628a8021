"""Three-month weighted revenue forecast.

Each deal contributes ``value * probability/100 * stage_weight``.

Deals are spread over the next three calendar months by position in the
input list (deal i goes to month i % 3), not by expected_close_date. This
round-robin placement is what the dashboard has always shown; bucketing by
close date would change the numbers and needs sign-off first.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from types import MappingProxyType

from deal_insights.discovery.deal_record import Deal, Stage


FORECAST_MONTHS = 3

DEFAULT_STAGE_WEIGHT = 0.5

STAGE_WEIGHTS = MappingProxyType({
    Stage.PROSPECT.value: 0.1,
    Stage.QUALIFIED.value: 0.3,
    Stage.PROPOSAL.value: 0.5,
    Stage.NEGOTIATION.value: 0.7,
    Stage.CLOSED_WON.value: 1.0,
    Stage.CLOSED_LOST.value: 0.0,
})


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class MonthForecast:
    """Weighted revenue expected in one forward month."""

    month: str
    month_start: date
    forecast: float
    deal_count: int

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "monthStart": self.month_start.isoformat(),
            "forecast": self.forecast,
            "dealCount": self.deal_count,
        }


@dataclass
class RevenueForecastResult:
    """Forecast for the next three months."""

    months: list[MonthForecast]
    total_forecast: float

    def to_dict(self) -> dict:
        return {
            "months": [m.to_dict() for m in self.months],
            "totalForecast": self.total_forecast,
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def stage_weight(stage: str) -> float:
    """Forecast weight for a stage name (case-insensitive).

    Unrecognised stages get the neutral DEFAULT_STAGE_WEIGHT.
    """
    key = stage.lower() if isinstance(stage, str) else ""
    if key in STAGE_WEIGHTS:
        return STAGE_WEIGHTS[key]
    return DEFAULT_STAGE_WEIGHT


def weighted_value(deal: Deal) -> float:
    return deal.value * (deal.probability / 100) * stage_weight(deal.stage)


def forward_months(as_of: date | datetime, count: int = FORECAST_MONTHS) -> list[date]:
    """First day of each of the ``count`` months after ``as_of``."""
    months = []
    year, month = as_of.year, as_of.month
    for _ in range(count):
        month += 1
        if month > 12:
            month = 1
            year += 1
        months.append(date(year, month, 1))
    return months


def forecast_revenue(deals: list[Deal], as_of: date | datetime) -> RevenueForecastResult:
    """Project weighted revenue into the three months following ``as_of``.

    Args:
        deals: Pipeline deals; list order decides month placement.
        as_of: Reference date; the forecast starts the month after it.

    Returns:
        RevenueForecastResult with one entry per month, always three.
    """
    starts = forward_months(as_of)
    totals = [0.0] * len(starts)
    counts = [0] * len(starts)

    for index, deal in enumerate(deals):
        slot = index % len(starts)
        totals[slot] += weighted_value(deal)
        counts[slot] += 1

    months = [
        MonthForecast(
            month=f"{calendar.month_name[start.month]} {start.year}",
            month_start=start,
            forecast=totals[i],
            deal_count=counts[i],
        )
        for i, start in enumerate(starts)
    ]
    return RevenueForecastResult(months=months, total_forecast=sum(totals))
