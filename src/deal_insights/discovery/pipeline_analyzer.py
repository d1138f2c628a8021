"""Pipeline analyzer -- stage distribution and deal velocity.

Pure functions over a list of deals:
stage breakdown with counts and percentages, and average days per stage.

Velocity is approximated from each deal's created/updated timestamps since
stage transitions are not recorded.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from deal_insights.discovery.deal_record import STAGE_ORDER, Deal, whole_days_between


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _round_half_up(value: float) -> int:
    """Round .5 upward, the way the dashboard does (not banker's rounding)."""
    return math.floor(value + 0.5)


def _group_by_stage(deals: list[Deal]) -> dict[str, list[Deal]]:
    grouped: dict[str, list[Deal]] = {}
    for deal in deals:
        grouped.setdefault(deal.stage, []).append(deal)
    return grouped


def days_in_stage(deal: Deal) -> int:
    """Whole days between creation and last update, never negative."""
    days = whole_days_between(deal.created_date, deal.updated_date)
    if days is None:
        return 0
    return max(0, days)


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass
class StageBucket:
    """Deals sharing one literal stage value."""
    deals: list[Deal]
    count: int
    percentage: int

    def to_dict(self) -> dict:
        return {
            "deals": [d.to_dict() for d in self.deals],
            "count": self.count,
            "percentage": self.percentage,
        }


@dataclass
class StageAnalyticsResult:
    """Stage partition of the whole pipeline."""
    total_deals: int
    stage_analytics: dict[str, StageBucket] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalDeals": self.total_deals,
            "stageAnalytics": {
                stage: bucket.to_dict() for stage, bucket in self.stage_analytics.items()
            },
        }


@dataclass
class StageVelocity:
    """Velocity metrics for a single pipeline stage."""
    stage: str
    avg_days: float
    deal_count: int

    def to_dict(self) -> dict:
        return {"stage": self.stage, "avgDays": self.avg_days, "dealCount": self.deal_count}


@dataclass
class StageVelocityResult:
    """Per-stage velocity plus the deal-weighted overall average."""
    stages: list[StageVelocity]
    overall_avg_days: float
    total_deals: int

    def to_dict(self) -> dict:
        return {
            "stages": [s.to_dict() for s in self.stages],
            "overallAvgDays": self.overall_avg_days,
            "totalDeals": self.total_deals,
        }


# ---------------------------------------------------------------------------
# 1. compute_stage_analytics
# ---------------------------------------------------------------------------


def compute_stage_analytics(deals: list[Deal]) -> StageAnalyticsResult:
    """Partition deals by stage with each stage's share of the pipeline.

    Every stage value present becomes a bucket, unknown ones included.
    Percentages are rounded independently and may not sum to 100.
    """
    total = len(deals)
    result = StageAnalyticsResult(total_deals=total)

    for stage, stage_deals in _group_by_stage(deals).items():
        count = len(stage_deals)
        percentage = _round_half_up(count / total * 100) if total > 0 else 0
        result.stage_analytics[stage] = StageBucket(
            deals=stage_deals,
            count=count,
            percentage=percentage,
        )

    return result


# ---------------------------------------------------------------------------
# 2. compute_stage_velocity
# ---------------------------------------------------------------------------


def compute_stage_velocity(deals: list[Deal]) -> StageVelocityResult:
    """Average days spent per known stage, in funnel order.

    Stages with no deals are omitted. Deals in unrecognised stages are not
    reported and do not count toward the overall average.
    """
    grouped = _group_by_stage(deals)

    stages: list[StageVelocity] = []
    for stage in STAGE_ORDER:
        stage_deals = grouped.get(stage)
        if not stage_deals:
            continue
        total_days = sum(days_in_stage(d) for d in stage_deals)
        stages.append(StageVelocity(
            stage=stage,
            avg_days=total_days / len(stage_deals),
            deal_count=len(stage_deals),
        ))

    total_deals = sum(s.deal_count for s in stages)
    if total_deals > 0:
        overall = sum(s.avg_days * s.deal_count for s in stages) / total_deals
    else:
        overall = 0.0

    return StageVelocityResult(
        stages=stages,
        overall_avg_days=overall,
        total_deals=total_deals,
    )
