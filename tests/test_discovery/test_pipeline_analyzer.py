"""Tests for pipeline analyzer module."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from deal_insights.discovery.deal_record import Deal
from deal_insights.discovery.pipeline_analyzer import (
    StageBucket,
    StageVelocity,
    _round_half_up,
    compute_stage_analytics,
    compute_stage_velocity,
    days_in_stage,
)


# ---------------------------------------------------------------------------
# Helper factories
# ---------------------------------------------------------------------------

_BASE = datetime(2025, 6, 1)


def _make_deal(
    stage: str,
    deal_id: int = 1,
    age_days: float | None = None,
) -> Deal:
    created = _BASE if age_days is not None else None
    updated = _BASE + timedelta(days=age_days) if age_days is not None else None
    return Deal(id=deal_id, stage=stage, created_date=created, updated_date=updated)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestRoundHalfUp:
    def test_half_rounds_up(self):
        assert _round_half_up(12.5) == 13
        assert _round_half_up(2.5) == 3

    def test_below_half(self):
        assert _round_half_up(33.333) == 33


class TestDaysInStage:
    def test_whole_days(self):
        assert days_in_stage(_make_deal("prospect", age_days=10)) == 10

    def test_partial_day_floors(self):
        assert days_in_stage(_make_deal("prospect", age_days=3.9)) == 3

    def test_updated_before_created_clamps(self):
        assert days_in_stage(_make_deal("prospect", age_days=-4)) == 0

    def test_missing_dates(self):
        assert days_in_stage(_make_deal("prospect")) == 0


# ---------------------------------------------------------------------------
# compute_stage_analytics
# ---------------------------------------------------------------------------


class TestComputeStageAnalytics:
    def test_empty(self):
        result = compute_stage_analytics([])
        assert result.total_deals == 0
        assert result.stage_analytics == {}
        assert result.to_dict() == {"totalDeals": 0, "stageAnalytics": {}}

    def test_counts_and_percentages(self):
        deals = [
            _make_deal("prospect", 1),
            _make_deal("prospect", 2),
            _make_deal("proposal", 3),
        ]
        result = compute_stage_analytics(deals)
        assert result.total_deals == 3
        prospect = result.stage_analytics["prospect"]
        assert prospect.count == 2
        assert prospect.percentage == 67
        assert [d.id for d in prospect.deals] == [1, 2]
        assert result.stage_analytics["proposal"].percentage == 33

    def test_unknown_stage_is_its_own_bucket(self):
        result = compute_stage_analytics([_make_deal("on_hold"), _make_deal("prospect", 2)])
        assert set(result.stage_analytics) == {"on_hold", "prospect"}

    def test_prospect_only_bucket(self):
        result = compute_stage_analytics([_make_deal("prospect"), _make_deal("prospect", 2)])
        assert result.stage_analytics["prospect"].count == 2
        assert result.stage_analytics["prospect"].percentage == 100

    def test_independent_rounding(self):
        # 1/8 = 12.5% rounds up for each of the eight stages -> 104 total
        deals = [_make_deal(f"s{i}", i) for i in range(8)]
        result = compute_stage_analytics(deals)
        assert all(b.percentage == 13 for b in result.stage_analytics.values())
        assert sum(b.percentage for b in result.stage_analytics.values()) == 104

    def test_to_dict_includes_deals(self):
        result = compute_stage_analytics([_make_deal("qualified", 5)])
        payload = result.to_dict()
        bucket = payload["stageAnalytics"]["qualified"]
        assert bucket["count"] == 1
        assert bucket["percentage"] == 100
        assert bucket["deals"][0]["id"] == 5

    def test_bucket_type(self):
        result = compute_stage_analytics([_make_deal("qualified")])
        assert isinstance(result.stage_analytics["qualified"], StageBucket)


# ---------------------------------------------------------------------------
# compute_stage_velocity
# ---------------------------------------------------------------------------


class TestComputeStageVelocity:
    def test_empty(self):
        result = compute_stage_velocity([])
        assert result.stages == []
        assert result.overall_avg_days == 0.0
        assert result.total_deals == 0

    def test_fixed_order_and_averages(self):
        deals = [
            _make_deal("negotiation", 1, age_days=30),
            _make_deal("prospect", 2, age_days=4),
            _make_deal("prospect", 3, age_days=6),
            _make_deal("closed_won", 4, age_days=50),
        ]
        result = compute_stage_velocity(deals)
        assert [s.stage for s in result.stages] == ["prospect", "negotiation", "closed_won"]
        assert result.stages[0] == StageVelocity(stage="prospect", avg_days=5.0, deal_count=2)
        assert result.stages[1].avg_days == 30.0
        assert result.total_deals == 4
        # (4 + 6 + 30 + 50) / 4
        assert result.overall_avg_days == pytest.approx(22.5)

    def test_unknown_stage_not_listed(self):
        result = compute_stage_velocity([
            _make_deal("on_hold", 1, age_days=100),
            _make_deal("qualified", 2, age_days=2),
        ])
        assert [s.stage for s in result.stages] == ["qualified"]
        assert result.overall_avg_days == 2.0
        assert result.total_deals == 1

    def test_to_dict(self):
        result = compute_stage_velocity([_make_deal("proposal", age_days=7)])
        assert result.to_dict() == {
            "stages": [{"stage": "proposal", "avgDays": 7.0, "dealCount": 1}],
            "overallAvgDays": 7.0,
            "totalDeals": 1,
        }

    def test_idempotent(self):
        deals = [_make_deal("proposal", 1, age_days=7), _make_deal("qualified", 2, age_days=1)]
        assert compute_stage_velocity(deals) == compute_stage_velocity(deals)
