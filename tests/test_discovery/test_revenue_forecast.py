"""Tests for the three-month revenue forecast."""

from datetime import date, datetime

import pytest

from deal_insights.discovery.deal_record import Deal
from deal_insights.discovery.revenue_forecast import (
    DEFAULT_STAGE_WEIGHT,
    STAGE_WEIGHTS,
    forecast_revenue,
    forward_months,
    stage_weight,
    weighted_value,
)


# ---------------------------------------------------------------------------
# Helper factories
# ---------------------------------------------------------------------------


def _make_deal(stage: str, value: float, probability: int, deal_id: int = 1) -> Deal:
    return Deal(id=deal_id, stage=stage, value=value, probability=probability)


_AS_OF = datetime(2025, 6, 16, 9, 30)


# ---------------------------------------------------------------------------
# stage_weight / weighted_value
# ---------------------------------------------------------------------------


class TestStageWeight:
    @pytest.mark.parametrize("stage,weight", [
        ("prospect", 0.1),
        ("qualified", 0.3),
        ("proposal", 0.5),
        ("negotiation", 0.7),
        ("closed_won", 1.0),
        ("closed_lost", 0.0),
    ])
    def test_known_stages(self, stage, weight):
        assert stage_weight(stage) == weight

    def test_case_insensitive(self):
        assert stage_weight("Negotiation") == 0.7
        assert stage_weight("CLOSED_WON") == 1.0

    def test_unknown_stage_uses_neutral_default(self):
        assert stage_weight("on_hold") == DEFAULT_STAGE_WEIGHT == 0.5
        assert stage_weight("") == 0.5

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            STAGE_WEIGHTS["prospect"] = 0.9

    def test_weighted_value(self):
        assert weighted_value(_make_deal("negotiation", 1000, 50)) == pytest.approx(350.0)
        assert weighted_value(_make_deal("closed_lost", 1000, 100)) == 0.0


# ---------------------------------------------------------------------------
# forward_months
# ---------------------------------------------------------------------------


class TestForwardMonths:
    def test_mid_year(self):
        assert forward_months(_AS_OF) == [date(2025, 7, 1), date(2025, 8, 1), date(2025, 9, 1)]

    def test_year_rollover(self):
        assert forward_months(date(2025, 11, 30)) == [
            date(2025, 12, 1), date(2026, 1, 1), date(2026, 2, 1),
        ]


# ---------------------------------------------------------------------------
# forecast_revenue
# ---------------------------------------------------------------------------


class TestForecastRevenue:
    def test_empty_gives_three_zero_months(self):
        result = forecast_revenue([], _AS_OF)
        assert [m.month for m in result.months] == ["July 2025", "August 2025", "September 2025"]
        assert all(m.forecast == 0.0 and m.deal_count == 0 for m in result.months)
        assert result.total_forecast == 0.0

    def test_round_robin_by_position(self):
        deals = [
            _make_deal("closed_won", 100, 100, 1),   # month 0
            _make_deal("prospect", 1000, 50, 2),     # month 1
            _make_deal("negotiation", 200, 50, 3),   # month 2
            _make_deal("proposal", 400, 100, 4),     # month 0
        ]
        result = forecast_revenue(deals, _AS_OF)
        assert [m.deal_count for m in result.months] == [2, 1, 1]
        assert result.months[0].forecast == pytest.approx(100 + 200)
        assert result.months[1].forecast == pytest.approx(50)
        assert result.months[2].forecast == pytest.approx(70)
        assert result.total_forecast == pytest.approx(420)

    def test_ignores_expected_close_date(self):
        deal = Deal(
            id=1, stage="closed_won", value=100, probability=100,
            expected_close_date=datetime(2025, 9, 20),
        )
        result = forecast_revenue([deal], _AS_OF)
        assert result.months[0].deal_count == 1
        assert result.months[2].deal_count == 0

    def test_unknown_stage_counts_at_half(self):
        result = forecast_revenue([_make_deal("on_hold", 1000, 100)], _AS_OF)
        assert result.total_forecast == pytest.approx(500)

    def test_total_is_sum_of_months(self):
        deals = [_make_deal("qualified", 100 * i, 40, i) for i in range(1, 8)]
        result = forecast_revenue(deals, _AS_OF)
        assert result.total_forecast == pytest.approx(sum(m.forecast for m in result.months))

    def test_to_dict(self):
        result = forecast_revenue([_make_deal("closed_won", 10, 100)], date(2025, 12, 5))
        payload = result.to_dict()
        assert payload["months"][0] == {
            "month": "January 2026",
            "monthStart": "2026-01-01",
            "forecast": 10.0,
            "dealCount": 1,
        }
        assert payload["totalForecast"] == 10.0

    def test_idempotent(self):
        deals = [_make_deal("proposal", 300, 60, i) for i in range(5)]
        assert forecast_revenue(deals, _AS_OF) == forecast_revenue(deals, _AS_OF)
