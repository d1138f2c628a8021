"""Pipeline statistics routes."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from deal_insights.action.dependencies import internal_error, utc_now
from deal_insights.db.connection import get_session
from deal_insights.discovery.pipeline_analyzer import compute_stage_analytics, compute_stage_velocity
from deal_insights.discovery.revenue_forecast import forecast_revenue
from deal_insights.discovery.risk_detector import find_at_risk_deals, summarize_at_risk
from deal_insights.discovery.territories import compute_territory_analytics, summarize_sales_reps
from deal_insights.discovery.win_rates import compute_win_rates
from deal_insights.memory import deal_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/win-rates")
async def get_win_rates(session: AsyncSession = Depends(get_session)):
    """Win/loss counts and win rate by transportation mode and by sales rep."""
    try:
        deals = await deal_store.fetch_all_deals(session)
        return compute_win_rates(deals).to_dict()
    except Exception:
        logger.exception("Error calculating win rates")
        return internal_error()


@router.get("/territories")
async def get_territories(session: AsyncSession = Depends(get_session)):
    """Per-territory win/loss, won value and rep breakdown."""
    try:
        deals = await deal_store.fetch_all_deals(session)
        territories = compute_territory_analytics(deals)
        return {name: stats.to_dict() for name, stats in territories.items()}
    except Exception:
        logger.exception("Error calculating territory statistics")
        return internal_error()


@router.get("/sales-reps")
async def get_sales_reps(
    territory: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
):
    """Rep results merged across territories, optionally for one territory."""
    try:
        deals = await deal_store.fetch_all_deals(session)
        reps = summarize_sales_reps(compute_territory_analytics(deals), territory=territory)
        return {"territory": territory, "salesReps": [r.to_dict() for r in reps]}
    except Exception:
        logger.exception("Error calculating sales rep performance")
        return internal_error()


@router.get("/stages")
async def get_stages(session: AsyncSession = Depends(get_session)):
    """Deal counts and share of pipeline per stage."""
    try:
        deals = await deal_store.fetch_all_deals(session)
        return compute_stage_analytics(deals).to_dict()
    except Exception:
        logger.exception("Error calculating stage analytics")
        return internal_error()


@router.get("/forecast")
async def get_forecast(
    as_of: Optional[date] = None,
    session: AsyncSession = Depends(get_session),
):
    """Weighted revenue forecast for the three months after ``as_of`` (default today)."""
    try:
        deals = await deal_store.fetch_all_deals(session)
        return forecast_revenue(deals, as_of or utc_now()).to_dict()
    except Exception:
        logger.exception("Error calculating revenue forecast")
        return internal_error()


@router.get("/velocity")
async def get_velocity(session: AsyncSession = Depends(get_session)):
    """Average days per stage."""
    try:
        deals = await deal_store.fetch_all_deals(session)
        return compute_stage_velocity(deals).to_dict()
    except Exception:
        logger.exception("Error calculating deal velocity")
        return internal_error()


@router.get("/at-risk")
async def get_at_risk(
    threshold_days: Optional[int] = Query(default=None, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """Open deals that have not been updated recently, most stalled first."""
    threshold = threshold_days if threshold_days is not None else settings.stalled_days_threshold
    try:
        deals = await deal_store.fetch_all_deals(session)
        at_risk = find_at_risk_deals(deals, utc_now(), threshold_days=threshold)
        return {
            "thresholdDays": threshold,
            "deals": [d.to_dict() for d in at_risk],
            "summary": summarize_at_risk(at_risk).to_dict(),
        }
    except Exception:
        logger.exception("Error detecting at-risk deals")
        return internal_error()
