"""Deal list routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from deal_insights.action.dependencies import internal_error
from deal_insights.db.connection import get_session
from deal_insights.discovery.deal_filters import filter_deals, filter_options
from deal_insights.discovery.pipeline_analyzer import compute_stage_analytics
from deal_insights.memory import deal_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/deals", tags=["deals"])


@router.get("")
async def list_deals(
    stage: Optional[str] = None,
    sales_rep: Optional[str] = None,
    transportation_mode: Optional[str] = None,
    territory: Optional[str] = None,
    search: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
):
    """Deals grouped by stage, after optional filters."""
    try:
        deals = await deal_store.fetch_all_deals(session)
        filtered = filter_deals(
            deals,
            stage=stage,
            sales_rep=sales_rep,
            transportation_mode=transportation_mode,
            territory=territory,
            search=search,
        )
        return compute_stage_analytics(filtered).to_dict()
    except Exception:
        logger.exception("Error fetching deals")
        return internal_error()


@router.get("/filters")
async def get_filter_options(session: AsyncSession = Depends(get_session)):
    """Distinct values for each deal filter."""
    try:
        deals = await deal_store.fetch_all_deals(session)
        return filter_options(deals)
    except Exception:
        logger.exception("Error building deal filter options")
        return internal_error()
