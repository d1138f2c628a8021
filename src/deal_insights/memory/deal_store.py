"""Read and write access to stored deals."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from deal_insights.db.models import DealRow
from deal_insights.discovery.deal_record import Deal
from deal_insights.errors import DealRetrievalError

logger = logging.getLogger(__name__)


async def fetch_all_deals(session: AsyncSession) -> list[Deal]:
    """Load every deal, ordered by id.

    Raises:
        DealRetrievalError: the query failed. No partial result is returned.
    """
    try:
        result = await session.execute(select(DealRow).order_by(DealRow.id))
        rows = list(result.scalars().all())
    except Exception as exc:
        logger.exception("Failed to fetch deals")
        await session.rollback()
        raise DealRetrievalError("Failed to fetch deals") from exc
    return [row.to_record() for row in rows]


async def add_deals(session: AsyncSession, records: list[dict]) -> int:
    """Insert deal rows from plain dicts and commit. Returns the count added."""
    rows = [DealRow(**record) for record in records]
    session.add_all(rows)
    try:
        await session.commit()
    except Exception:
        logger.exception("Failed to insert %d deals", len(rows))
        await session.rollback()
        raise
    logger.info("Inserted %d deals", len(rows))
    return len(rows)
