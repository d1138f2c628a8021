"""Seed a small freight pipeline for local dashboards."""

import asyncio
from datetime import datetime, timedelta, timezone

from deal_insights.db.connection import async_session, engine
from deal_insights.memory import deal_store

_NOW = datetime.now(timezone.utc)


def _deal(n: int, company: str, mode: str, stage: str, value: float, probability: int,
          rep: str, origin: str, destination: str, age_days: int, idle_days: int) -> dict:
    return {
        "deal_id": f"D-{n:04d}",
        "company_name": company,
        "contact_name": f"Contact {n}",
        "transportation_mode": mode,
        "stage": stage,
        "value": value,
        "probability": probability,
        "sales_rep": rep,
        "origin_city": origin,
        "destination_city": destination,
        "created_date": _NOW - timedelta(days=age_days),
        "updated_date": _NOW - timedelta(days=idle_days),
        "expected_close_date": _NOW + timedelta(days=30 + n),
    }


SAMPLE_DEALS = [
    _deal(1, "Acme Freight", "ocean", "prospect", 40000, 20, "Dana Ruiz", "Los Angeles, CA", "Chicago, IL", 30, 25),
    _deal(2, "Blue Ridge Supply", "trucking", "qualified", 18000, 40, "Sam Lee", "Denver, CO", "Dallas, TX", 45, 10),
    _deal(3, "Harbor Goods", "air", "proposal", 65000, 55, "Dana Ruiz", "Seattle, WA", "New York, NY", 60, 41),
    _deal(4, "Lakeside Parts", "rail", "negotiation", 90000, 75, "Priya Shah", "Chicago, IL", "Atlanta, GA", 80, 3),
    _deal(5, "Sunbelt Retail", "trucking", "closed_won", 52000, 100, "Sam Lee", "Houston, TX", "Phoenix, AZ", 90, 12),
    _deal(6, "Granite Co", "ocean", "closed_lost", 30000, 0, "Priya Shah", "Boston, MA", "Miami, FL", 70, 65),
    _deal(7, "Pacific Imports", "ocean", "closed_won", 120000, 100, "Dana Ruiz", "Portland, OR", "Honolulu, HI", 120, 5),
    _deal(8, "Island Traders", "air", "qualified", 22000, 35, "Sam Lee", "Honolulu, HI", "Reno, NV", 40, 62),
    _deal(9, "Metro Builders", "intermodal", "proposal", 47000, 50, "Priya Shah", "Atlanta, GA", "Salt Lake City, UT", 33, 22),
]


async def seed() -> None:
    async with async_session() as session:
        added = await deal_store.add_deals(session, SAMPLE_DEALS)
        print(f"[seed] Inserted {added} deals")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
