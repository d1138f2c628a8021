"""Deal list filtering for the dashboard's filter bar and search box."""

from __future__ import annotations

from deal_insights.discovery.deal_record import Deal
from deal_insights.discovery.territories import OTHER_TERRITORY, extract_state


_SEARCH_FIELDS = (
    "deal_id",
    "company_name",
    "contact_name",
    "origin_city",
    "destination_city",
)


def origin_state_or_other(deal: Deal) -> str:
    """State code of the deal's origin, ``Other`` when it can't be parsed."""
    return extract_state(deal.origin_city) or OTHER_TERRITORY


def _matches_search(deal: Deal, term: str) -> bool:
    for name in _SEARCH_FIELDS:
        value = getattr(deal, name)
        if value and term in value.lower():
            return True
    return False


def filter_deals(
    deals: list[Deal],
    stage: str | None = None,
    sales_rep: str | None = None,
    transportation_mode: str | None = None,
    territory: str | None = None,
    search: str | None = None,
) -> list[Deal]:
    """Apply exact-match filters and a case-insensitive search, keeping order.

    ``territory`` matches the origin state code ("CA"), or ``Other`` for
    deals whose origin has none. Empty strings are treated as no filter.
    """
    term = search.strip().lower() if search else ""
    result = []
    for deal in deals:
        if stage and deal.stage != stage:
            continue
        if sales_rep and deal.sales_rep != sales_rep:
            continue
        if transportation_mode and deal.transportation_mode != transportation_mode:
            continue
        if territory and origin_state_or_other(deal) != territory:
            continue
        if term and not _matches_search(deal, term):
            continue
        result.append(deal)
    return result


def filter_options(deals: list[Deal]) -> dict[str, list[str]]:
    """Distinct values available for each filter, sorted."""
    return {
        "stages": sorted({d.stage for d in deals}),
        "salesReps": sorted({d.sales_rep for d in deals}),
        "transportationModes": sorted({d.transportation_mode for d in deals}),
        "territories": sorted({origin_state_or_other(d) for d in deals}),
    }
