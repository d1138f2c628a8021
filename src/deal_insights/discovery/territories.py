"""Territory analytics -- state extraction, territory rollups, rep breakdowns.

Pure functions. A deal's territory is derived from the two-letter state
code at the end of its ``origin_city`` ("Los Angeles, CA" -> Pacific).
Anything unparsable or unmapped lands in ``Other``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType

from deal_insights.discovery.deal_record import Deal, Stage


OTHER_TERRITORY = "Other"

# Only the states currently served are mapped.
STATE_TO_TERRITORY = MappingProxyType({
    # Pacific
    "CA": "Pacific",
    "WA": "Pacific",
    "OR": "Pacific",
    # Mountain
    "CO": "Mountain",
    "AZ": "Mountain",
    "NM": "Mountain",
    "UT": "Mountain",
    # Midwest
    "IL": "Midwest",
    "MN": "Midwest",
    "MO": "Midwest",
    # Northeast
    "NY": "Northeast",
    "MA": "Northeast",
    # Southeast
    "FL": "Southeast",
    "GA": "Southeast",
    # Southwest
    "TX": "Southwest",
    "NV": "Southwest",
})

TERRITORIES: tuple[str, ...] = (
    "Pacific",
    "Mountain",
    "Midwest",
    "Northeast",
    "Southeast",
    "Southwest",
    OTHER_TERRITORY,
)

_STATE_SUFFIX = re.compile(r",\s*([A-Z]{2})\Z")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class RepRecord:
    """Win/loss tally for one sales rep inside one territory."""

    wins: int = 0
    losses: int = 0

    def to_dict(self) -> dict:
        return {"wins": self.wins, "losses": self.losses}


@dataclass
class TerritoryStats:
    """Rollup for a single territory."""

    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    total_value: float = 0.0
    rep_breakdown: dict[str, RepRecord] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "wins": self.wins,
            "losses": self.losses,
            "winRate": self.win_rate,
            "totalValue": self.total_value,
            "repBreakdown": {rep: r.to_dict() for rep, r in self.rep_breakdown.items()},
        }


@dataclass
class SalesRepSummary:
    """A rep's results merged across every territory they sell into."""

    name: str
    territories: list[str]
    total_wins: int
    total_losses: int
    win_rate: float

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "territories": list(self.territories),
            "totalWins": self.total_wins,
            "totalLosses": self.total_losses,
            "winRate": self.win_rate,
        }


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


def extract_state(origin_city) -> str | None:
    """Pull the trailing state code out of a "City, ST" string.

    Returns None for empty, missing or malformed input.
    """
    if not origin_city or not isinstance(origin_city, str):
        return None
    match = _STATE_SUFFIX.search(origin_city)
    return match.group(1) if match else None


def resolve_territory(state_code: str | None) -> str:
    """Map a state code to its territory, ``Other`` when unknown or None."""
    if not state_code:
        return OTHER_TERRITORY
    return STATE_TO_TERRITORY.get(state_code, OTHER_TERRITORY)


def territory_for(deal: Deal) -> str:
    return resolve_territory(extract_state(deal.origin_city))


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def _win_rate(wins: int, losses: int) -> float:
    total = wins + losses
    return wins / total if total > 0 else 0.0


def compute_territory_analytics(deals: list[Deal]) -> dict[str, TerritoryStats]:
    """Group deals by territory with win/loss, won value and a per-rep breakdown.

    Every deal registers its territory and its rep, so reps with only open
    deals still show up with zero wins and losses. ``total_value`` counts
    closed-won deals only.
    """
    territories: dict[str, TerritoryStats] = {}

    for deal in deals:
        territory = territory_for(deal)
        stats = territories.setdefault(territory, TerritoryStats())
        rep = stats.rep_breakdown.setdefault(deal.sales_rep, RepRecord())

        if deal.stage == Stage.CLOSED_WON.value:
            stats.wins += 1
            rep.wins += 1
            stats.total_value += deal.value
        elif deal.stage == Stage.CLOSED_LOST.value:
            stats.losses += 1
            rep.losses += 1

    for stats in territories.values():
        stats.win_rate = _win_rate(stats.wins, stats.losses)

    return territories


def summarize_sales_reps(
    territory_stats: dict[str, TerritoryStats],
    territory: str | None = None,
) -> list[SalesRepSummary]:
    """Merge per-territory rep breakdowns into one row per rep.

    Args:
        territory_stats: Output of compute_territory_analytics.
        territory: Restrict the rollup to a single territory.

    Returns:
        Rep summaries sorted by name.
    """
    merged: dict[str, dict] = {}
    for name, stats in territory_stats.items():
        if territory is not None and name != territory:
            continue
        for rep, record in stats.rep_breakdown.items():
            entry = merged.setdefault(rep, {"territories": [], "wins": 0, "losses": 0})
            entry["territories"].append(name)
            entry["wins"] += record.wins
            entry["losses"] += record.losses

    return [
        SalesRepSummary(
            name=rep,
            territories=sorted(entry["territories"]),
            total_wins=entry["wins"],
            total_losses=entry["losses"],
            win_rate=_win_rate(entry["wins"], entry["losses"]),
        )
        for rep, entry in sorted(merged.items())
    ]
