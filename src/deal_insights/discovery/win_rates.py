"""Win-rate analytics by transportation mode and by sales rep.

Only closed deals (closed_won / closed_lost) count. Grouping keys are the
literal field values: "Ocean" and "ocean" are different buckets.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from deal_insights.discovery.deal_record import Deal, Stage


@dataclass
class WinLossStat:
    """Wins, losses and win rate for one bucket."""

    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0

    def to_dict(self) -> dict:
        return {"wins": self.wins, "losses": self.losses, "winRate": self.win_rate}


@dataclass
class WinRateBreakdown:
    """Win rates grouped two ways over the same closed deals."""

    by_transportation_mode: dict[str, WinLossStat] = field(default_factory=dict)
    by_sales_rep: dict[str, WinLossStat] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "byTransportationMode": {
                mode: s.to_dict() for mode, s in self.by_transportation_mode.items()
            },
            "bySalesRep": {rep: s.to_dict() for rep, s in self.by_sales_rep.items()},
        }


@dataclass
class ModeRanking:
    """Best and worst transportation modes by win rate."""

    highest_mode: str
    highest_win_rate: float
    lowest_mode: str
    lowest_win_rate: float
    mode_count: int


def compute_win_rates(deals: list[Deal]) -> WinRateBreakdown:
    """Count wins and losses per transportation mode and per rep."""
    result = WinRateBreakdown()

    for deal in deals:
        if deal.stage == Stage.CLOSED_WON.value:
            won = True
        elif deal.stage == Stage.CLOSED_LOST.value:
            won = False
        else:
            continue

        mode_stat = result.by_transportation_mode.setdefault(
            deal.transportation_mode, WinLossStat()
        )
        rep_stat = result.by_sales_rep.setdefault(deal.sales_rep, WinLossStat())
        for stat in (mode_stat, rep_stat):
            if won:
                stat.wins += 1
            else:
                stat.losses += 1

    for stat in (*result.by_transportation_mode.values(), *result.by_sales_rep.values()):
        total = stat.wins + stat.losses
        stat.win_rate = stat.wins / total if total > 0 else 0.0

    return result


def rank_transportation_modes(breakdown: WinRateBreakdown) -> ModeRanking | None:
    """Pick the highest and lowest win-rate modes; first seen wins ties."""
    modes = breakdown.by_transportation_mode
    if not modes:
        return None

    names = list(modes)
    highest = lowest = names[0]
    for name in names[1:]:
        if modes[name].win_rate > modes[highest].win_rate:
            highest = name
        if modes[name].win_rate < modes[lowest].win_rate:
            lowest = name

    return ModeRanking(
        highest_mode=highest,
        highest_win_rate=modes[highest].win_rate,
        lowest_mode=lowest,
        lowest_win_rate=modes[lowest].win_rate,
        mode_count=len(names),
    )
