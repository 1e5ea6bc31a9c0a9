"""
Portfolio metrics: investment, current value, net PnL, ROI, best/worst performer.

Computed from holding valuations (one per open position, in table slot
order). Holdings without a current price count towards investment only.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from folio_core.holding import Holding


@dataclass(frozen=True)
class HoldingValuation:
    """A holding paired with its current catalog price (None if no longer priced)."""

    holding: Holding
    current_price: float | None

    @property
    def investment(self) -> float:
        return self.holding.investment

    @property
    def current_value(self) -> float:
        if self.current_price is None:
            return 0.0
        return self.current_price * self.holding.quantity

    @property
    def profit_per_unit(self) -> float:
        if self.current_price is None:
            return 0.0
        return self.current_price - self.holding.average_cost

    @property
    def total_profit(self) -> float:
        return self.profit_per_unit * self.holding.quantity


@dataclass(frozen=True)
class Performer:
    symbol: str
    profit: float


@dataclass
class PortfolioStats:
    """Aggregate portfolio figures. roi is a fraction; None when nothing is invested."""

    holdings_count: int
    total_investment: float
    current_value: float
    net_pnl: float
    roi: float | None
    best: Performer | None
    worst: Performer | None

    @property
    def roi_pct(self) -> float | None:
        return None if self.roi is None else self.roi * 100.0


def compute_portfolio_stats(valuations: Sequence[HoldingValuation]) -> PortfolioStats:
    """
    Aggregate valuations.

    Parameters
    ----------
    valuations : sequence of HoldingValuation
        Open positions in table slot order.

    Returns
    -------
    PortfolioStats
        Best/worst are chosen among priced holdings by signed total profit;
        ties go to the first one in slot order.
    """
    if not valuations:
        return PortfolioStats(
            holdings_count=0,
            total_investment=0.0,
            current_value=0.0,
            net_pnl=0.0,
            roi=None,
            best=None,
            worst=None,
        )

    investment = np.array([v.investment for v in valuations], dtype=float)
    priced = [v for v in valuations if v.current_price is not None]
    value = np.array([v.current_value for v in priced], dtype=float)
    profit = value - np.array([v.investment for v in priced], dtype=float)

    total_investment = float(np.sum(investment))
    current_value = float(np.sum(value))
    net_pnl = current_value - total_investment
    roi = net_pnl / total_investment if total_investment != 0 else None

    best = worst = None
    if priced:
        # argmax/argmin return the first occurrence, i.e. the earliest slot.
        hi = int(np.argmax(profit))
        lo = int(np.argmin(profit))
        best = Performer(priced[hi].holding.symbol, float(profit[hi]))
        worst = Performer(priced[lo].holding.symbol, float(profit[lo]))

    return PortfolioStats(
        holdings_count=len(valuations),
        total_investment=total_investment,
        current_value=current_value,
        net_pnl=net_pnl,
        roi=roi,
        best=best,
        worst=worst,
    )
