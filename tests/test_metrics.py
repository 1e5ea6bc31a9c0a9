"""
Tests for compute_portfolio_stats.
"""

import pytest

from folio_core.holding import Holding
from folio_core.metrics import HoldingValuation, compute_portfolio_stats


def _make_valuation(symbol, quantity, average_cost, current_price):
    return HoldingValuation(
        holding=Holding(symbol, "TECH", quantity, average_cost, "2025-01-01_10:00"),
        current_price=current_price,
    )


def test_compute_portfolio_stats_basic():
    stats = compute_portfolio_stats([
        _make_valuation("A", 10, 10.0, 12.0),
        _make_valuation("B", 5, 20.0, 18.0),
    ])
    assert stats.holdings_count == 2
    assert stats.total_investment == pytest.approx(200.0)
    assert stats.current_value == pytest.approx(210.0)
    assert stats.net_pnl == pytest.approx(10.0)
    assert stats.roi == pytest.approx(0.05)
    assert stats.roi_pct == pytest.approx(5.0)
    assert stats.best.symbol == "A"
    assert stats.worst.symbol == "B"
    assert stats.worst.profit == pytest.approx(-10.0)


def test_ties_go_to_first_in_slot_order():
    stats = compute_portfolio_stats([
        _make_valuation("FIRST", 1, 10.0, 15.0),
        _make_valuation("SECOND", 1, 10.0, 15.0),
    ])
    assert stats.best.symbol == "FIRST"
    assert stats.worst.symbol == "FIRST"


def test_unpriced_holding_counts_towards_investment_only():
    stats = compute_portfolio_stats([
        _make_valuation("LIVE", 2, 10.0, 11.0),
        _make_valuation("GONE", 3, 5.0, None),
    ])
    assert stats.holdings_count == 2
    assert stats.total_investment == pytest.approx(35.0)
    assert stats.current_value == pytest.approx(22.0)
    assert stats.net_pnl == pytest.approx(-13.0)
    assert stats.best.symbol == "LIVE"
    assert stats.worst.symbol == "LIVE"


def test_all_unpriced_has_no_performers():
    stats = compute_portfolio_stats([_make_valuation("GONE", 1, 5.0, None)])
    assert stats.best is None
    assert stats.worst is None
    assert stats.current_value == 0.0


def test_empty_valuations():
    stats = compute_portfolio_stats([])
    assert stats.holdings_count == 0
    assert stats.total_investment == 0.0
    assert stats.roi is None
    assert stats.roi_pct is None


def test_valuation_properties():
    v = _make_valuation("A", 4, 10.0, 12.5)
    assert v.investment == 40.0
    assert v.current_value == 50.0
    assert v.profit_per_unit == 2.5
    assert v.total_profit == 10.0
