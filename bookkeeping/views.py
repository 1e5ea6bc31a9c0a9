"""
Tabular views of the catalog, holdings and ledger as DataFrames.

Unsorted views keep table slot order (ledger: insertion order). Sorted views
break ties on symbol; sector sorts ignore case.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from folio_core.instrument import InstrumentCatalog
from folio_core.ledger import TradeKind, TransactionLedger

if TYPE_CHECKING:
    from folio_core.engine import PortfolioEngine

CATALOG_SORTS = (None, "price", "sector")
HOLDINGS_SORTS = (None, "price", "sector", "profit")

HOLDINGS_VIEW_COLUMNS = [
    "symbol",
    "sector",
    "quantity",
    "average_cost",
    "current_price",
    "profit_per_unit",
    "total_profit",
    "last_acquired",
]


def _sort_key(col: pd.Series) -> pd.Series:
    if col.name == "sector":
        return col.str.lower()
    if col.name == "current_price":
        return col.fillna(0.0)
    return col


def _sorted(df: pd.DataFrame, by: str) -> pd.DataFrame:
    out = df.sort_values([by, "symbol"], key=_sort_key, kind="mergesort")
    return out.reset_index(drop=True)


def catalog_frame(catalog: InstrumentCatalog, sort_by: str | None = None) -> pd.DataFrame:
    """
    Catalog entries as rows (symbol, sector, price).

    sort_by: None (slot order), "price" or "sector".
    """
    if sort_by not in CATALOG_SORTS:
        raise ValueError(f"sort_by must be one of {CATALOG_SORTS}, got {sort_by!r}")
    df = pd.DataFrame(
        [(i.symbol, i.sector, i.price) for i in catalog],
        columns=["symbol", "sector", "price"],
    )
    if sort_by is None or df.empty:
        return df
    return _sorted(df, sort_by)


def holdings_frame(engine: PortfolioEngine, sort_by: str | None = None) -> pd.DataFrame:
    """
    Open positions with current price and profit.

    sort_by: None (slot order), "price" (current price), "sector" or
    "profit" (total profit). Unpriced holdings show NaN for current price and
    zero profit; a price sort ranks them as 0, ahead of priced rows.
    """
    if sort_by not in HOLDINGS_SORTS:
        raise ValueError(f"sort_by must be one of {HOLDINGS_SORTS}, got {sort_by!r}")
    rows = [
        (
            v.holding.symbol,
            v.holding.sector,
            v.holding.quantity,
            v.holding.average_cost,
            v.current_price,
            v.profit_per_unit,
            v.total_profit,
            v.holding.last_acquired,
        )
        for v in engine.valuations()
    ]
    df = pd.DataFrame(rows, columns=HOLDINGS_VIEW_COLUMNS)
    df["current_price"] = df["current_price"].astype(float)
    if sort_by is None or df.empty:
        return df
    column = {"price": "current_price", "sector": "sector", "profit": "total_profit"}[sort_by]
    return _sorted(df, column)


def ledger_frame(ledger: TransactionLedger) -> pd.DataFrame:
    """Ledger records oldest first; type is "BUY" or "SELL"."""
    return pd.DataFrame(
        [
            (r.symbol, "BUY" if r.kind == TradeKind.BUY else "SELL", r.quantity, r.price, r.timestamp)
            for r in ledger
        ],
        columns=["symbol", "type", "quantity", "price", "timestamp"],
    )
