"""
Portfolio session example: catalog, buys, a repricing and a partial sell.

Writes the three snapshot files to a temporary directory (or FOLIO_DATA_DIR
if set) and prints the resulting views and statistics.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from folio_core import FolioConfig
from bookkeeping import holdings_frame, ledger_frame, open_engine


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    data_dir = os.environ.get("FOLIO_DATA_DIR") or tempfile.mkdtemp(prefix="folio-")
    engine = open_engine(FolioConfig(data_dir=Path(data_dir)))

    print("--- Catalog ---")
    for symbol, sector, price in [("AAPL", "TECH", 150.0), ("JPM", "BANKING", 140.0)]:
        result = engine.upsert_instrument(symbol, sector, price)
        print(f"  {symbol}: {result.kind.value} ({'added' if result.created else 'updated'})")

    print("\n--- Trades ---")
    for qty, price in [(10, 150.0), (10, 170.0)]:
        result = engine.buy("AAPL", qty, price)
        h = result.holding
        print(f"  BUY {qty} AAPL @ {price:.2f} -> {h.quantity} @ avg {h.average_cost:.2f}")

    engine.upsert_instrument("AAPL", "TECH", 200.0)
    result = engine.sell("AAPL", 5)
    print(f"  SELL 5 AAPL @ {result.record.price:.2f} -> profit {result.profit:.2f}")

    rejected = engine.sell("AAPL", 100)
    print(f"  SELL 100 AAPL -> {rejected.kind.value}: {rejected.message}")

    print("\n--- Holdings ---")
    print(holdings_frame(engine, sort_by="profit").to_string(index=False))

    print("\n--- Ledger ---")
    print(ledger_frame(engine.ledger).to_string(index=False))

    stats = engine.statistics()
    print("\n--- Statistics ---")
    print(f"Investment:    {stats.total_investment:,.2f}")
    print(f"Current value: {stats.current_value:,.2f}")
    print(f"Net PnL:       {stats.net_pnl:,.2f}")
    if stats.roi_pct is not None:
        print(f"ROI:           {stats.roi_pct:.2f}%")

    engine.save()
    print(f"\nSnapshots written to {data_dir}")


if __name__ == "__main__":
    main()
