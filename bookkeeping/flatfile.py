"""
Flat-file snapshot store: one record per line, whitespace-separated fields.

Catalog:  SYMBOL SECTOR PRICE
Holdings: SYMBOL SECTOR QUANTITY AVG_COST LAST_DATE
Ledger:   SYMBOL QUANTITY PRICE DATE TYPE   (TYPE 0 = buy, 1 = sell)

Reals are written with 10 fractional digits. Fields are not escaped, so
values must not contain whitespace or quotes (the core rejects such
identifiers, and loading skips lines that carry them).
Loading skips malformed lines; a missing file is an empty store.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import pandas as pd

from folio_core.holding import Holding, HoldingsBook
from folio_core.instrument import Instrument, InstrumentCatalog
from folio_core.ledger import TradeKind, TransactionLedger, TransactionRecord
from folio_core.storage import PersistenceError, SnapshotStore
from folio_core.types import QUOTE_CHAR

logger = logging.getLogger(__name__)

CATALOG_COLUMNS = ("symbol", "sector", "price")
HOLDINGS_COLUMNS = ("symbol", "sector", "quantity", "average_cost", "last_acquired")
LEDGER_COLUMNS = ("symbol", "quantity", "price", "timestamp", "kind")

FLOAT_FORMAT = "%.10f"


def _read_fields(path: str | Path, columns: tuple[str, ...]) -> pd.DataFrame:
    """
    Split each line on whitespace and keep lines with exactly len(columns)
    fields. All values are strings; typing is up to the caller.
    """
    path = Path(path)
    if not path.exists():
        return pd.DataFrame(columns=list(columns), dtype=object)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s; starting empty", path, e)
        return pd.DataFrame(columns=list(columns), dtype=object)
    rows = []
    skipped = 0
    for line in text.splitlines():
        fields = line.split()
        if not fields:
            continue
        if len(fields) != len(columns) or QUOTE_CHAR in line:
            skipped += 1
            continue
        rows.append(fields)
    if skipped:
        logger.warning("Skipped %d malformed line(s) in %s", skipped, path)
    return pd.DataFrame(rows, columns=list(columns), dtype=object)


def _numeric(df: pd.DataFrame, column: str) -> pd.Series:
    return pd.to_numeric(df[column], errors="coerce")


def _keep_valid(df: pd.DataFrame, mask: pd.Series, path: str | Path) -> pd.DataFrame:
    dropped = int((~mask).sum())
    if dropped:
        logger.warning("Skipped %d line(s) with invalid values in %s", dropped, path)
    return df[mask]


def read_catalog(path: str | Path) -> list[Instrument]:
    """Load catalog records. Prices must be positive numbers."""
    df = _read_fields(path, CATALOG_COLUMNS)
    if df.empty:
        return []
    price = _numeric(df, "price")
    df = df.assign(price=price)
    df = _keep_valid(df, price.notna() & (price > 0) & (price < math.inf), path)
    return [
        Instrument(symbol=row.symbol, sector=row.sector, price=float(row.price))
        for row in df.itertuples(index=False)
    ]


def read_holdings(path: str | Path) -> list[Holding]:
    """Load holdings records. Quantity must be a positive integer, average cost positive."""
    df = _read_fields(path, HOLDINGS_COLUMNS)
    if df.empty:
        return []
    quantity = _numeric(df, "quantity")
    cost = _numeric(df, "average_cost")
    df = df.assign(quantity=quantity, average_cost=cost)
    mask = quantity.notna() & (quantity > 0) & (quantity % 1 == 0) & cost.notna() & (cost > 0) & (cost < math.inf)
    df = _keep_valid(df, mask, path)
    return [
        Holding(
            symbol=row.symbol,
            sector=row.sector,
            quantity=int(row.quantity),
            average_cost=float(row.average_cost),
            last_acquired=row.last_acquired,
        )
        for row in df.itertuples(index=False)
    ]


def read_ledger(path: str | Path) -> list[TransactionRecord]:
    """Load ledger records in file order. TYPE must be 0 or 1."""
    df = _read_fields(path, LEDGER_COLUMNS)
    if df.empty:
        return []
    quantity = _numeric(df, "quantity")
    price = _numeric(df, "price")
    kind = _numeric(df, "kind")
    df = df.assign(quantity=quantity, price=price, kind=kind)
    codes = [k.value for k in TradeKind]
    mask = (
        quantity.notna() & (quantity > 0) & (quantity % 1 == 0)
        & price.notna() & (price > 0) & (price < math.inf)
        & kind.isin(codes)
    )
    df = _keep_valid(df, mask, path)
    return [
        TransactionRecord(
            symbol=row.symbol,
            quantity=int(row.quantity),
            price=float(row.price),
            timestamp=row.timestamp,
            kind=TradeKind(int(row.kind)),
        )
        for row in df.itertuples(index=False)
    ]


def _write_frame(path: str | Path, df: pd.DataFrame) -> None:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, sep=" ", header=False, index=False, float_format=FLOAT_FORMAT, lineterminator="\n")
    except OSError as e:
        raise PersistenceError(f"Could not write {path}: {e}") from e
    logger.debug("Wrote %d record(s) to %s", len(df), path)


def write_catalog(path: str | Path, catalog: InstrumentCatalog) -> None:
    """Rewrite the catalog file with every entry, in slot order."""
    df = pd.DataFrame(
        [(i.symbol, i.sector, i.price) for i in catalog],
        columns=list(CATALOG_COLUMNS),
    )
    _write_frame(path, df.astype({"price": float}))


def write_holdings(path: str | Path, holdings: HoldingsBook) -> None:
    """Rewrite the holdings file with every open position, in slot order."""
    df = pd.DataFrame(
        [(h.symbol, h.sector, h.quantity, h.average_cost, h.last_acquired) for h in holdings],
        columns=list(HOLDINGS_COLUMNS),
    )
    _write_frame(path, df.astype({"quantity": int, "average_cost": float}))


def write_ledger(path: str | Path, ledger: TransactionLedger) -> None:
    """Rewrite the ledger file, oldest record first."""
    df = pd.DataFrame(
        [(r.symbol, r.quantity, r.price, r.timestamp, r.kind.value) for r in ledger],
        columns=list(LEDGER_COLUMNS),
    )
    _write_frame(path, df.astype({"quantity": int, "price": float, "kind": int}))


class FlatFileStore(SnapshotStore):
    """SnapshotStore over three text files."""

    def __init__(
        self,
        market_path: str | Path,
        holdings_path: str | Path,
        ledger_path: str | Path,
    ) -> None:
        self.market_path = Path(market_path)
        self.holdings_path = Path(holdings_path)
        self.ledger_path = Path(ledger_path)

    def load_catalog(self) -> list[Instrument]:
        return read_catalog(self.market_path)

    def load_holdings(self) -> list[Holding]:
        return read_holdings(self.holdings_path)

    def load_ledger(self) -> list[TransactionRecord]:
        return read_ledger(self.ledger_path)

    def save_catalog(self, catalog: InstrumentCatalog) -> None:
        write_catalog(self.market_path, catalog)

    def save_holdings(self, holdings: HoldingsBook) -> None:
        write_holdings(self.holdings_path, holdings)

    def save_ledger(self, ledger: TransactionLedger) -> None:
        write_ledger(self.ledger_path, ledger)
