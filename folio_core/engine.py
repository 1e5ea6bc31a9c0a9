"""
Portfolio engine: buy/sell against the catalog, holdings book and ledger.

Owns one InstrumentCatalog, HoldingsBook and TransactionLedger. Each trade is
validated against the catalog, appended to the ledger, then applied to the
holdings; the affected stores are snapshotted right after. There is no
cross-store transaction: a failed snapshot leaves memory ahead of disk.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from folio_core.holding import Holding, HoldingsBook
from folio_core.instrument import InstrumentCatalog
from folio_core.ledger import MAX_TRANSACTIONS, TradeKind, TransactionLedger, TransactionRecord, format_timestamp
from folio_core.metrics import HoldingValuation, PortfolioStats, compute_portfolio_stats
from folio_core.storage import SnapshotStore
from folio_core.table import TABLE_SIZE, normalize_key
from folio_core.types import (
    ResultKind,
    TradeResult,
    UpsertResult,
    valid_price,
    valid_quantity,
    valid_symbol,
    valid_timestamp,
)

logger = logging.getLogger(__name__)

# Passing this instead of a timestamp asks for the clock time.
NOW = "now"


class PortfolioEngine:
    """
    Single-user portfolio over a reference catalog.

    Weighted-average cost basis: a buy merges into the existing position as
    (old_avg * old_qty + price * qty) / (old_qty + qty); a sell leaves the
    average unchanged and closes the position when the quantity hits zero.
    Failures come back as TradeResult / UpsertResult values; only snapshot
    failures raise (PersistenceError).
    """

    def __init__(
        self,
        *,
        store: SnapshotStore | None = None,
        table_capacity: int = TABLE_SIZE,
        ledger_capacity: int = MAX_TRANSACTIONS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.catalog = InstrumentCatalog(table_capacity)
        self.holdings = HoldingsBook(table_capacity)
        self.ledger = TransactionLedger(ledger_capacity)
        self.store = store
        self._clock = clock or datetime.now

    # --- persistence ---

    def load(self) -> None:
        """Replace all three stores with what the snapshot store holds."""
        if self.store is None:
            return
        self.catalog.restore(self.store.load_catalog())
        self.holdings.restore(self.store.load_holdings())
        self.ledger.restore(self.store.load_ledger())

    def save(self) -> None:
        """Snapshot all three stores (e.g. at shutdown)."""
        if self.store is None:
            return
        self.store.save_catalog(self.catalog)
        self.store.save_holdings(self.holdings)
        self.store.save_ledger(self.ledger)

    def _save_trade_stores(self) -> None:
        if self.store is None:
            return
        self.store.save_holdings(self.holdings)
        self.store.save_ledger(self.ledger)

    def _resolve_timestamp(self, timestamp: str | None) -> str | None:
        if timestamp is None or timestamp == NOW:
            return format_timestamp(self._clock())
        return timestamp if valid_timestamp(timestamp) else None

    def _reject(self, kind: ResultKind, message: str) -> TradeResult:
        logger.info("Trade rejected (%s): %s", kind.value, message)
        return TradeResult(kind, message=message)

    # --- catalog ---

    def upsert_instrument(self, symbol: str, sector: str, price: float) -> UpsertResult:
        """Add or update a catalog entry, then snapshot the catalog."""
        result = self.catalog.upsert(symbol, sector, price)
        if not result.ok:
            logger.info("Catalog update rejected (%s): %s", result.kind.value, result.message)
            return result
        if self.store is not None:
            self.store.save_catalog(self.catalog)
        return result

    # --- trading ---

    def buy(
        self,
        symbol: str,
        quantity: int,
        price: float,
        timestamp: str | None = None,
    ) -> TradeResult:
        """
        Buy quantity units of a catalog symbol at price per unit.

        timestamp: text without whitespace; None or "now" uses the clock.
        NOT_FOUND if the symbol is not in the catalog, INVALID_INPUT for a
        malformed symbol/timestamp or non-positive quantity/price, FULL if
        the holdings table has no slot for a new position.
        """
        if not valid_symbol(symbol):
            return self._reject(ResultKind.INVALID_INPUT, f"Invalid symbol: {symbol!r}")
        instrument = self.catalog.lookup_exact(symbol)
        if instrument is None:
            return self._reject(ResultKind.NOT_FOUND, f"{normalize_key(symbol)} not found in market data")
        if not valid_quantity(quantity):
            return self._reject(ResultKind.INVALID_INPUT, f"Invalid quantity: {quantity!r}")
        quantity = int(quantity)
        if not valid_price(price):
            return self._reject(ResultKind.INVALID_INPUT, f"Invalid price: {price!r}")
        stamp = self._resolve_timestamp(timestamp)
        if stamp is None:
            return self._reject(ResultKind.INVALID_INPUT, f"Invalid timestamp: {timestamp!r}")

        ref = self.holdings.resolve(instrument.symbol)
        if ref.is_full:
            return self._reject(ResultKind.FULL, "Holdings table is full")

        record = TransactionRecord(
            symbol=instrument.symbol,
            quantity=quantity,
            price=float(price),
            timestamp=stamp,
            kind=TradeKind.BUY,
        )
        # Ledger first, then holdings.
        self.ledger.append(record)
        if ref.found:
            old = self.holdings.at(ref)
            new_quantity = old.quantity + quantity
            new_average = (old.average_cost * old.quantity + record.price * quantity) / new_quantity
            holding = Holding(
                symbol=old.symbol,
                sector=old.sector,
                quantity=new_quantity,
                average_cost=new_average,
                last_acquired=stamp,
            )
        else:
            holding = Holding(
                symbol=instrument.symbol,
                sector=instrument.sector,
                quantity=quantity,
                average_cost=record.price,
                last_acquired=stamp,
            )
        self.holdings.put(ref, holding)
        logger.debug(
            "Bought %s %s at %.2f; position %s @ %.4f",
            quantity,
            holding.symbol,
            record.price,
            holding.quantity,
            holding.average_cost,
        )
        self._save_trade_stores()
        return TradeResult(ResultKind.OK, record=record, holding=holding)

    def sell(self, symbol: str, quantity: int, timestamp: str | None = None) -> TradeResult:
        """
        Sell quantity units of an open position at the current catalog price.

        NOT_FOUND if there is no open position or the symbol is no longer
        priced, INVALID_INPUT for a non-positive quantity, INSUFFICIENT_HOLDINGS
        if quantity exceeds the position. profit on the result may be
        positive, negative or zero.
        """
        if not valid_symbol(symbol):
            return self._reject(ResultKind.INVALID_INPUT, f"Invalid symbol: {symbol!r}")
        canonical = normalize_key(symbol)
        ref = self.holdings.resolve(canonical)
        if not ref.found:
            return self._reject(ResultKind.NOT_FOUND, f"No holding in {canonical}")
        if not valid_quantity(quantity):
            return self._reject(ResultKind.INVALID_INPUT, f"Invalid quantity: {quantity!r}")
        quantity = int(quantity)
        held = self.holdings.at(ref)
        if quantity > held.quantity:
            return self._reject(
                ResultKind.INSUFFICIENT_HOLDINGS,
                f"Cannot sell {quantity} {canonical}; holding {held.quantity}",
            )
        instrument = self.catalog.lookup_exact(canonical)
        if instrument is None:
            return self._reject(ResultKind.NOT_FOUND, f"No current market price for {canonical}")
        stamp = self._resolve_timestamp(timestamp)
        if stamp is None:
            return self._reject(ResultKind.INVALID_INPUT, f"Invalid timestamp: {timestamp!r}")

        profit = (instrument.price - held.average_cost) * quantity
        record = TransactionRecord(
            symbol=canonical,
            quantity=quantity,
            price=instrument.price,
            timestamp=stamp,
            kind=TradeKind.SELL,
        )
        self.ledger.append(record)
        remaining = held.quantity - quantity
        if remaining == 0:
            self.holdings.close(ref)
            holding = None
        else:
            holding = Holding(
                symbol=held.symbol,
                sector=held.sector,
                quantity=remaining,
                average_cost=held.average_cost,
                last_acquired=held.last_acquired,
            )
            self.holdings.put(ref, holding)
        logger.debug("Sold %s %s at %.2f; profit %.2f; remaining %s", quantity, canonical, instrument.price, profit, remaining)
        self._save_trade_stores()
        return TradeResult(ResultKind.OK, record=record, holding=holding, profit=profit, closed=holding is None)

    # --- read model ---

    def holding(self, symbol: str) -> Holding | None:
        return self.holdings.lookup_exact(symbol)

    def valuations(self) -> list[HoldingValuation]:
        """Open positions in slot order, each with its current catalog price."""
        out: list[HoldingValuation] = []
        for holding in self.holdings:
            instrument = self.catalog.lookup_exact(holding.symbol)
            out.append(HoldingValuation(holding, instrument.price if instrument is not None else None))
        return out

    def statistics(self) -> PortfolioStats:
        return compute_portfolio_stats(self.valuations())
