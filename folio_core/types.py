"""
Outcome types: what a catalog or portfolio operation returns.

Failures are values, not exceptions: callers inspect `kind` and decide how to
present them. Same shape as an order status (kind + optional message).
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio_core.holding import Holding
    from folio_core.instrument import Instrument
    from folio_core.ledger import TransactionRecord


class ResultKind(Enum):
    """Outcome of a mutating operation."""

    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    INSUFFICIENT_HOLDINGS = "insufficient_holdings"
    FULL = "full"


@dataclass(frozen=True)
class UpsertResult:
    """Result of a catalog upsert. created is False when an existing symbol was overwritten."""

    kind: ResultKind
    instrument: Instrument | None = None
    created: bool = False
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind == ResultKind.OK


@dataclass(frozen=True)
class TradeResult:
    """
    Result of a buy or sell.

    record is the appended ledger entry; holding is the position after the
    trade (None once a sell closes it, with closed=True). profit is set for
    sells only: (current price - average cost) * quantity.
    """

    kind: ResultKind
    record: TransactionRecord | None = None
    holding: Holding | None = None
    profit: float | None = None
    closed: bool = False
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind == ResultKind.OK


# Persisted fields are whitespace-separated with no escaping, so tokens
# carry neither whitespace nor quotes.
MAX_SYMBOL_LEN = 15
MAX_SECTOR_LEN = 19
MAX_TIMESTAMP_LEN = 31
QUOTE_CHAR = "\""


def _is_token(text: object, max_len: int) -> bool:
    return (
        isinstance(text, str)
        and 0 < len(text) <= max_len
        and not any(ch.isspace() or ch == QUOTE_CHAR for ch in text)
    )


def valid_symbol(symbol: object) -> bool:
    return _is_token(symbol, MAX_SYMBOL_LEN)


def valid_sector(sector: object) -> bool:
    return _is_token(sector, MAX_SECTOR_LEN)


def valid_timestamp(timestamp: object) -> bool:
    return _is_token(timestamp, MAX_TIMESTAMP_LEN)


def valid_quantity(quantity: object) -> bool:
    """Positive whole number of units (bool is rejected)."""
    return isinstance(quantity, numbers.Integral) and not isinstance(quantity, bool) and quantity > 0


def valid_price(price: object) -> bool:
    """Positive finite number."""
    if isinstance(price, bool) or not isinstance(price, numbers.Real):
        return False
    return math.isfinite(price) and price > 0
