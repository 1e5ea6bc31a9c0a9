"""
Transaction ledger: bounded, insertion-ordered log of trades.

Records are immutable. When the ledger is full the oldest record is dropped
to admit the new one. Order is append order, never timestamp order.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from folio_core.table import normalize_key

MAX_TRANSACTIONS = 1000

TIMESTAMP_FORMAT = "%Y-%m-%d_%H:%M"


class TradeKind(Enum):
    """Trade direction. Values are the persisted type codes."""

    BUY = 0
    SELL = 1


@dataclass(frozen=True)
class TransactionRecord:
    """
    One trade. price is the buy price for buys and the catalog price at the
    time of sale for sells.
    """

    symbol: str
    quantity: int
    price: float
    timestamp: str
    kind: TradeKind

    @property
    def amount(self) -> float:
        return self.price * self.quantity


def format_timestamp(moment: datetime) -> str:
    """Text timestamp as stored in holdings and ledger records."""
    return moment.strftime(TIMESTAMP_FORMAT)


class TransactionLedger:
    """FIFO-bounded append log."""

    def __init__(self, capacity: int = MAX_TRANSACTIONS) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._records: deque[TransactionRecord] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._records.maxlen

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(self._records)

    def append(self, record: TransactionRecord) -> TransactionRecord | None:
        """Append at the tail. Returns the evicted oldest record when the ledger was full."""
        evicted = self._records[0] if len(self._records) == self.capacity else None
        self._records.append(record)
        return evicted

    def records(self) -> list[TransactionRecord]:
        """Snapshot, oldest first."""
        return list(self._records)

    def for_symbol(self, symbol: str) -> list[TransactionRecord]:
        wanted = normalize_key(symbol)
        return [r for r in self._records if r.symbol == wanted]

    def clear(self) -> None:
        self._records.clear()

    def restore(self, records: Iterable[TransactionRecord]) -> int:
        """Replace contents with loaded records, appended in the given order."""
        self._records.clear()
        for record in records:
            self.append(record)
        return len(self._records)
