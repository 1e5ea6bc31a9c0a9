"""
Holdings book: the user's open positions, one per symbol.

A slot is Occupied while its quantity is positive; the engine tombstones it
when a sell brings the quantity to zero. Only PortfolioEngine mutates it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from folio_core.table import TABLE_SIZE, KeyedTable, SlotRef, normalize_key


@dataclass(frozen=True)
class Holding:
    """
    Position in one symbol. sector is copied from the catalog at the first
    buy and is not kept in sync afterwards.
    """

    symbol: str
    sector: str
    quantity: int
    average_cost: float
    last_acquired: str

    @property
    def investment(self) -> float:
        """Cost basis of the whole position."""
        return self.average_cost * self.quantity


class HoldingsBook:
    """Symbol-keyed positions backed by a KeyedTable."""

    def __init__(self, capacity: int = TABLE_SIZE) -> None:
        self._table: KeyedTable[Holding] = KeyedTable(capacity)

    @property
    def capacity(self) -> int:
        return self._table.capacity

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[Holding]:
        """Holdings in slot order."""
        return self._table.values()

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._table

    def lookup_exact(self, symbol: str) -> Holding | None:
        return self._table.lookup_exact(symbol)

    def resolve(self, symbol: str) -> SlotRef:
        """Probe once for read or write; see KeyedTable.find_slot."""
        return self._table.find_slot(symbol)

    def at(self, ref: SlotRef) -> Holding:
        """Holding in a slot that resolve() reported as found."""
        if not ref.found:
            raise KeyError("slot does not hold a position")
        return self._table.slot(ref.index).value

    def put(self, ref: SlotRef, holding: Holding) -> None:
        self._table.store(ref, holding.symbol, holding)

    def close(self, ref: SlotRef) -> None:
        """Tombstone a position whose quantity reached zero."""
        self._table.tombstone(ref)

    def restore(self, holdings: Iterable[Holding]) -> int:
        """
        Replace the book with loaded records (symbol uppercased, sector kept
        as saved). Records that find no free slot are dropped.
        """
        self._table.clear()
        stored = 0
        for holding in holdings:
            symbol = normalize_key(holding.symbol)
            ref = self._table.find_slot(symbol)
            if ref.is_full:
                continue
            self._table.store(ref, symbol, Holding(
                symbol=symbol,
                sector=holding.sector,
                quantity=holding.quantity,
                average_cost=holding.average_cost,
                last_acquired=holding.last_acquired,
            ))
            stored += 1
        return stored
