"""
Instrument catalog: reference data (sector, price) for tradable symbols.

Backed by a KeyedTable. Symbols and sectors are stored uppercase; there is no
removal operation, an upsert overwrites in place.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from folio_core.table import TABLE_SIZE, KeyedTable, normalize_key
from folio_core.types import ResultKind, UpsertResult, valid_price, valid_sector, valid_symbol


@dataclass(frozen=True)
class Instrument:
    """A catalog entry. Immutable; an upsert replaces it."""

    symbol: str
    sector: str
    price: float


class PriceFilter(Enum):
    AT_LEAST = ">="
    AT_MOST = "<="


@dataclass(frozen=True)
class CatalogStats:
    """Aggregate view of the catalog. Price fields are None when it is empty."""

    count: int = 0
    mean_price: float | None = None
    min_price: float | None = None
    max_price: float | None = None
    sectors: list[str] = field(default_factory=list)

    @property
    def sector_count(self) -> int:
        return len(self.sectors)


class InstrumentCatalog:
    """Symbol-keyed instrument reference data."""

    def __init__(self, capacity: int = TABLE_SIZE) -> None:
        self._table: KeyedTable[Instrument] = KeyedTable(capacity)

    @property
    def capacity(self) -> int:
        return self._table.capacity

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[Instrument]:
        """Instruments in slot order."""
        return self._table.values()

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._table

    def upsert(self, symbol: str, sector: str, price: float) -> UpsertResult:
        """Add a symbol or overwrite its sector and price."""
        if not valid_symbol(symbol):
            return UpsertResult(ResultKind.INVALID_INPUT, message=f"Invalid symbol: {symbol!r}")
        if not valid_sector(sector):
            return UpsertResult(ResultKind.INVALID_INPUT, message=f"Invalid sector: {sector!r}")
        if not valid_price(price):
            return UpsertResult(ResultKind.INVALID_INPUT, message=f"Invalid price: {price!r}")
        instrument = Instrument(symbol=normalize_key(symbol), sector=sector.upper(), price=float(price))
        ref = self._table.upsert(instrument.symbol, instrument)
        if ref.is_full:
            return UpsertResult(ResultKind.FULL, message="Market table is full")
        return UpsertResult(ResultKind.OK, instrument=instrument, created=not ref.found)

    def lookup_exact(self, symbol: str) -> Instrument | None:
        return self._table.lookup_exact(symbol)

    def prefix_search(self, prefix: str) -> list[Instrument]:
        """Instruments whose symbol starts with prefix (case-insensitive), in slot order."""
        wanted = normalize_key(prefix)
        return [i for i in self._table.values() if i.symbol.startswith(wanted)]

    def filter_by_price(self, op: PriceFilter, threshold: float) -> list[Instrument]:
        if op == PriceFilter.AT_LEAST:
            return [i for i in self._table.values() if i.price >= threshold]
        return [i for i in self._table.values() if i.price <= threshold]

    def filter_by_sector(self, sector: str) -> list[Instrument]:
        wanted = sector.casefold()
        return [i for i in self._table.values() if i.sector.casefold() == wanted]

    def statistics(self) -> CatalogStats:
        """Single pass: count, mean/min/max price, distinct sectors in first-seen order."""
        count = 0
        total = 0.0
        min_price: float | None = None
        max_price: float | None = None
        sectors: list[str] = []
        for instrument in self._table.values():
            count += 1
            total += instrument.price
            if min_price is None or instrument.price < min_price:
                min_price = instrument.price
            if max_price is None or instrument.price > max_price:
                max_price = instrument.price
            # Linear membership check; the table holds at most a few hundred entries.
            if not any(s.casefold() == instrument.sector.casefold() for s in sectors):
                sectors.append(instrument.sector)
        if count == 0:
            return CatalogStats()
        return CatalogStats(
            count=count,
            mean_price=total / count,
            min_price=min_price,
            max_price=max_price,
            sectors=sectors,
        )

    def restore(self, instruments: Iterable[Instrument]) -> int:
        """
        Replace the catalog with loaded records. Symbol and sector are
        uppercased; records that find no free slot are dropped.
        Returns the number of records stored.
        """
        self._table.clear()
        stored = 0
        for instrument in instruments:
            canonical = Instrument(
                symbol=normalize_key(instrument.symbol),
                sector=instrument.sector.upper(),
                price=instrument.price,
            )
            if not self._table.upsert(canonical.symbol, canonical).is_full:
                stored += 1
        return stored
