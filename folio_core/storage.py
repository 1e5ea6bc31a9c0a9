"""
Snapshot store abstraction.

SnapshotStore ABC: load and save each of the three stores independently.
The flat-file store lives in bookkeeping.flatfile; InMemoryStore (here) keeps
snapshots in memory for tests and embedding.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio_core.holding import Holding, HoldingsBook
    from folio_core.instrument import Instrument, InstrumentCatalog
    from folio_core.ledger import TransactionLedger, TransactionRecord


class PersistenceError(Exception):
    """A snapshot could not be written. In-memory state is already updated."""


class SnapshotStore(ABC):
    """
    Durable storage for the catalog, holdings and ledger.

    Loads return well-typed records only (malformed input is the store's
    problem) and an empty list when nothing was saved yet. Saves rewrite the
    whole store and raise PersistenceError on failure.
    """

    @abstractmethod
    def load_catalog(self) -> list[Instrument]:
        ...

    @abstractmethod
    def load_holdings(self) -> list[Holding]:
        ...

    @abstractmethod
    def load_ledger(self) -> list[TransactionRecord]:
        ...

    @abstractmethod
    def save_catalog(self, catalog: InstrumentCatalog) -> None:
        ...

    @abstractmethod
    def save_holdings(self, holdings: HoldingsBook) -> None:
        ...

    @abstractmethod
    def save_ledger(self, ledger: TransactionLedger) -> None:
        ...


class InMemoryStore(SnapshotStore):
    """Keeps the last snapshot of each store as a list. save_count counts every save call."""

    def __init__(
        self,
        *,
        catalog: list[Instrument] | None = None,
        holdings: list[Holding] | None = None,
        ledger: list[TransactionRecord] | None = None,
    ) -> None:
        self.catalog: list[Instrument] = list(catalog or [])
        self.holdings: list[Holding] = list(holdings or [])
        self.ledger: list[TransactionRecord] = list(ledger or [])
        self.save_count = 0

    def load_catalog(self) -> list[Instrument]:
        return list(self.catalog)

    def load_holdings(self) -> list[Holding]:
        return list(self.holdings)

    def load_ledger(self) -> list[TransactionRecord]:
        return list(self.ledger)

    def save_catalog(self, catalog: InstrumentCatalog) -> None:
        self.catalog = list(catalog)
        self.save_count += 1

    def save_holdings(self, holdings: HoldingsBook) -> None:
        self.holdings = list(holdings)
        self.save_count += 1

    def save_ledger(self, ledger: TransactionLedger) -> None:
        self.ledger = ledger.records()
        self.save_count += 1
