"""
folio-core: single-user stock portfolio bookkeeping engine.

Instrument catalog and holdings book on a fixed-size open-addressing table,
bounded transaction ledger, weighted-average cost basis. No UI, no network.
"""

__version__ = "0.1.0"

from folio_core.table import KeyedTable, SlotRef
from folio_core.instrument import CatalogStats, Instrument, InstrumentCatalog, PriceFilter
from folio_core.holding import Holding, HoldingsBook
from folio_core.ledger import TradeKind, TransactionLedger, TransactionRecord
from folio_core.metrics import HoldingValuation, PortfolioStats
from folio_core.types import ResultKind, TradeResult, UpsertResult
from folio_core.storage import InMemoryStore, PersistenceError, SnapshotStore
from folio_core.config import FolioConfig
from folio_core.engine import PortfolioEngine

__all__ = [
    "KeyedTable",
    "SlotRef",
    "Instrument",
    "InstrumentCatalog",
    "PriceFilter",
    "CatalogStats",
    "Holding",
    "HoldingsBook",
    "TradeKind",
    "TransactionLedger",
    "TransactionRecord",
    "HoldingValuation",
    "PortfolioStats",
    "ResultKind",
    "TradeResult",
    "UpsertResult",
    "SnapshotStore",
    "InMemoryStore",
    "PersistenceError",
    "FolioConfig",
    "PortfolioEngine",
]
