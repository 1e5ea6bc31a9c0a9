"""
Bookkeeping collaborators on top of folio_core.

Flat-file snapshot store, DataFrame views for display and sorting, and a
session helper that opens an engine from configuration.
"""

from bookkeeping.flatfile import FlatFileStore, read_catalog, read_holdings, read_ledger
from bookkeeping.views import catalog_frame, holdings_frame, ledger_frame
from bookkeeping.session import open_engine

__all__ = [
    "FlatFileStore",
    "read_catalog",
    "read_holdings",
    "read_ledger",
    "catalog_frame",
    "holdings_frame",
    "ledger_frame",
    "open_engine",
]
