"""
Session wiring: configuration → flat-file store → loaded PortfolioEngine.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from folio_core.config import FolioConfig
from folio_core.engine import PortfolioEngine

from bookkeeping.flatfile import FlatFileStore

logger = logging.getLogger(__name__)


def open_engine(
    config: FolioConfig | None = None,
    *,
    clock: Callable[[], datetime] | None = None,
) -> PortfolioEngine:
    """
    Build an engine backed by the configured data directory and load it.

    Parameters
    ----------
    config : FolioConfig, optional
        Paths and capacities. If None, read from the environment.
    clock : callable, optional
        Source of "now" for generated timestamps (default datetime.now).

    Returns
    -------
    PortfolioEngine
        Engine with catalog, holdings and ledger restored from disk; stores
        whose files are missing start empty.
    """
    cfg = config or FolioConfig.from_env()
    store = FlatFileStore(cfg.market_path, cfg.holdings_path, cfg.ledger_path)
    engine = PortfolioEngine(
        store=store,
        table_capacity=cfg.table_capacity,
        ledger_capacity=cfg.ledger_capacity,
        clock=clock,
    )
    engine.load()
    logger.info(
        "Loaded %d instrument(s), %d holding(s), %d transaction(s) from %s",
        len(engine.catalog),
        len(engine.holdings),
        len(engine.ledger),
        cfg.data_dir,
    )
    return engine
