"""
Runtime configuration from environment variables.

FOLIO_DATA_DIR: directory holding the three snapshot files (default: cwd).
FOLIO_TABLE_CAPACITY / FOLIO_LEDGER_CAPACITY: store sizes. Invalid values
are logged and replaced by the defaults.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from folio_core.ledger import MAX_TRANSACTIONS
from folio_core.table import TABLE_SIZE

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "FOLIO_DATA_DIR"
TABLE_CAPACITY_ENV = "FOLIO_TABLE_CAPACITY"
LEDGER_CAPACITY_ENV = "FOLIO_LEDGER_CAPACITY"

MARKET_FILE = "market_data.txt"
HOLDINGS_FILE = "user_portfolio.txt"
LEDGER_FILE = "transactions.txt"


def _positive_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer; using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive; using %s", name, raw, default)
        return default
    return value


@dataclass(frozen=True)
class FolioConfig:
    """Where snapshots live and how large the stores are."""

    data_dir: Path = Path(".")
    table_capacity: int = TABLE_SIZE
    ledger_capacity: int = MAX_TRANSACTIONS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> FolioConfig:
        env = os.environ if environ is None else environ
        return cls(
            data_dir=Path(env.get(DATA_DIR_ENV, "") or "."),
            table_capacity=_positive_int(env, TABLE_CAPACITY_ENV, TABLE_SIZE),
            ledger_capacity=_positive_int(env, LEDGER_CAPACITY_ENV, MAX_TRANSACTIONS),
        )

    @property
    def market_path(self) -> Path:
        return self.data_dir / MARKET_FILE

    @property
    def holdings_path(self) -> Path:
        return self.data_dir / HOLDINGS_FILE

    @property
    def ledger_path(self) -> Path:
        return self.data_dir / LEDGER_FILE
