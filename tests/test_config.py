"""
Tests for FolioConfig and open_engine.
"""

from datetime import datetime
from pathlib import Path

from folio_core import FolioConfig
from folio_core.config import DATA_DIR_ENV, LEDGER_CAPACITY_ENV, TABLE_CAPACITY_ENV
from bookkeeping import open_engine


def test_defaults_without_environment():
    cfg = FolioConfig.from_env({})
    assert cfg.data_dir == Path(".")
    assert cfg.table_capacity == 101
    assert cfg.ledger_capacity == 1000
    assert cfg.market_path == Path("market_data.txt")
    assert cfg.holdings_path == Path("user_portfolio.txt")
    assert cfg.ledger_path == Path("transactions.txt")


def test_values_from_environment(tmp_path):
    cfg = FolioConfig.from_env({
        DATA_DIR_ENV: str(tmp_path),
        TABLE_CAPACITY_ENV: "11",
        LEDGER_CAPACITY_ENV: "50",
    })
    assert cfg.data_dir == tmp_path
    assert cfg.table_capacity == 11
    assert cfg.ledger_capacity == 50
    assert cfg.ledger_path == tmp_path / "transactions.txt"


def test_invalid_capacities_fall_back(caplog):
    cfg = FolioConfig.from_env({TABLE_CAPACITY_ENV: "lots", LEDGER_CAPACITY_ENV: "-3"})
    assert cfg.table_capacity == 101
    assert cfg.ledger_capacity == 1000
    assert TABLE_CAPACITY_ENV in caplog.text


def test_from_env_reads_os_environ(monkeypatch, tmp_path):
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
    assert FolioConfig.from_env().data_dir == tmp_path


def test_open_engine_loads_from_data_dir(tmp_path):
    (tmp_path / "market_data.txt").write_text("AAPL TECH 150.0000000000\n")
    (tmp_path / "user_portfolio.txt").write_text("AAPL TECH 10 150.0000000000 2025-11-27_14:05\n")
    cfg = FolioConfig(data_dir=tmp_path, table_capacity=11, ledger_capacity=5)
    engine = open_engine(cfg, clock=lambda: datetime(2025, 11, 28, 9, 0))
    assert engine.catalog.capacity == 11
    assert engine.ledger.capacity == 5
    assert engine.holding("AAPL").quantity == 10
    assert len(engine.ledger) == 0

    engine.sell("AAPL", 10)
    assert (tmp_path / "transactions.txt").read_text() == "AAPL 10 150.0000000000 2025-11-28_09:00 1\n"
