"""
Shared fixtures: sample option chains and workbook writers.
"""
from pathlib import Path
from typing import Callable

import pandas as pd
import pytest

from chain.records import OptionRecord
from config import Config


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch, tmp_path):
    """Re-read configuration per test and keep log files out of the repo."""
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    Config.reset()
    yield
    Config.reset()


def make_records(rows: list[tuple]) -> list[OptionRecord]:
    """Build records from (strike, open_interest[, volume[, change]]) tuples."""
    records = []
    for row in rows:
        strike, oi, *rest = row
        volume = rest[0] if len(rest) > 0 else 0.0
        change = rest[1] if len(rest) > 1 else 0.0
        records.append(OptionRecord(strike=strike, volume=volume, open_interest=oi, change=change))
    return records


@pytest.fixture
def sample_chain() -> tuple[list[OptionRecord], list[OptionRecord]]:
    """Small index-style chain around 3500."""
    calls = make_records([
        (3300, 120, 40, 5),
        (3400, 300, 90, -10),
        (3500, 800, 400, 60),
        (3600, 650, 210, 25),
        (3700, 420, 80, 0),
        (4100, 50, 3, 1),
    ])
    puts = make_records([
        (2900, 70, 5, 2),
        (3300, 500, 150, 30),
        (3400, 700, 260, 45),
        (3500, 900, 380, -20),
        (3600, 250, 70, 5),
    ])
    return calls, puts


CALL_COLUMNS = ["Strike", "Total Volume", "At Close", "Change"]


@pytest.fixture
def write_workbook(tmp_path) -> Callable[..., Path]:
    """Write {sheet_name: DataFrame} to an .xlsx file and return its path."""

    def _write(sheets: dict[str, pd.DataFrame], name: str = "chain.xlsx") -> Path:
        path = tmp_path / name
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, df in sheets.items():
                df.to_excel(writer, sheet_name=sheet_name, index=False)
        return path

    return _write


@pytest.fixture
def chain_workbook(write_workbook) -> Path:
    """Workbook laid out like the exchange export: 'call' and 'put' sheets."""
    calls = pd.DataFrame(
        [
            [3400, 90, 300, -10],
            [3500, 400, 800, 60],
            [3600, 210, 650, 25],
        ],
        columns=CALL_COLUMNS,
    )
    puts = pd.DataFrame(
        [
            [3300, 150, 500, 30],
            [3500, 380, 900, -20],
            [3600, 70, 250, 5],
        ],
        columns=CALL_COLUMNS,
    )
    return write_workbook({"call": calls, "put": puts})
