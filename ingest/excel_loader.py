"""
Option Chain Spreadsheet Loader

Reads a workbook with one sheet of calls and one sheet of puts and
maps the source columns onto OptionRecord. This is the only place that
knows the external column names.

Usage:
    calls, puts = load_option_chain("data/chain.xlsx")
    result = calculate_max_pain_from_excel("data/chain.xlsx")
"""
import math
from pathlib import Path
from typing import Optional

import pandas as pd

from analysis.max_pain import DisplayBand, MaxPainResult, calculate_max_pain
from chain.records import OptionRecord
from config import LoaderConfig, get_config
from core.exceptions import ColumnMappingError, DataFileError, MaxPainError, SheetNotFoundError
from core.logger import get_logger, log_with_context

logger = get_logger()


def _to_number(value) -> float:
    """Blank or non-numeric cells count as 0."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def _to_strike(value) -> Optional[float]:
    if value is None:
        return None
    try:
        strike = float(value)
    except (TypeError, ValueError):
        return None
    return strike if math.isfinite(strike) else None


def records_from_frame(
    df: pd.DataFrame,
    loader_config: Optional[LoaderConfig] = None,
    side: str = "option"
) -> list[OptionRecord]:
    """
    Convert one sheet into OptionRecords.

    Args:
        df: Sheet contents, one row per strike
        loader_config: Column names (default: configured)
        side: Side name used in log messages

    Returns:
        Records in sheet order; rows without a usable strike keep
        strike=None and are skipped when the chain is merged

    Raises:
        ColumnMappingError: Strike column missing
    """
    cfg = loader_config or get_config().loader

    if cfg.strike_column not in df.columns:
        raise ColumnMappingError(
            f"{side} sheet has no '{cfg.strike_column}' column "
            f"(columns: {list(df.columns)})"
        )

    for column in (cfg.volume_column, cfg.oi_column, cfg.change_column):
        if column not in df.columns:
            logger.warning(f"{side} sheet has no '{column}' column, using 0")

    records = []
    strikeless = 0

    for row in df.to_dict(orient="records"):
        strike = _to_strike(row.get(cfg.strike_column))
        if strike is None:
            strikeless += 1

        records.append(OptionRecord(
            strike=strike,
            volume=_to_number(row.get(cfg.volume_column)),
            open_interest=_to_number(row.get(cfg.oi_column)),
            change=_to_number(row.get(cfg.change_column)),
        ))

    if strikeless:
        logger.warning(f"{strikeless} {side} row(s) without a usable strike")

    return records


def load_option_chain(
    path: str | Path,
    loader_config: Optional[LoaderConfig] = None
) -> tuple[list[OptionRecord], list[OptionRecord]]:
    """
    Load call and put records from a workbook.

    Args:
        path: .xlsx file with call and put sheets
        loader_config: Sheet and column names (default: configured)

    Returns:
        Tuple of (call_records, put_records)

    Raises:
        DataFileError: File missing or unreadable
        SheetNotFoundError: Call or put sheet missing
        ColumnMappingError: Strike column missing
    """
    cfg = loader_config or get_config().loader
    path = Path(path)

    if not path.exists():
        raise DataFileError(f"Option chain file not found: {path}")

    try:
        sheets = pd.read_excel(path, sheet_name=None, engine="openpyxl")
    except Exception as e:
        raise DataFileError(f"Cannot read option chain file {path}: {e}") from e

    missing = [name for name in (cfg.call_sheet, cfg.put_sheet) if name not in sheets]
    if missing:
        raise SheetNotFoundError(missing, list(sheets))

    calls = records_from_frame(sheets[cfg.call_sheet], cfg, side="call")
    puts = records_from_frame(sheets[cfg.put_sheet], cfg, side="put")

    log_with_context("info", f"Loaded {len(calls)} calls and {len(puts)} puts from {path.name}")

    return calls, puts


def calculate_max_pain_from_excel(
    path: str | Path,
    display_band: Optional[DisplayBand] = None,
    loader_config: Optional[LoaderConfig] = None
) -> MaxPainResult:
    """Load a workbook and calculate max pain from it."""
    try:
        calls, puts = load_option_chain(path, loader_config)
        return calculate_max_pain(calls, puts, display_band=display_band)
    except MaxPainError as e:
        log_with_context("error", f"Error processing {path}: {e}")
        raise
