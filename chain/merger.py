"""
Call/Put Record Merger.

Combines call-side and put-side option records into a single
strike-indexed table sorted by strike, zero-filling whichever side
has no record at a given strike.
"""
import math
from typing import Sequence

from chain.records import MergedStrikeRow, OptionRecord
from core.exceptions import EmptyInputError, NoStrikesError
from core.logger import get_logger

logger = get_logger()


def _has_strike(record: OptionRecord) -> bool:
    strike = record.strike
    if strike is None:
        return False
    return math.isfinite(strike)


def build_strike_lookup(
    records: Sequence[OptionRecord],
    side: str = "option"
) -> dict[float, OptionRecord]:
    """
    Index records by strike.

    Duplicate strikes are not an error: the later record in input
    order replaces the earlier one. Records without a strike are
    skipped.

    Args:
        records: Records for one side of the chain
        side: Side name used in log messages

    Returns:
        Dict of strike -> record
    """
    lookup: dict[float, OptionRecord] = {}
    skipped = 0

    for record in records:
        if not _has_strike(record):
            skipped += 1
            continue

        if record.strike in lookup:
            logger.debug(f"Duplicate {side} strike {record.strike}, keeping last record")

        lookup[record.strike] = record

    if skipped:
        logger.warning(f"Skipped {skipped} {side} record(s) without a strike")

    return lookup


def merge(
    call_records: Sequence[OptionRecord],
    put_records: Sequence[OptionRecord]
) -> list[MergedStrikeRow]:
    """
    Merge call and put records into one table ordered by strike.

    Args:
        call_records: Call-side records
        put_records: Put-side records

    Returns:
        One MergedStrikeRow per distinct strike, ascending

    Raises:
        EmptyInputError: Either side has no records
        NoStrikesError: No record on either side carries a strike
    """
    # Both legs are required even if one is economically empty
    if not call_records:
        raise EmptyInputError("call")

    if not put_records:
        raise EmptyInputError("put")

    calls = build_strike_lookup(call_records, side="call")
    puts = build_strike_lookup(put_records, side="put")

    strikes = sorted(set(calls) | set(puts))

    if not strikes:
        raise NoStrikesError()

    rows = []
    for strike in strikes:
        call = calls.get(strike)
        put = puts.get(strike)

        rows.append(MergedStrikeRow(
            strike=strike,
            call_volume=call.volume if call else 0.0,
            call_oi=call.open_interest if call else 0.0,
            call_change=call.change if call else 0.0,
            put_volume=put.volume if put else 0.0,
            put_oi=put.open_interest if put else 0.0,
            put_change=put.change if put else 0.0,
            has_call=call is not None,
            has_put=put is not None,
        ))

    logger.debug(
        f"Merged {len(calls)} call and {len(puts)} put strikes "
        f"into {len(rows)} rows"
    )

    return rows
