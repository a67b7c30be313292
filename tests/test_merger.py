"""Record merger tests - union of strikes, zero fill, duplicates, errors."""
import pytest

from chain.merger import build_strike_lookup, merge
from chain.records import OptionRecord
from core.exceptions import ChainError, EmptyInputError, NoStrikesError
from tests.conftest import make_records


class TestMerge:
    """Merging call and put records into one strike table."""

    def test_union_of_strikes_sorted(self, sample_chain):
        calls, puts = sample_chain

        rows = merge(calls, puts)
        strikes = [row.strike for row in rows]

        expected = {r.strike for r in calls} | {r.strike for r in puts}
        assert set(strikes) == expected
        assert len(strikes) == len(expected)
        assert strikes == sorted(strikes)

    def test_numeric_not_lexicographic_order(self):
        calls = make_records([(100, 1), (95.5, 1), (1000, 1)])
        puts = make_records([(9, 1)])

        rows = merge(calls, puts)

        assert [row.strike for row in rows] == [9, 95.5, 100, 1000]

    def test_zero_fill_missing_side(self):
        calls = make_records([(100, 10, 7, 3)])
        puts = make_records([(110, 5, 2, -1)])

        call_only, put_only = merge(calls, puts)

        assert call_only.strike == 100
        assert (call_only.call_oi, call_only.call_volume, call_only.call_change) == (10, 7, 3)
        assert (call_only.put_oi, call_only.put_volume, call_only.put_change) == (0, 0, 0)
        assert call_only.has_call and not call_only.has_put

        assert put_only.strike == 110
        assert (put_only.call_oi, put_only.call_volume, put_only.call_change) == (0, 0, 0)
        assert (put_only.put_oi, put_only.put_volume, put_only.put_change) == (5, 2, -1)
        assert put_only.has_put and not put_only.has_call

    def test_overlapping_strike_has_both_sides(self):
        calls = make_records([(100, 10)])
        puts = make_records([(100, 5)])

        rows = merge(calls, puts)

        assert len(rows) == 1
        assert rows[0].call_oi == 10
        assert rows[0].put_oi == 5
        assert rows[0].total_oi == 15

    def test_duplicate_strike_last_write_wins(self):
        calls = make_records([(100, 10), (105, 1), (100, 99)])
        puts = make_records([(100, 5)])

        rows = merge(calls, puts)

        assert [row.strike for row in rows] == [100, 105]
        assert rows[0].call_oi == 99

    def test_empty_calls_raise(self):
        with pytest.raises(EmptyInputError) as exc:
            merge([], make_records([(100, 5)]))
        assert exc.value.side == "call"

    def test_empty_puts_raise(self):
        with pytest.raises(EmptyInputError) as exc:
            merge(make_records([(100, 5)]), [])
        assert exc.value.side == "put"

    def test_records_without_strikes_raise(self):
        calls = [OptionRecord(strike=None, open_interest=3)]
        puts = [OptionRecord(strike=float("nan"), open_interest=4)]

        with pytest.raises(NoStrikesError):
            merge(calls, puts)

    def test_errors_share_base_class(self):
        assert issubclass(EmptyInputError, ChainError)
        assert issubclass(NoStrikesError, ChainError)

    def test_inputs_not_modified(self, sample_chain):
        calls, puts = sample_chain
        before = (list(calls), list(puts))

        merge(calls, puts)

        assert (calls, puts) == before


def test_build_strike_lookup_skips_missing_strikes():
    records = [OptionRecord(strike=None), OptionRecord(strike=50, open_interest=2)]

    lookup = build_strike_lookup(records, side="call")

    assert list(lookup) == [50]
    assert lookup[50].open_interest == 2


def test_build_strike_lookup_skips_infinite_strikes():
    records = [OptionRecord(strike=float("inf"), open_interest=9), OptionRecord(strike=60, open_interest=1)]

    lookup = build_strike_lookup(records, side="put")

    assert list(lookup) == [60]
