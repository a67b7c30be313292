"""
Max Pain Evaluator.

Treats every strike in the merged chain as a hypothetical expiry price
and sums the intrinsic value option sellers would owe there. The strike
with the lowest total payout is the max pain strike: the settlement
that hurts option holders the most.

Also derives open interest totals and the display subset of strikes
used for tables and charts.
"""
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Sequence

import numpy as np

from chain.merger import merge
from chain.records import MergedStrikeRow, OptionRecord
from config import get_config
from core.exceptions import (
    ConfigurationError,
    EvaluationCancelledError,
    NoPainPointsError,
)
from core.logger import get_logger


@dataclass(frozen=True)
class DisplayBand:
    """Inclusive strike range kept in the display table."""
    low: float
    high: float

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise ConfigurationError(
                f"Display band low ({self.low}) must not exceed high ({self.high})"
            )

    def contains(self, strike: float) -> bool:
        return self.low <= strike <= self.high

    @classmethod
    def from_config(cls) -> 'DisplayBand':
        band = get_config().display_band
        return cls(low=band.low, high=band.high)


@dataclass(frozen=True)
class PainPoint:
    """Seller payout if the underlying settles at `strike`."""
    strike: float
    pain: float
    call_pain: float = 0.0
    put_pain: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"strike": self.strike, "pain": float(self.pain)}


@dataclass(frozen=True)
class WeightedStrike:
    """Open-interest-weighted mean strike and its components."""
    weighted_strike_sum: float
    total_oi: float
    mean: Optional[float]  # None when there is no open interest


@dataclass(frozen=True)
class MaxPainSummary:
    """Open interest totals over the whole chain."""
    total_call_oi: float
    total_put_oi: float
    total_oi: float
    total_display_strike_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCallOI": self.total_call_oi,
            "totalPutOI": self.total_put_oi,
            "totalOI": self.total_oi,
            "totalDisplayStrikeCount": self.total_display_strike_count,
        }


@dataclass(frozen=True)
class MaxPainResult:
    """Result of a max pain evaluation."""
    max_pain: PainPoint
    pain_points: tuple[PainPoint, ...]
    summary: MaxPainSummary
    display_strikes: tuple[MergedStrikeRow, ...]
    weighted_strike: WeightedStrike

    def to_dict(self) -> dict[str, Any]:
        """Render in the external camelCase layout."""
        return {
            "maxPain": self.max_pain.to_dict(),
            "painPoints": [point.to_dict() for point in self.pain_points],
            "summary": self.summary.to_dict(),
            "displayStrikes": [row.to_dict() for row in self.display_strikes],
        }


def compute_pain_points(
    rows: Sequence[MergedStrikeRow],
    should_cancel: Optional[Callable[[], bool]] = None
) -> list[PainPoint]:
    """
    Pairwise pain scan over sorted rows.

    Calls are in the money strictly below the expiry price and puts
    strictly above it; a series struck exactly at expiry pays nothing.
    Cost is O(n^2) in the number of strikes, which is fine for chains
    of a few hundred strikes. `should_cancel` is polled once per
    candidate expiry.

    Raises:
        EvaluationCancelledError: should_cancel returned True
    """
    pain_points = []
    total = len(rows)

    for evaluated, candidate in enumerate(rows):
        if should_cancel is not None and should_cancel():
            raise EvaluationCancelledError(evaluated, total)

        expiry_price = candidate.strike
        call_pain = 0.0
        put_pain = 0.0

        for row in rows:
            if row.strike < expiry_price:
                call_pain += (expiry_price - row.strike) * row.call_oi

        for row in rows:
            if row.strike > expiry_price:
                put_pain += (row.strike - expiry_price) * row.put_oi

        pain_points.append(PainPoint(
            strike=expiry_price,
            pain=call_pain + put_pain,
            call_pain=call_pain,
            put_pain=put_pain,
        ))

    return pain_points


def compute_pain_points_vectorized(rows: Sequence[MergedStrikeRow]) -> list[PainPoint]:
    """
    Prefix-sum formulation of compute_pain_points, O(n log n).

    For expiry E the call side owes E * sum(call_oi) - sum(strike * call_oi)
    over strikes below E, and the put side owes
    sum(strike * put_oi) - E * sum(put_oi) over strikes above E.
    Agrees with the pairwise scan up to floating point rounding.
    """
    if not rows:
        return []

    ordered = sorted(rows, key=lambda r: r.strike)
    strikes = np.array([r.strike for r in ordered], dtype=float)
    call_oi = np.array([r.call_oi for r in ordered], dtype=float)
    put_oi = np.array([r.put_oi for r in ordered], dtype=float)

    # Leading zero so index i means "sum over the first i strikes"
    cum_call = np.concatenate(([0.0], np.cumsum(call_oi)))
    cum_call_k = np.concatenate(([0.0], np.cumsum(call_oi * strikes)))
    cum_put = np.concatenate(([0.0], np.cumsum(put_oi)))
    cum_put_k = np.concatenate(([0.0], np.cumsum(put_oi * strikes)))

    below = np.searchsorted(strikes, strikes, side="left")
    at_or_below = np.searchsorted(strikes, strikes, side="right")

    call_pain = strikes * cum_call[below] - cum_call_k[below]
    put_pain = (
        (cum_put_k[-1] - cum_put_k[at_or_below])
        - strikes * (cum_put[-1] - cum_put[at_or_below])
    )

    return [
        PainPoint(
            strike=row.strike,
            pain=float(cp + pp),
            call_pain=float(cp),
            put_pain=float(pp),
        )
        for row, cp, pp in zip(ordered, call_pain, put_pain)
    ]


def find_max_pain(pain_points: Sequence[PainPoint]) -> PainPoint:
    """
    Strike with the minimum seller payout.

    Ties go to the first point in the given (ascending strike) order.

    Raises:
        NoPainPointsError: pain_points is empty
    """
    if not pain_points:
        raise NoPainPointsError()

    best = pain_points[0]
    for point in pain_points[1:]:
        if point.pain < best.pain:
            best = point
    return best


def weighted_strike(rows: Sequence[MergedStrikeRow]) -> WeightedStrike:
    """Open-interest-weighted mean strike across both sides."""
    weighted_sum = 0.0
    total_oi = 0.0

    for row in rows:
        oi = row.total_oi
        weighted_sum += row.strike * oi
        total_oi += oi

    mean = weighted_sum / total_oi if total_oi else None
    return WeightedStrike(weighted_strike_sum=weighted_sum, total_oi=total_oi, mean=mean)


class MaxPainEvaluator:
    """
    Evaluates max pain over a merged call/put strike table.

    Stateless apart from the logger, so one instance can serve any
    number of callers.
    """

    def __init__(self) -> None:
        self.logger = get_logger()

    def evaluate(
        self,
        merged_rows: Sequence[MergedStrikeRow],
        display_band: Optional[DisplayBand] = None,
        should_cancel: Optional[Callable[[], bool]] = None
    ) -> MaxPainResult:
        """
        Calculate max pain and open interest statistics.

        Args:
            merged_rows: Output of chain.merger.merge
            display_band: Strike range for display_strikes
                (default: configured band)
            should_cancel: Optional callable polled between strikes

        Returns:
            MaxPainResult

        Raises:
            NoPainPointsError: No rows to evaluate
            EvaluationCancelledError: Cancelled via should_cancel
        """
        band = display_band if display_band is not None else DisplayBand.from_config()
        rows = sorted(merged_rows, key=lambda r: r.strike)

        if not rows:
            raise NoPainPointsError()

        pain_points = compute_pain_points(rows, should_cancel=should_cancel)
        max_pain = find_max_pain(pain_points)

        total_call_oi = sum(row.call_oi for row in rows)
        total_put_oi = sum(row.put_oi for row in rows)
        weighted = weighted_strike(rows)

        if weighted.mean is None:
            self.logger.debug("No open interest, weighted strike undefined")
        else:
            self.logger.debug(
                f"OI-weighted strike: {weighted.mean:.2f} "
                f"({weighted.weighted_strike_sum:.2f} / {weighted.total_oi:.0f})"
            )

        # Only strikes listed on the call side are shown
        display_strikes = tuple(
            row for row in rows if row.has_call and band.contains(row.strike)
        )

        summary = MaxPainSummary(
            total_call_oi=total_call_oi,
            total_put_oi=total_put_oi,
            total_oi=weighted.total_oi,
            total_display_strike_count=len(display_strikes),
        )

        self.logger.info(
            f"Max pain calculated: {max_pain.strike} "
            f"(pain {max_pain.pain:,.2f}, {len(rows)} strikes)"
        )

        return MaxPainResult(
            max_pain=replace(max_pain, pain=float(max_pain.pain)),
            pain_points=tuple(pain_points),
            summary=summary,
            display_strikes=display_strikes,
            weighted_strike=weighted,
        )


# Singleton
_evaluator: MaxPainEvaluator | None = None


def get_max_pain_evaluator() -> MaxPainEvaluator:
    """Get global max pain evaluator instance."""
    global _evaluator
    if _evaluator is None:
        _evaluator = MaxPainEvaluator()
    return _evaluator


def evaluate(
    merged_rows: Sequence[MergedStrikeRow],
    display_band: Optional[DisplayBand] = None,
    should_cancel: Optional[Callable[[], bool]] = None
) -> MaxPainResult:
    """Evaluate max pain with the shared evaluator."""
    return get_max_pain_evaluator().evaluate(
        merged_rows, display_band=display_band, should_cancel=should_cancel
    )


def calculate_max_pain(
    call_records: Sequence[OptionRecord],
    put_records: Sequence[OptionRecord],
    display_band: Optional[DisplayBand] = None
) -> MaxPainResult:
    """Merge call and put records, then evaluate max pain."""
    return evaluate(merge(call_records, put_records), display_band=display_band)
