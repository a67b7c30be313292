"""
Option chain record types.

OptionRecord is the canonical per-strike, per-side input shape built
once at the loader boundary. MergedStrikeRow is one line of the merged
call/put table consumed by the max pain evaluator.
"""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OptionRecord:
    """One option series (call or put) at a single strike."""
    strike: float | None
    volume: float = 0.0
    open_interest: float = 0.0
    change: float = 0.0  # Change in open interest


@dataclass(frozen=True)
class MergedStrikeRow:
    """Call and put data side by side for one strike."""
    strike: float
    call_volume: float = 0.0
    call_oi: float = 0.0
    call_change: float = 0.0
    put_volume: float = 0.0
    put_oi: float = 0.0
    put_change: float = 0.0
    has_call: bool = False
    has_put: bool = False

    @property
    def total_oi(self) -> float:
        return self.call_oi + self.put_oi

    def to_dict(self) -> dict[str, Any]:
        """Render in the external column layout."""
        return {
            "Strike": self.strike,
            "Call_Volume": self.call_volume,
            "Call_OI": self.call_oi,
            "Call_Change": self.call_change,
            "Put_Volume": self.put_volume,
            "Put_OI": self.put_oi,
            "Put_Change": self.put_change,
        }
