"""
Max Pain Custom Exceptions

Provides a clear exception hierarchy for better error handling.
Every error here is raised synchronously and is never retried:
it describes bad or incomplete input, not a transient condition.
"""


class MaxPainError(Exception):
    """Base exception for all max pain errors."""
    pass


# ============================================================
# Chain Merge Exceptions
# ============================================================

class ChainError(MaxPainError):
    """Base exception for option chain merge errors."""
    pass


class EmptyInputError(ChainError):
    """Call-side or put-side record collection is empty."""

    def __init__(self, side: str):
        self.side = side
        super().__init__(f"No {side} option records provided")


class NoStrikesError(ChainError):
    """No usable strike found on either side of the chain."""

    def __init__(self, message: str = "No strikes found in option chain"):
        super().__init__(message)


# ============================================================
# Evaluation Exceptions
# ============================================================

class EvaluationError(MaxPainError):
    """Base exception for max pain evaluation errors."""
    pass


class NoPainPointsError(EvaluationError):
    """Merged table yields no rows to evaluate."""

    def __init__(self, message: str = "No valid strike data to calculate max pain"):
        super().__init__(message)


class EvaluationCancelledError(EvaluationError):
    """Evaluation was cancelled by the caller before completion."""

    def __init__(self, evaluated: int, total: int):
        self.evaluated = evaluated
        self.total = total
        super().__init__(
            f"Max pain evaluation cancelled after {evaluated}/{total} strikes"
        )


# ============================================================
# Data Exceptions
# ============================================================

class DataError(MaxPainError):
    """Data-related errors."""
    pass


class DataFileError(DataError):
    """Source file missing or unreadable."""
    pass


class SheetNotFoundError(DataError):
    """Required sheet missing from the workbook."""

    def __init__(self, missing: list[str], available: list[str]):
        self.missing = missing
        self.available = available
        super().__init__(
            f"Workbook must contain sheets {missing!r} "
            f"(found: {available!r})"
        )


class ColumnMappingError(DataError):
    """Required column missing from a sheet."""
    pass


# ============================================================
# Validation Exceptions
# ============================================================

class ValidationError(MaxPainError):
    """Invalid input or configuration."""
    pass


class ConfigurationError(ValidationError):
    """Invalid or missing configuration."""
    pass
