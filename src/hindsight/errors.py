from __future__ import annotations


class HindsightError(ValueError):
    """Base class for invalid price data reaching the planner."""


class InsufficientDataError(HindsightError):
    """Raised when there are no instruments or no trading days to plan over."""


class MisalignedDataError(HindsightError):
    """Raised when instrument rows do not share the same number of trading days."""


class MissingDataError(HindsightError):
    def __init__(self, symbol: str, reason: str) -> None:
        super().__init__(f"No usable price history for {symbol}: {reason}")
        self.symbol = symbol
        self.reason = reason
