from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

import pandas as pd

from hindsight.errors import MisalignedDataError


class Side(StrEnum):
    BUY = "BUY"
    SELL = "SELL"


class MissingDataPolicy(StrEnum):
    """What to do with an instrument whose history could not be fetched."""

    DROP = "drop"
    FAIL = "fail"


@dataclass(slots=True, frozen=True)
class PricePoint:
    day: date
    price: float


@dataclass(slots=True, frozen=True)
class PriceMatrix:
    """Opening prices, one row per instrument, aligned by position.

    The k-th entry of every row is taken to be the same trading day; rows are
    not reconciled by date.
    """

    symbols: tuple[str, ...]
    rows: tuple[tuple[PricePoint, ...], ...]

    def __post_init__(self) -> None:
        if len(self.symbols) != len(self.rows):
            raise MisalignedDataError(
                f"Got {len(self.symbols)} symbols for {len(self.rows)} price rows"
            )
        duplicates = sorted({s for s in self.symbols if self.symbols.count(s) > 1})
        if duplicates:
            raise MisalignedDataError(f"Duplicate symbols: {', '.join(duplicates)}")
        lengths = {len(row) for row in self.rows}
        if len(lengths) > 1:
            detail = ", ".join(
                f"{symbol}={len(row)}" for symbol, row in zip(self.symbols, self.rows, strict=True)
            )
            raise MisalignedDataError(f"Price rows have different lengths: {detail}")

    @property
    def n_instruments(self) -> int:
        return len(self.rows)

    @property
    def n_days(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def symbol(self, instrument: int) -> str:
        return self.symbols[instrument]

    def price(self, instrument: int, day: int) -> float:
        return self.rows[instrument][day].price

    def day(self, instrument: int, day: int) -> date:
        return self.rows[instrument][day].day

    def to_frame(self) -> pd.DataFrame:
        """Return the opens as a frame indexed by the first row's days."""
        if not self.rows:
            return pd.DataFrame()
        index = pd.Index([point.day for point in self.rows[0]], name="date")
        data = {
            symbol: [point.price for point in row]
            for symbol, row in zip(self.symbols, self.rows, strict=True)
        }
        return pd.DataFrame(data, index=index)


@dataclass(slots=True, frozen=True)
class TradeAction:
    day: date
    side: Side
    instrument: str

    def to_record(self) -> dict[str, str]:
        return {
            "date": self.day.strftime("%Y-%m-%d"),
            "action": str(self.side),
            "ticker": self.instrument,
        }


@dataclass(slots=True, frozen=True)
class OptimizationResult:
    best_return: float
    actions: tuple[TradeAction, ...] = ()

    @property
    def is_profitable(self) -> bool:
        return self.best_return > 1.0

    def final_value(self, initial_capital: float = 1.0) -> float:
        return initial_capital * self.best_return

    def records(self) -> list[dict[str, str]]:
        return [action.to_record() for action in self.actions]
