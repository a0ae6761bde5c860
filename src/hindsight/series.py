from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import date
from pathlib import Path

import numpy as np
import pandas as pd

from hindsight.domain.models import MissingDataPolicy, PriceMatrix, PricePoint
from hindsight.errors import InsufficientDataError, MisalignedDataError, MissingDataError

logger = logging.getLogger(__name__)


def observations_from_frame(frame: pd.DataFrame) -> tuple[PricePoint, ...]:
    """Convert one provider frame into ascending daily opening prices."""
    normalized = frame.rename(columns=str.lower)
    if "open" not in normalized.columns:
        raise ValueError("Missing expected columns: ['open']")

    ordered = normalized.sort_index()
    opens = ordered["open"].to_numpy(dtype=float)
    not_finite = ~np.isfinite(opens)
    if not_finite.any():
        raise ValueError(
            "Opening prices must be finite "
            f"(first bad day {_first_day(ordered.index, not_finite)})"
        )
    not_positive = opens <= 0
    if not_positive.any():
        raise ValueError(
            "Opening prices must be positive "
            f"(first bad day {_first_day(ordered.index, not_positive)})"
        )

    return tuple(
        PricePoint(day=pd.Timestamp(timestamp).date(), price=float(price))
        for timestamp, price in zip(ordered.index, opens, strict=True)
    )


def build_price_matrix(
    symbols: Sequence[str],
    histories: Mapping[str, pd.DataFrame | BaseException | None],
    policy: MissingDataPolicy = MissingDataPolicy.DROP,
) -> PriceMatrix:
    """Build the aligned price matrix, one row per usable instrument.

    Rows follow the order of ``symbols``. An instrument whose fetch failed,
    returned nothing or returned unusable prices is skipped under
    ``MissingDataPolicy.DROP`` and aborts the build under ``FAIL``.
    """
    duplicates = sorted({s for s in symbols if symbols.count(s) > 1})
    if duplicates:
        raise MisalignedDataError(f"Duplicate symbols: {', '.join(duplicates)}")

    kept_symbols: list[str] = []
    rows: list[tuple[PricePoint, ...]] = []

    for symbol in symbols:
        outcome = histories.get(symbol)
        try:
            row = _row_from_outcome(symbol, outcome)
        except MissingDataError as exc:
            if policy is MissingDataPolicy.FAIL:
                raise
            logger.warning("Dropping %s: %s", symbol, exc.reason)
            continue
        kept_symbols.append(symbol)
        rows.append(row)

    if not rows:
        raise InsufficientDataError("No instrument has usable price history")

    matrix = PriceMatrix(symbols=tuple(kept_symbols), rows=tuple(rows))
    logger.debug(
        "Built price matrix with %s instruments over %s days",
        matrix.n_instruments,
        matrix.n_days,
    )
    return matrix


def _row_from_outcome(
    symbol: str,
    outcome: pd.DataFrame | BaseException | None,
) -> tuple[PricePoint, ...]:
    if outcome is None:
        raise MissingDataError(symbol, "not fetched")
    if isinstance(outcome, BaseException):
        raise MissingDataError(symbol, str(outcome) or type(outcome).__name__)
    if outcome.empty:
        raise MissingDataError(symbol, "empty history")
    try:
        return observations_from_frame(outcome)
    except ValueError as exc:
        raise MissingDataError(symbol, str(exc)) from exc


def load_price_matrix_csv(
    path: Path,
    policy: MissingDataPolicy = MissingDataPolicy.DROP,
    symbols: Sequence[str] | None = None,
    start: date | None = None,
    end: date | None = None,
) -> PriceMatrix:
    """Read a grid of opens (date index, one column per symbol) written by ``fetch``.

    ``symbols`` selects and orders columns; a symbol absent from the file is
    handled by ``policy`` like a failed fetch. ``start`` and ``end`` keep
    only the rows inside that inclusive window.
    """
    grid = pd.read_csv(path, index_col=0, parse_dates=True)
    if start is not None:
        grid = grid[grid.index >= pd.Timestamp(start)]
    if end is not None:
        grid = grid[grid.index <= pd.Timestamp(end)]

    columns = {str(column): column for column in grid.columns}
    selected = list(columns) if symbols is None else list(symbols)
    histories: dict[str, pd.DataFrame] = {
        symbol: grid[[columns[symbol]]].dropna().rename(columns={columns[symbol]: "open"})
        for symbol in selected
        if symbol in columns
    }
    return build_price_matrix(selected, histories, policy)


def _first_day(index: pd.Index, mask: np.ndarray) -> date:
    return pd.Timestamp(index[int(np.argmax(mask))]).date()
