from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from hindsight.domain.models import OptimizationResult, PriceMatrix, Side, TradeAction
from hindsight.errors import InsufficientDataError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RawTransaction:
    """One leg of a trade as positions in the price matrix."""

    instrument: int
    day: int


Plan = tuple[float, tuple[RawTransaction, ...]]

_NO_TRADE: Plan = (1.0, ())


def plan_trades(matrix: PriceMatrix) -> OptimizationResult:
    """Find the sequence of non-overlapping trades with the highest compound return.

    ``best[d]`` holds the best plan whose last sale happens on or before day
    ``d``. Sell days are scanned in increasing order, buy days in increasing
    order and instruments in row order; only a strictly larger return
    replaces the current plan, so the first plan found wins ties. A new best
    for sell day ``s`` is written to every slot from ``s`` to the last day.
    """
    if matrix.n_instruments == 0 or matrix.n_days == 0:
        raise InsufficientDataError("Cannot plan trades without instruments and trading days")

    n_days = matrix.n_days
    if n_days < 2:
        return OptimizationResult(best_return=1.0)

    prices = [[point.price for point in row] for row in matrix.rows]
    best: list[Plan] = [_NO_TRADE] * n_days

    for sell_day in range(1, n_days):
        for buy_day in range(sell_day):
            previous_value, previous_chain = best[buy_day - 1] if buy_day > 0 else _NO_TRADE
            for instrument, row in enumerate(prices):
                candidate = previous_value * row[sell_day] / row[buy_day]
                if candidate > best[sell_day][0]:
                    chain = previous_chain + (
                        RawTransaction(instrument=instrument, day=buy_day),
                        RawTransaction(instrument=instrument, day=sell_day),
                    )
                    for day in range(sell_day, n_days):
                        best[day] = (candidate, chain)

    best_return, chain = best[n_days - 1]
    actions = decode_transactions(matrix, chain)
    logger.debug("Best return %.6f over %s trades", best_return, len(actions) // 2)
    return OptimizationResult(best_return=best_return, actions=actions)


def decode_transactions(
    matrix: PriceMatrix,
    chain: Sequence[RawTransaction],
) -> tuple[TradeAction, ...]:
    actions: list[TradeAction] = []
    for buy, sell in zip(chain[0::2], chain[1::2]):
        actions.append(
            TradeAction(
                day=matrix.day(buy.instrument, buy.day),
                side=Side.BUY,
                instrument=matrix.symbol(buy.instrument),
            )
        )
        actions.append(
            TradeAction(
                day=matrix.day(sell.instrument, sell.day),
                side=Side.SELL,
                instrument=matrix.symbol(sell.instrument),
            )
        )
    return tuple(actions)


def encode_actions(
    matrix: PriceMatrix,
    actions: Sequence[TradeAction],
) -> tuple[RawTransaction, ...]:
    """Map actions back to matrix positions; the inverse of ``decode_transactions``."""
    if len(actions) % 2:
        raise ValueError("actions must come in BUY/SELL pairs")

    chain: list[RawTransaction] = []
    for position, action in enumerate(actions):
        expected = Side.BUY if position % 2 == 0 else Side.SELL
        if action.side is not expected:
            raise ValueError(f"Expected {expected} at position {position}, got {action.side}")
        try:
            instrument = matrix.symbols.index(action.instrument)
        except ValueError as exc:
            raise ValueError(f"Unknown instrument {action.instrument}") from exc
        days = [point.day for point in matrix.rows[instrument]]
        try:
            day = days.index(action.day)
        except ValueError as exc:
            raise ValueError(f"{action.instrument} has no price on {action.day}") from exc
        chain.append(RawTransaction(instrument=instrument, day=day))
    return tuple(chain)
