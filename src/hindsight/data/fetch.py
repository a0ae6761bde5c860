from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import date

import pandas as pd

from hindsight.data.base import MarketDataProvider

logger = logging.getLogger(__name__)

FetchOutcome = pd.DataFrame | BaseException


async def fetch_histories(
    provider: MarketDataProvider,
    symbols: Sequence[str],
    start: date,
    end: date,
    interval: str = "1d",
) -> dict[str, FetchOutcome]:
    """Fetch every symbol's history concurrently.

    A failed fetch does not cancel the others; its exception is returned in
    place of the frame so the caller can apply its missing-data policy.
    """
    outcomes = await asyncio.gather(
        *(
            asyncio.to_thread(provider.fetch_ohlcv, symbol, start, end, interval)
            for symbol in symbols
        ),
        return_exceptions=True,
    )

    histories: dict[str, FetchOutcome] = {}
    for symbol, outcome in zip(symbols, outcomes, strict=True):
        if isinstance(outcome, Exception):
            logger.warning("Fetching %s failed: %s", symbol, outcome)
        elif isinstance(outcome, BaseException):
            raise outcome
        histories[symbol] = outcome
    return histories


def fetch_histories_sync(
    provider: MarketDataProvider,
    symbols: Sequence[str],
    start: date,
    end: date,
    interval: str = "1d",
) -> dict[str, FetchOutcome]:
    return asyncio.run(fetch_histories(provider, symbols, start, end, interval))
