from __future__ import annotations

from datetime import date, timedelta
from typing import Any, cast

import pandas as pd
import yfinance as yf  # type: ignore[import-untyped]

from hindsight.data.base import MarketDataProvider


class YFinanceProvider(MarketDataProvider):
    def _download(self, symbol: str, start: date, end: date, interval: str) -> pd.DataFrame:
        # yfinance treats end as exclusive.
        end_exclusive = end + timedelta(days=1)
        frame = cast(
            pd.DataFrame,
            yf.download(
                symbol,
                start=start.isoformat(),
                end=end_exclusive.isoformat(),
                interval=interval,
                progress=False,
                auto_adjust=False,
                threads=False,
            ),
        )
        if frame is not None and not frame.empty:
            return frame

        ticker = yf.Ticker(symbol)
        return cast(
            pd.DataFrame,
            ticker.history(
                start=start.isoformat(),
                end=end_exclusive.isoformat(),
                interval=interval,
                auto_adjust=False,
            ),
        )

    def fetch_ohlcv(
        self,
        symbol: str,
        start: date,
        end: date,
        interval: str = "1d",
    ) -> pd.DataFrame:
        if end < start:
            raise ValueError(f"end ({end}) must not be before start ({start})")

        normalized_symbol = symbol.strip().upper()
        frame = self._download(normalized_symbol, start=start, end=end, interval=interval)
        if frame.empty:
            raise ValueError(
                "No data returned for "
                f"symbol={normalized_symbol} start={start} end={end} interval={interval}"
            )

        if isinstance(frame.columns, pd.MultiIndex):
            frame.columns = frame.columns.get_level_values(0)

        normalized = frame.rename(columns=str.lower)
        ordered_columns = ["open", "high", "low", "close", "volume"]
        expected = set(ordered_columns)
        missing = expected.difference(normalized.columns)
        if missing:
            raise ValueError(f"Missing expected columns: {sorted(missing)}")

        result: Any = normalized[ordered_columns].sort_index()
        return cast(pd.DataFrame, result)
