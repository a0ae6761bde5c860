from __future__ import annotations

from datetime import date
from typing import Any

import pandas as pd
import pytest

import hindsight.data.yfinance_provider as yfp

_START = date(2023, 1, 1)
_END = date(2023, 2, 1)


def test_fetch_ohlcv_rejects_empty_download(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(yfp.yf, "download", lambda *args, **kwargs: pd.DataFrame())

    class _Ticker:
        def history(self, *args, **kwargs) -> pd.DataFrame:
            return pd.DataFrame()

    monkeypatch.setattr(yfp.yf, "Ticker", lambda *args, **kwargs: _Ticker())
    provider = yfp.YFinanceProvider()

    with pytest.raises(ValueError, match="No data returned"):
        provider.fetch_ohlcv("AAL", _START, _END)


def test_fetch_ohlcv_flattens_multiindex_and_orders_columns(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    index = pd.date_range("2023-01-03", periods=2, freq="D")
    frame = pd.DataFrame(
        {
            ("Close", "AAL"): [13.5, 13.9],
            ("Open", "AAL"): [13.2, 13.6],
            ("High", "AAL"): [14.0, 14.1],
            ("Low", "AAL"): [13.0, 13.4],
            ("Volume", "AAL"): [1_000.0, 1_200.0],
        },
        index=index,
    )
    monkeypatch.setattr(yfp.yf, "download", lambda *args, **kwargs: frame)

    result = yfp.YFinanceProvider().fetch_ohlcv("AAL", _START, _END)

    assert list(result.columns) == ["open", "high", "low", "close", "volume"]
    assert result["open"].tolist() == [13.2, 13.6]


def test_fetch_ohlcv_passes_inclusive_window(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, Any] = {}
    index = pd.date_range("2023-01-03", periods=1, freq="D")
    frame = pd.DataFrame(
        {"Open": [1.0], "High": [1.0], "Low": [1.0], "Close": [1.0], "Volume": [1.0]},
        index=index,
    )

    def _download(symbol: str, **kwargs: Any) -> pd.DataFrame:
        captured["symbol"] = symbol
        captured.update(kwargs)
        return frame

    monkeypatch.setattr(yfp.yf, "download", _download)

    yfp.YFinanceProvider().fetch_ohlcv(" aal ", _START, _END)

    assert captured["symbol"] == "AAL"
    assert captured["start"] == "2023-01-01"
    assert captured["end"] == "2023-02-02"
    assert captured["auto_adjust"] is False


def test_fetch_ohlcv_falls_back_to_ticker_history(monkeypatch: pytest.MonkeyPatch) -> None:
    index = pd.date_range("2023-01-03", periods=1, freq="D")
    history = pd.DataFrame(
        {"Open": [2.0], "High": [2.0], "Low": [2.0], "Close": [2.0], "Volume": [1.0]},
        index=index,
    )
    monkeypatch.setattr(yfp.yf, "download", lambda *args, **kwargs: pd.DataFrame())

    class _Ticker:
        def history(self, *args, **kwargs) -> pd.DataFrame:
            return history

    monkeypatch.setattr(yfp.yf, "Ticker", lambda *args, **kwargs: _Ticker())

    result = yfp.YFinanceProvider().fetch_ohlcv("DAL", _START, _END)

    assert result["open"].tolist() == [2.0]


def test_fetch_ohlcv_rejects_missing_columns(monkeypatch: pytest.MonkeyPatch) -> None:
    index = pd.date_range("2023-01-03", periods=2, freq="D")
    frame = pd.DataFrame({"Open": [100.0, 101.0], "Close": [101.0, 102.0]}, index=index)
    monkeypatch.setattr(yfp.yf, "download", lambda *args, **kwargs: frame)

    with pytest.raises(ValueError, match="Missing expected columns"):
        yfp.YFinanceProvider().fetch_ohlcv("AAL", _START, _END)


def test_fetch_ohlcv_rejects_reversed_window() -> None:
    with pytest.raises(ValueError, match="must not be before start"):
        yfp.YFinanceProvider().fetch_ohlcv("AAL", _END, _START)
