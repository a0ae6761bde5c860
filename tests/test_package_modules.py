from __future__ import annotations

import logging
import runpy

import hindsight
import hindsight.data as data_mod
import hindsight.domain as domain_mod
from hindsight.errors import HindsightError, InsufficientDataError, MissingDataError
from hindsight.logging_config import configure_logging


def test_top_level_package_exports() -> None:
    assert "Settings" in hindsight.__all__
    assert "plan_trades" in hindsight.__all__
    assert "build_price_matrix" in hindsight.__all__
    assert isinstance(hindsight.__version__, str)


def test_reexport_modules() -> None:
    assert "MarketDataProvider" in data_mod.__all__
    assert "fetch_histories" in data_mod.__all__
    assert "PriceMatrix" in domain_mod.__all__
    assert "TradeAction" in domain_mod.__all__


def test_errors_are_value_errors() -> None:
    assert issubclass(HindsightError, ValueError)
    assert issubclass(InsufficientDataError, HindsightError)
    error = MissingDataError("HA", "empty history")
    assert str(error) == "No usable price history for HA: empty history"


def test_configure_logging_uses_uppercase_level(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def _fake_basic_config(**kwargs) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(logging, "basicConfig", _fake_basic_config)
    configure_logging("debug")
    assert captured["level"] == "DEBUG"


def test_main_module_invokes_cli_main(monkeypatch) -> None:
    called = {"count": 0}

    def _fake_main() -> None:
        called["count"] += 1

    monkeypatch.setattr("hindsight.cli.main", _fake_main)
    runpy.run_module("hindsight.__main__", run_name="__main__")
    assert called["count"] == 1
