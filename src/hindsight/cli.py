from __future__ import annotations

import argparse
import json
import logging
import time
from datetime import date
from pathlib import Path

from hindsight.config import Settings, parse_symbols
from hindsight.data.fetch import fetch_histories_sync
from hindsight.data.yfinance_provider import YFinanceProvider
from hindsight.domain.models import MissingDataPolicy, PriceMatrix
from hindsight.logging_config import configure_logging
from hindsight.planner import plan_trades
from hindsight.series import build_price_matrix, load_price_matrix_csv

logger = logging.getLogger(__name__)


def _add_window_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--tickers",
        default=None,
        help="Comma-separated symbols, e.g. AAL,DAL,UAL",
    )
    parser.add_argument("--start", type=date.fromisoformat, default=None)
    parser.add_argument("--end", type=date.fromisoformat, default=None)
    parser.add_argument("--interval", default=None)
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in MissingDataPolicy],
        default=None,
        help="What to do when an instrument has no usable history",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hindsight CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Download opening prices to CSV")
    _add_window_arguments(fetch)
    fetch.add_argument("--output", default="data/opens.csv")

    plan = subparsers.add_parser("plan", help="Find the best sequence of trades")
    _add_window_arguments(plan)
    plan.add_argument("--input", default=None, help="CSV written by the fetch command")
    plan.add_argument("--initial-capital", type=float, default=None)

    return parser


def _resolve_policy(args: argparse.Namespace, settings: Settings) -> MissingDataPolicy:
    if args.policy is None:
        return settings.missing_data_policy
    return MissingDataPolicy(args.policy)


def _check_symbols(symbols: list[str]) -> list[str]:
    if not symbols:
        raise SystemExit("Provide at least one ticker")
    if len(set(symbols)) != len(symbols):
        raise SystemExit("tickers must be unique")
    return symbols


def _load_matrix(args: argparse.Namespace, settings: Settings) -> PriceMatrix:
    if args.interval:
        raise SystemExit("--interval cannot be combined with --input")
    if args.start and args.end and args.end < args.start:
        raise SystemExit("end must not be before start")
    symbols = _check_symbols(parse_symbols(args.tickers)) if args.tickers else None
    return load_price_matrix_csv(
        Path(args.input),
        _resolve_policy(args, settings),
        symbols=symbols,
        start=args.start,
        end=args.end,
    )


def _fetch_matrix(args: argparse.Namespace, settings: Settings) -> PriceMatrix:
    symbols = _check_symbols(parse_symbols(args.tickers) if args.tickers else settings.symbols)

    start = args.start or settings.start
    end = args.end or settings.end
    if end < start:
        raise SystemExit("end must not be before start")
    interval = args.interval or settings.interval

    fetch_started = time.perf_counter()
    histories = fetch_histories_sync(YFinanceProvider(), symbols, start, end, interval)
    logger.info(
        "Fetched %s histories in %.0f ms",
        len(symbols),
        (time.perf_counter() - fetch_started) * 1_000,
    )
    return build_price_matrix(symbols, histories, _resolve_policy(args, settings))


def _handle_fetch(args: argparse.Namespace, settings: Settings) -> int:
    matrix = _fetch_matrix(args, settings)
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    matrix.to_frame().to_csv(output)
    logger.info(
        "Saved %s days for %s instruments to %s",
        matrix.n_days,
        matrix.n_instruments,
        output,
    )
    return 0


def _handle_plan(args: argparse.Namespace, settings: Settings) -> int:
    if args.input:
        matrix = _load_matrix(args, settings)
    else:
        matrix = _fetch_matrix(args, settings)

    initial_capital = (
        settings.initial_capital if args.initial_capital is None else args.initial_capital
    )
    if initial_capital <= 0:
        raise SystemExit("initial-capital must be greater than zero")

    compute_started = time.perf_counter()
    result = plan_trades(matrix)
    logger.info(
        "Best return %.6f computed in %.0f us",
        result.best_return,
        (time.perf_counter() - compute_started) * 1_000_000,
    )
    if not result.actions:
        logger.info("No profitable trade found")

    payload = {
        "tickers": list(matrix.symbols),
        "days": matrix.n_days,
        "best_return": result.best_return,
        "final_value": round(result.final_value(initial_capital), 2),
        "transactions": result.records(),
    }
    print(json.dumps(payload, indent=2))
    return 0


def main() -> None:
    settings = Settings()
    configure_logging(settings.log_level)

    parser = _build_parser()
    args = parser.parse_args()

    try:
        if args.command == "fetch":
            raise SystemExit(_handle_fetch(args, settings))
        if args.command == "plan":
            raise SystemExit(_handle_plan(args, settings))
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    raise SystemExit("Unknown command")


if __name__ == "__main__":
    main()
