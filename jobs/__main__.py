"""Command-line entrypoint for prediction and scoring jobs."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os

from jobs.predict import predict, score_city, top_markets
from pipelines.model import MarketBaseline
from scoring.baselines import MARKET_BASELINES
from scoring.errors import ScoringError
from storage.exports import export_records

logger = logging.getLogger(__name__)


def _format_market(market: MarketBaseline) -> str:
    return (
        f"{market.key}: median=${market.median_home_price:,.0f} "
        f"appreciation={market.appreciation_rate}% strength={market.market_strength} "
        f"inventory={market.inventory_level}mo yield={market.rental_yield}%"
    )


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, default=str))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Market scoring job runner")
    parser.add_argument(
        "--log-level",
        help="Override LOG_LEVEL for this invocation (e.g. DEBUG, INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-markets", help="Show baseline metrics for every tracked market")

    predict_parser = subparsers.add_parser("predict", help="Rank property predictions for a region")
    predict_parser.add_argument("region", nargs="?", help="Free-text region, e.g. 'austin, tx'")
    predict_parser.add_argument("--limit", help="Maximum records (1-500, default 100)")
    predict_parser.add_argument("--timeframe", help="Horizon in months (default 12)")
    predict_parser.add_argument("--sort", help="appreciation, confidence or relevance")
    predict_parser.add_argument(
        "--output", help="Write predictions to a .csv or .parquet file instead of stdout"
    )

    city_parser = subparsers.add_parser("score-city", help="Composite scores for one city")
    city_parser.add_argument("city")
    city_parser.add_argument("state", nargs="?")

    top_parser = subparsers.add_parser("top-markets", help="Rank every tracked market")
    top_parser.add_argument("--limit", default="10")
    top_parser.add_argument("--sort", default="future_score")

    args = parser.parse_args(argv)
    if args.log_level:
        os.environ["LOG_LEVEL"] = args.log_level
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    if args.command == "list-markets":
        for market in MARKET_BASELINES:
            print(_format_market(market))
        return 0

    try:
        if args.command == "predict":
            envelope = asyncio.run(predict(args.region, args.limit, args.timeframe, args.sort))
            if args.output:
                path = export_records(envelope.predictions, args.output)
                logger.info("Wrote %d predictions to %s", len(envelope.predictions), path)
            else:
                _print_json(envelope.model_dump(mode="json"))
            return 0

        if args.command == "score-city":
            report = asyncio.run(score_city(args.city, args.state))
            _print_json(report.model_dump(mode="json"))
            return 0

        if args.command == "top-markets":
            selection = top_markets(args.limit, args.sort)
            for rank, market in enumerate(selection.items, start=1):
                print(f"{rank:>2}. {_format_market(market)} future_score={market.future_value_score}")
            return 0
    except ScoringError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    except ValueError as exc:
        parser.error(str(exc))

    parser.error("Unknown command")
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
