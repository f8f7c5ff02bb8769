from __future__ import annotations

import argparse
import asyncio
import os

from .config import DEFAULT_OPTIONS, HttpConfig, resolve_options
from .frames import build_dataframe, load_queries
from .log import configure_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="overpass_client",
        description="Run a CSV of Overpass queries and save the elements.",
    )
    parser.add_argument("input", help="CSV file with a Query column")
    parser.add_argument("--out", default="data/elements.csv")
    parser.add_argument("--endpoint", default=DEFAULT_OPTIONS.endpoint)
    parser.add_argument("--retries", type=int, default=DEFAULT_OPTIONS.num_retries)
    parser.add_argument(
        "--retry-pause",
        type=int,
        default=DEFAULT_OPTIONS.retry_pause,
        help="milliseconds to wait after a 504",
    )
    parser.add_argument("--concurrency", type=int, default=HttpConfig().concurrency)
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument(
        "--json-logs", action="store_true", help="log as JSON lines"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(verbose=args.verbose, json=args.json_logs)

    queries = load_queries(args.input)
    options = resolve_options(
        endpoint=args.endpoint,
        num_retries=args.retries,
        retry_pause=args.retry_pause,
        verbose=args.verbose,
    )

    df = asyncio.run(
        build_dataframe(queries, options, HttpConfig(concurrency=args.concurrency))
    )

    out_dir = os.path.dirname(args.out)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    df.to_csv(args.out, index=False)

    # Quick peek
    print("elements\n", df.head())


if __name__ == "__main__":
    main()
