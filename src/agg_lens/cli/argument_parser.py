"""Argument parser construction for all CLI subcommands."""

from __future__ import annotations

import argparse
import os
from datetime import date

from agg_lens.cli.command_handlers import handle_add_order, handle_aggregate, handle_search, handle_seed
from agg_lens.cli.common_runtime import _DEFAULT_BACKEND_URL, _DEFAULT_INDEX, default_log_level, env_bool, env_int
from agg_lens.domain import BackendName, CalendarInterval, CommandName, ReportName, SearchName


def add_shared_runtime_flags(subparser: argparse.ArgumentParser) -> None:
    """Add common runtime flags shared by subcommands."""
    subparser.add_argument(
        "--proxy-url",
        default=os.getenv("AGG_LENS_PROXY_URL"),
        help="Optional HTTP/HTTPS proxy URL for backend calls.",
    )
    subparser.add_argument(
        "--backend",
        default=os.getenv("AGG_LENS_BACKEND", BackendName.ELASTICSEARCH.value),
        choices=[backend.value for backend in BackendName],
        help="Search backend holding the orders index.",
    )
    subparser.add_argument(
        "--backend-url",
        default=os.getenv("AGG_LENS_BACKEND_URL", _DEFAULT_BACKEND_URL),
        help="Backend base URL (Elasticsearch or OpenSearch).",
    )
    subparser.add_argument(
        "--index",
        default=os.getenv("AGG_LENS_INDEX", _DEFAULT_INDEX),
        help="Orders index name.",
    )
    subparser.add_argument(
        "--timeout-s",
        default=30.0,
        type=float,
        help="Backend request timeout in seconds.",
    )
    subparser.add_argument(
        "--verify-certs",
        default=env_bool("AGG_LENS_VERIFY_CERTS", default_value=True),
        action=argparse.BooleanOptionalAction,
        help="Verify backend TLS certificates (enabled by default).",
    )
    subparser.add_argument(
        "--lookback-days",
        default=env_int("AGG_LENS_LOOKBACK_DAYS", default_value=30),
        type=int,
        help="Window in days used by the 'last N days' reports.",
    )
    subparser.add_argument(
        "--log-level",
        default=default_log_level(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (defaults to AGG_LENS_LOG_LEVEL or WARNING).",
    )


def add_output_flag(subparser: argparse.ArgumentParser) -> None:
    """Add output emission flag used by all subcommands."""
    subparser.add_argument(
        "--output",
        default="-",
        help="Output destination: '-' for stdout or path to file.",
    )


def build_aggregate_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the aggregate subcommand parser."""
    aggregate_parser = subparsers.add_parser(CommandName.AGGREGATE.value, help="Run one aggregation report.")
    aggregate_parser.add_argument(
        "report",
        choices=[report.value for report in ReportName],
        help="Aggregation report to run.",
    )
    aggregate_parser.add_argument("--size", default=None, type=int, help="Maximum number of buckets.")
    aggregate_parser.add_argument("--customer", default=None, help="Customer name for 'daily-sales'.")
    aggregate_parser.add_argument(
        "--min-amount",
        default=None,
        type=float,
        help="Minimum order amount for 'daily-sales' (defaults to 100).",
    )
    aggregate_parser.add_argument(
        "--interval",
        default=CalendarInterval.DAY.value,
        choices=[interval.value for interval in CalendarInterval],
        help="Histogram interval for 'daily-sales'.",
    )
    aggregate_parser.add_argument(
        "--fields",
        default=None,
        help="Comma-separated grouping fields for 'grouped-counts'.",
    )
    add_shared_runtime_flags(aggregate_parser)
    add_output_flag(aggregate_parser)
    aggregate_parser.set_defaults(handler=handle_aggregate)


def build_search_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the search subcommand parser."""
    search_parser = subparsers.add_parser(CommandName.SEARCH.value, help="Run one document query.")
    search_parser.add_argument(
        "query",
        choices=[query.value for query in SearchName],
        help="Document query to run.",
    )
    search_parser.add_argument("--customer", default=None, help="Customer name for 'by-customer'.")
    search_parser.add_argument("--status", default=None, help="Status text for 'by-status'.")
    search_parser.add_argument("--min-amount", default=None, type=float, help="Lower amount bound.")
    search_parser.add_argument("--max-amount", default=None, type=float, help="Upper amount bound for 'amount-range'.")
    search_parser.add_argument("--sort-field", default="total_amount", help="Sort field for 'sorted-page'.")
    search_parser.add_argument("--page", default=0, type=int, help="Zero-based page number for 'sorted-page'.")
    search_parser.add_argument("--size", default=None, type=int, help="Page size or number of orders.")
    search_parser.add_argument(
        "--ascending",
        default=False,
        action=argparse.BooleanOptionalAction,
        help="Sort ascending instead of descending for 'sorted-page'.",
    )
    add_shared_runtime_flags(search_parser)
    add_output_flag(search_parser)
    search_parser.set_defaults(handler=handle_search)


def build_add_order_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the add-order subcommand parser."""
    add_order_parser = subparsers.add_parser(CommandName.ADD_ORDER.value, help="Store one order.")
    add_order_parser.add_argument("--id", default=None, help="Optional document id; assigned by the backend otherwise.")
    add_order_parser.add_argument("--order-id", required=True, help="Business order id.")
    add_order_parser.add_argument("--customer", required=True, help="Customer name.")
    add_order_parser.add_argument("--order-date", default=None, type=date.fromisoformat, help="Order date (YYYY-MM-DD).")
    add_order_parser.add_argument("--total-amount", default=None, type=float, help="Order total.")
    add_order_parser.add_argument("--status", default=None, help="Order status, for example PAID.")
    add_order_parser.add_argument("--category", default=None, help="Order category.")
    add_shared_runtime_flags(add_order_parser)
    add_output_flag(add_order_parser)
    add_order_parser.set_defaults(handler=handle_add_order)


def build_seed_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the seed subcommand parser."""
    seed_parser = subparsers.add_parser(CommandName.SEED.value, help="Bulk index orders from a file.")
    seed_parser.add_argument("--input", required=True, help="Orders file (.json, .yaml, .yml or .csv).")
    seed_parser.add_argument(
        "--reset-index",
        default=False,
        action=argparse.BooleanOptionalAction,
        help="Delete and recreate the index with the orders mapping before indexing.",
    )
    add_shared_runtime_flags(seed_parser)
    add_output_flag(seed_parser)
    seed_parser.set_defaults(handler=handle_seed)


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser with all subcommands.

    Returns:
        argparse.ArgumentParser: Configured top-level parser.

    """
    parser = argparse.ArgumentParser(
        prog="agg-lens",
        description="Typed aggregation reports and order searches over Elasticsearch or OpenSearch.",
    )
    subparsers = parser.add_subparsers(dest="command")

    build_aggregate_parser(subparsers)
    build_search_parser(subparsers)
    build_add_order_parser(subparsers)
    build_seed_parser(subparsers)

    return parser
