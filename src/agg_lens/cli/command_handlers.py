"""CLI command handlers and command-scoped configuration builders."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from agg_lens.cli.seed_backend_indexing import bulk_index_orders, load_orders, reset_backend_index
from agg_lens.domain import CalendarInterval, CommandName, OrderDocument, ReportName, SearchName
from agg_lens.errors import UnsupportedReportError
from agg_lens.search.factory import build_search_backend
from agg_lens.services import BackendOrderRepository, OrderAggregationService, OrderSearchService, ServiceConfig

if TYPE_CHECKING:
    import argparse
    from collections.abc import Callable

    from agg_lens.search.protocols import SearchBackend

_MISSING_OPTION_ERROR = "Option '{option}' is required for '{name}'."
_logger = logging.getLogger(__name__)


def backend_from_args(args: argparse.Namespace) -> SearchBackend:
    """Build the search backend selected by CLI flags.

    Returns:
        SearchBackend: Search backend adapter.

    """
    return build_search_backend(
        backend=str(args.backend),
        url=str(args.backend_url),
        timeout_s=float(args.timeout_s),
        verify_certs=bool(args.verify_certs),
    )


def service_config_from_args(args: argparse.Namespace) -> ServiceConfig:
    """Build service configuration from CLI flags.

    Returns:
        ServiceConfig: Service configuration.

    """
    return ServiceConfig(index=str(args.index), lookback_days=int(args.lookback_days))


def _require(args: argparse.Namespace, option: str, name: str) -> Any:  # noqa: ANN401
    value = getattr(args, option)
    if value is None:
        raise ValueError(_MISSING_OPTION_ERROR.format(option="--" + option.replace("_", "-"), name=name))
    return value


def _split_fields(raw: str) -> list[str]:
    return [field.strip() for field in raw.split(",") if field.strip()]


def _report_handlers(
    service: OrderAggregationService,
    args: argparse.Namespace,
) -> dict[ReportName, Callable[[], Any]]:
    return {
        ReportName.TOTAL_ORDERS: service.total_orders_count,
        ReportName.TOTAL_REVENUE: service.total_revenue,
        ReportName.AVERAGE_ORDER_VALUE: service.average_order_value,
        ReportName.MIN_MAX: service.min_max_amount,
        ReportName.BY_STATUS: lambda: service.orders_grouped_by_status(size=args.size or 10),
        ReportName.GROUPED_COUNTS: lambda: service.grouped_counts(
            _split_fields(str(_require(args, "fields", ReportName.GROUPED_COUNTS))),
            size=args.size or 10,
        ),
        ReportName.REVENUE_PER_CUSTOMER: lambda: service.revenue_per_customer(size=args.size or 5),
        ReportName.PAID_REVENUE: service.paid_revenue,
        ReportName.PAID_REVENUE_STATS: service.paid_revenue_stats,
        ReportName.TOP_CUSTOMERS: lambda: service.top_customers_by_revenue(size=args.size or 5),
        ReportName.CUSTOMER_STATS: lambda: service.customer_order_stats(size=args.size or 10),
        ReportName.DAILY_SALES: lambda: service.daily_sales_for_customer(
            str(_require(args, "customer", ReportName.DAILY_SALES)),
            min_amount=100.0 if args.min_amount is None else float(args.min_amount),
            interval=CalendarInterval(args.interval),
        ),
        ReportName.CATEGORY_STATS: lambda: service.category_stats(size=args.size or 5),
    }


def handle_aggregate(args: argparse.Namespace) -> dict[str, Any]:
    """Run one aggregation report.

    Raises:
        UnsupportedReportError: If the report name is unknown.

    Returns:
        dict[str, Any]: Report payload.

    """
    try:
        report = ReportName(args.report)
    except ValueError as exc:
        supported = ", ".join(item.value for item in ReportName)
        raise UnsupportedReportError(report=str(args.report), supported=supported) from exc

    service = OrderAggregationService(backend_from_args(args), service_config_from_args(args))
    result = _report_handlers(service, args)[report]()
    _logger.debug("Report %s computed on index %s", report, args.index)
    return {"command": CommandName.AGGREGATE.value, "report": report.value, "index": str(args.index), "result": result}


def _search_handlers(
    service: OrderSearchService,
    repository: BackendOrderRepository,
    args: argparse.Namespace,
) -> dict[SearchName, Callable[[], list[OrderDocument]]]:
    return {
        SearchName.BY_CUSTOMER: lambda: service.orders_by_customer(
            str(_require(args, "customer", SearchName.BY_CUSTOMER)),
        ),
        SearchName.BY_STATUS: lambda: service.orders_by_status(str(_require(args, "status", SearchName.BY_STATUS))),
        SearchName.AMOUNT_RANGE: lambda: service.orders_in_amount_range(
            gte=100.0 if args.min_amount is None else float(args.min_amount),
            lte=600.0 if args.max_amount is None else float(args.max_amount),
        ),
        SearchName.PAID_ABOVE: lambda: service.paid_orders_above(
            300.0 if args.min_amount is None else float(args.min_amount),
        ),
        SearchName.SORTED_PAGE: lambda: service.sorted_page(
            str(args.sort_field),
            page=int(args.page),
            size=args.size or 5,
            descending=not bool(args.ascending),
        ),
        SearchName.TOP_ORDERS: lambda: service.top_orders(size=args.size or 3),
        SearchName.HIGH_VALUE: lambda: service.high_value_orders(
            float(_require(args, "min_amount", SearchName.HIGH_VALUE)),
        ),
        SearchName.AMOUNT_GREATER_THAN: lambda: repository.find_by_total_amount_greater_than(
            float(_require(args, "min_amount", SearchName.AMOUNT_GREATER_THAN)),
        ),
    }


def handle_search(args: argparse.Namespace) -> dict[str, Any]:
    """Run one document query.

    Raises:
        UnsupportedReportError: If the query name is unknown.

    Returns:
        dict[str, Any]: Search payload.

    """
    try:
        query = SearchName(args.query)
    except ValueError as exc:
        supported = ", ".join(item.value for item in SearchName)
        raise UnsupportedReportError(report=str(args.query), supported=supported) from exc

    backend = backend_from_args(args)
    config = service_config_from_args(args)
    handlers = _search_handlers(OrderSearchService(backend, config), BackendOrderRepository(backend, config), args)
    orders = handlers[query]()
    return {
        "command": CommandName.SEARCH.value,
        "query": query.value,
        "index": str(args.index),
        "count": len(orders),
        "orders": orders,
    }


def handle_add_order(args: argparse.Namespace) -> OrderDocument:
    """Store one order through the repository.

    Returns:
        OrderDocument: Stored order with its backend identifier.

    """
    order = OrderDocument(
        id=args.id,
        order_id=str(args.order_id),
        customer=str(args.customer),
        order_date=args.order_date,
        total_amount=args.total_amount,
        status=args.status,
        category=args.category,
    )
    repository = BackendOrderRepository(backend_from_args(args), service_config_from_args(args))
    return repository.save(order)


def handle_seed(args: argparse.Namespace) -> dict[str, Any]:
    """Load orders from a file and bulk index them.

    Returns:
        dict[str, Any]: Seeding summary.

    """
    input_path = Path(args.input).expanduser().resolve()
    if bool(args.reset_index):
        reset_backend_index(backend_url=str(args.backend_url), index=str(args.index))

    orders = load_orders(input_path)
    bulk_index_orders(backend_url=str(args.backend_url), index=str(args.index), orders=orders)
    return {
        "command": CommandName.SEED.value,
        "input": str(input_path),
        "index": str(args.index),
        "reset_index": bool(args.reset_index),
        "indexed_count": len(orders),
    }
