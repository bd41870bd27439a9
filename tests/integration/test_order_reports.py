from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

import pytest

from agg_lens.decoding import BucketSet
from agg_lens.domain import CustomerRevenue, MinMax
from agg_lens.projection import bucket_rows
from agg_lens.query import and_, metric, range_, term, terms
from agg_lens.services import BackendOrderRepository, OrderAggregationService, OrderSearchService

_SCENARIO = [
    {"order_id": "o-1", "customer": "A", "total_amount": 100.0, "status": "PAID"},
    {"order_id": "o-2", "customer": "A", "total_amount": 50.0, "status": "PAID"},
    {"order_id": "o-3", "customer": "B", "total_amount": 200.0, "status": "PENDING"},
]
_AMOUNTS = [12.5, 0.1, 0.2, 1_000.0, 37.25, 8.0]


def _recent(days_ago: int) -> str:
    return (datetime.now(tz=UTC).date() - timedelta(days=days_ago)).isoformat()


def _catalog() -> list[dict[str, object]]:
    return [
        {
            "order_id": f"o-{position}",
            "customer": customer,
            "total_amount": amount,
            "status": status,
            "category": category,
            "order_date": _recent(days_ago),
        }
        for position, (customer, amount, status, category, days_ago) in enumerate(
            [
                ("alice", 120.0, "PAID", "books", 1),
                ("alice", 80.0, "PAID", "games", 3),
                ("bob", 300.0, "PAID", "books", 5),
                ("bob", 20.0, "PENDING", "books", 5),
                ("carol", 640.0, "PAID", "garden", 60),
                ("dave", 15.0, "CANCELLED", "games", 2),
            ],
            start=1,
        )
    ]


def test_paid_filter_excludes_other_customers(memory_backend) -> None:
    service = OrderAggregationService(memory_backend(_SCENARIO))

    values = service.aggregate(
        {"by_customer": terms("customer", 5, {"total": metric("sum", "total_amount")})},
        filter_expr=term("status", "PAID"),
    )

    rows = bucket_rows(values["by_customer"], ["total"])
    assert [(row.key, row.doc_count, row.metrics["total"]) for row in rows] == [("A", 2, 150.0)]
    assert service.top_customers_by_revenue() == [CustomerRevenue(customer="A", total_spent=150.0)]


@pytest.mark.parametrize("size", [1, 2, 3, 10])
def test_bucket_count_never_exceeds_size(memory_backend, size: int) -> None:
    service = OrderAggregationService(memory_backend(_catalog()))

    value = service.aggregate({"by_customer": terms("customer", size)})["by_customer"]

    assert isinstance(value, BucketSet)
    assert len(value) <= size


def test_bucket_doc_counts_never_exceed_total_hits(memory_backend) -> None:
    backend = memory_backend(_catalog())
    service = OrderAggregationService(backend)
    paid = term("status", "PAID")

    value = service.aggregate({"by_category": terms("category", 2)}, filter_expr=paid)["by_category"]
    matching = OrderSearchService(backend).search(paid, max_hits=100)

    assert value.total_doc_count <= len(matching)


def test_sum_round_trip_matches_arithmetic_sum(memory_backend) -> None:
    sources = [
        {"order_id": f"o-{position}", "customer": "x", "total_amount": amount}
        for position, amount in enumerate(_AMOUNTS)
    ]
    service = OrderAggregationService(memory_backend(sources))

    assert math.isclose(service.total_revenue(), math.fsum(_AMOUNTS), rel_tol=1e-9)
    assert service.total_orders_count() == len(_AMOUNTS)


def test_repeated_reports_are_identical(memory_backend) -> None:
    service = OrderAggregationService(memory_backend(_catalog()))

    assert service.category_stats() == service.category_stats()
    assert service.revenue_per_customer() == service.revenue_per_customer()


def test_min_max_distinguishes_no_data_from_zero(memory_backend) -> None:
    empty = OrderAggregationService(memory_backend([]))
    zeros = OrderAggregationService(
        memory_backend([{"order_id": "o-1", "customer": "z", "total_amount": 0.0}]),
    )

    assert empty.min_max_amount() == MinMax(min=None, max=None)
    assert zeros.min_max_amount() == MinMax(min=0.0, max=0.0)


def test_grouped_counts_build_composite_keys(memory_backend) -> None:
    sources = [
        {"order_id": "1", "customer": "a", "region": "east", "tier": "gold"},
        {"order_id": "2", "customer": "b", "region": "east", "tier": "gold"},
        {"order_id": "3", "customer": "c", "region": "east", "tier": "silver"},
    ]
    service = OrderAggregationService(memory_backend(sources))

    assert service.grouped_counts(["region", "tier"]) == {"east|gold": 2, "east|silver": 1}


def test_lookback_reports_only_see_recent_paid_orders(memory_backend) -> None:
    service = OrderAggregationService(memory_backend(_catalog()))

    stats = service.customer_order_stats(lookback_days=30)
    categories = {row.category: row for row in service.category_stats(lookback_days=30)}

    assert set(stats) == {"alice", "bob"}
    assert stats["alice"].order_count == 2  # noqa: PLR2004
    assert stats["alice"].avg_order_value == 100.0  # noqa: PLR2004
    assert stats["bob"].max_order_value == 300.0  # noqa: PLR2004
    assert "garden" not in categories
    assert categories["books"].total_sales == 420.0  # noqa: PLR2004
    assert "garden" in {row.category for row in service.category_stats(lookback_days=90)}


def test_daily_sales_are_chronological(memory_backend) -> None:
    service = OrderAggregationService(memory_backend(_catalog()))

    sales = service.daily_sales_for_customer("alice", min_amount=50.0)

    assert list(sales) == sorted(sales)
    assert sum(day.order_count for day in sales.values()) == 2  # noqa: PLR2004
    assert sum(day.total_sales for day in sales.values()) == 200.0  # noqa: PLR2004


def test_paid_revenue_stats_and_status_counts(memory_backend) -> None:
    service = OrderAggregationService(memory_backend(_catalog()))

    stats = service.paid_revenue_stats()

    assert stats.total_revenue == 1_140.0  # noqa: PLR2004
    assert stats.min_order_amount == 80.0  # noqa: PLR2004
    assert stats.max_order_amount == 640.0  # noqa: PLR2004
    assert service.orders_grouped_by_status() == {"PAID": 4, "CANCELLED": 1, "PENDING": 1}


def test_document_queries_and_repository(memory_backend) -> None:
    backend = memory_backend(_catalog())
    search = OrderSearchService(backend)
    repository = BackendOrderRepository(backend)

    in_range = search.orders_in_amount_range(gte=100.0, lte=600.0)
    top = search.top_orders(size=2)
    paid_large = search.search(and_(term("status", "PAID"), range_("total_amount", gte=300.0)))

    assert {order.total_amount for order in in_range} == {120.0, 300.0}
    assert [order.total_amount for order in top] == [640.0, 300.0]
    assert {order.customer for order in paid_large} == {"bob", "carol"}
    assert [order.total_amount for order in search.high_value_orders(100.0)] == [640.0, 300.0, 120.0]
    assert [order.total_amount for order in repository.find_by_total_amount_greater_than(300.0)] == [640.0]
    assert len(repository.find_by_customer("alice")) == 2  # noqa: PLR2004
    assert [order.customer for order in search.orders_by_status("cancelled")] == ["dave"]


def test_amount_finder_skips_ties_before_the_hit_limit(memory_backend) -> None:
    ties = [{"order_id": f"tie-{position}", "customer": "t", "total_amount": 50.0} for position in range(10)]
    repository = BackendOrderRepository(
        memory_backend([*ties, {"order_id": "big", "customer": "t", "total_amount": 100.0}]),
    )

    assert [order.order_id for order in repository.find_by_total_amount_greater_than(50.0)] == ["big"]


def test_repository_finders_return_more_than_one_search_page(memory_backend) -> None:
    sources = [
        {"order_id": f"o-{position}", "customer": "bulk", "total_amount": 60.0 + position} for position in range(15)
    ]
    repository = BackendOrderRepository(memory_backend(sources))

    assert len(repository.find_by_total_amount_greater_than(50.0)) == len(sources)
    assert len(repository.find_by_customer("bulk")) == len(sources)
    assert len(OrderSearchService(memory_backend(sources)).orders_by_customer("bulk")) == 10  # noqa: PLR2004
