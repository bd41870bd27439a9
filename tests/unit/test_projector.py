from __future__ import annotations

from types import MappingProxyType

from agg_lens.decoding import Bucket, BucketSet, ScalarMetric, StringKey
from agg_lens.domain import CategoryStats, CustomerRevenue, CustomerRevenueStats, MinMax
from agg_lens.projection import (
    bucket_rows,
    project_category_stats,
    project_customer_order_stats,
    project_customer_revenue,
    project_daily_sales,
    project_key_counts,
    project_min_max,
    project_revenue_stats,
    project_top_customers,
    scalar_or_none,
    scalar_or_zero,
)


def _bucket(key: str, doc_count: int, **metrics: float | None) -> Bucket:
    return Bucket(
        key=StringKey(key),
        doc_count=doc_count,
        sub_aggregates=MappingProxyType({name: ScalarMetric(value) for name, value in metrics.items()}),
    )


def test_scalar_helpers_distinguish_null_from_zero() -> None:
    assert scalar_or_none(ScalarMetric(None)) is None
    assert scalar_or_zero(ScalarMetric(None)) == 0.0
    assert scalar_or_none(ScalarMetric(0.0)) == 0.0
    assert scalar_or_none(BucketSet()) is None
    assert scalar_or_none(None) is None


def test_min_max_preserves_null_for_no_data() -> None:
    assert project_min_max(ScalarMetric(None), ScalarMetric(None)) == MinMax(min=None, max=None)
    assert project_min_max(ScalarMetric(0.0), ScalarMetric(0.0)) == MinMax(min=0.0, max=0.0)


def test_revenue_stats_default_missing_values_to_zero() -> None:
    stats = project_revenue_stats(
        total=ScalarMetric(300.0),
        average=ScalarMetric(None),
        minimum=None,
        maximum=ScalarMetric(200.0),
    )

    assert stats.total_revenue == 300.0  # noqa: PLR2004
    assert stats.average_order_value == 0.0
    assert stats.min_order_amount == 0.0
    assert stats.max_order_amount == 200.0  # noqa: PLR2004


def test_bucket_rows_fill_missing_and_null_metrics_with_zero() -> None:
    value = BucketSet((_bucket("A", 2, total=150.0), _bucket("B", 1, total=None), _bucket("C", 1)))

    rows = bucket_rows(value, ["total"])

    assert [(row.key, row.doc_count, row.metrics["total"]) for row in rows] == [
        ("A", 2, 150.0),
        ("B", 1, 0.0),
        ("C", 1, 0.0),
    ]


def test_key_counts_keep_bucket_order() -> None:
    value = BucketSet((_bucket("PENDING", 4), _bucket("PAID", 9)))

    assert list(project_key_counts(value).items()) == [("PENDING", 4), ("PAID", 9)]


def test_bucket_projections_of_non_bucket_values_are_empty() -> None:
    assert project_key_counts(ScalarMetric(1.0)) == {}
    assert project_customer_revenue(None) == []


def test_customer_revenue_projections() -> None:
    value = BucketSet((_bucket("A", 2, total_spent=150.0),))

    assert project_customer_revenue(value) == [CustomerRevenueStats(customer="A", order_count=2, total_spent=150.0)]
    assert project_top_customers(value) == [CustomerRevenue(customer="A", total_spent=150.0)]


def test_customer_order_stats_are_keyed_by_customer() -> None:
    value = BucketSet((_bucket("A", 3, avg_order_value=50.0, max_order_value=80.0),))

    stats = project_customer_order_stats(value)

    assert stats["A"].order_count == 3  # noqa: PLR2004
    assert stats["A"].avg_order_value == 50.0  # noqa: PLR2004
    assert stats["A"].max_order_value == 80.0  # noqa: PLR2004


def test_category_stats_rows() -> None:
    value = BucketSet((_bucket("books", 2, total_sales=30.0, avg_sales=15.0),))

    assert project_category_stats(value) == [
        CategoryStats(category="books", total_sales=30.0, avg_sales=15.0, max_sale=0.0),
    ]


def test_daily_sales_keyed_by_bucket_date() -> None:
    value = BucketSet(
        (
            _bucket("2024-01-01T00:00:00.000Z", 1, total_sales=120.0, avg_sales=120.0),
            _bucket("2024-01-02T00:00:00.000Z", 2, total_sales=300.0, avg_sales=150.0),
        ),
    )

    sales = project_daily_sales(value)

    assert list(sales) == ["2024-01-01T00:00:00.000Z", "2024-01-02T00:00:00.000Z"]
    assert sales["2024-01-02T00:00:00.000Z"].order_count == 2  # noqa: PLR2004
