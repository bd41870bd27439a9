"""Project decoded aggregate values into flat domain DTOs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from agg_lens.decoding import BucketSet, ScalarMetric
from agg_lens.domain import (
    BucketRow,
    CategoryStats,
    CustomerOrderStats,
    CustomerRevenue,
    CustomerRevenueStats,
    DailySalesStats,
    MinMax,
    RevenueStats,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from agg_lens.decoding import AggregateValue


def _buckets(value: AggregateValue | None) -> BucketSet:
    return value if isinstance(value, BucketSet) else BucketSet()


def scalar_or_none(value: AggregateValue | None) -> float | None:
    """Return a scalar metric value, keeping `None` for no data.

    Args:
        value (AggregateValue | None): Decoded value.

    Returns:
        float | None: Metric value or `None` when absent or not a scalar.

    """
    return value.value if isinstance(value, ScalarMetric) else None


def scalar_or_zero(value: AggregateValue | None) -> float:
    """Return a scalar metric value, defaulting to `0.0`.

    Args:
        value (AggregateValue | None): Decoded value.

    Returns:
        float: Metric value or `0.0`.

    """
    result = scalar_or_none(value)
    return 0.0 if result is None else result


def bucket_rows(value: AggregateValue | None, metric_names: Sequence[str]) -> list[BucketRow]:
    """Flatten a bucket set into rows carrying every requested metric.

    Args:
        value (AggregateValue | None): Decoded bucket set.
        metric_names (Sequence[str]): Sub-aggregation names to read in each bucket.

    Returns:
        list[BucketRow]: One row per bucket, in store order; missing or null
        metrics are `0.0`.

    """
    return [
        BucketRow(
            key=bucket.key.display,
            doc_count=bucket.doc_count,
            metrics={name: bucket.metric(name) for name in metric_names},
        )
        for bucket in _buckets(value)
    ]


def project_key_counts(value: AggregateValue | None) -> dict[str, int]:
    """Project a bucket set into an ordered key to document count mapping."""
    return {bucket.key.display: bucket.doc_count for bucket in _buckets(value)}


def project_customer_revenue(
    value: AggregateValue | None,
    *,
    total_name: str = "total_spent",
) -> list[CustomerRevenueStats]:
    """Project customer buckets into order count and total spend rows.

    Args:
        value (AggregateValue | None): Decoded customer bucket set.
        total_name (str): Sum sub-aggregation name.

    Returns:
        list[CustomerRevenueStats]: One row per customer.

    """
    return [
        CustomerRevenueStats(customer=row.key, order_count=row.doc_count, total_spent=row.metrics[total_name])
        for row in bucket_rows(value, [total_name])
    ]


def project_top_customers(
    value: AggregateValue | None,
    *,
    total_name: str = "total_spent",
) -> list[CustomerRevenue]:
    """Project customer buckets into total spend rows."""
    return [
        CustomerRevenue(customer=row.key, total_spent=row.metrics[total_name])
        for row in bucket_rows(value, [total_name])
    ]


def project_customer_order_stats(
    value: AggregateValue | None,
    *,
    avg_name: str = "avg_order_value",
    max_name: str = "max_order_value",
) -> dict[str, CustomerOrderStats]:
    """Project customer buckets into per-customer order statistics.

    Args:
        value (AggregateValue | None): Decoded customer bucket set.
        avg_name (str): Average sub-aggregation name.
        max_name (str): Max sub-aggregation name.

    Returns:
        dict[str, CustomerOrderStats]: Statistics keyed by customer, in store order.

    """
    return {
        row.key: CustomerOrderStats(
            order_count=row.doc_count,
            avg_order_value=row.metrics[avg_name],
            max_order_value=row.metrics[max_name],
        )
        for row in bucket_rows(value, [avg_name, max_name])
    }


def project_category_stats(
    value: AggregateValue | None,
    *,
    total_name: str = "total_sales",
    avg_name: str = "avg_sales",
    max_name: str = "max_sale",
) -> list[CategoryStats]:
    """Project category buckets into sales statistics rows.

    Args:
        value (AggregateValue | None): Decoded category bucket set.
        total_name (str): Sum sub-aggregation name.
        avg_name (str): Average sub-aggregation name.
        max_name (str): Max sub-aggregation name.

    Returns:
        list[CategoryStats]: One row per category.

    """
    return [
        CategoryStats(
            category=row.key,
            total_sales=row.metrics[total_name],
            avg_sales=row.metrics[avg_name],
            max_sale=row.metrics[max_name],
        )
        for row in bucket_rows(value, [total_name, avg_name, max_name])
    ]


def project_daily_sales(
    value: AggregateValue | None,
    *,
    total_name: str = "total_sales",
    avg_name: str = "avg_sales",
) -> dict[str, DailySalesStats]:
    """Project date histogram buckets into daily sales statistics.

    Args:
        value (AggregateValue | None): Decoded date histogram.
        total_name (str): Sum sub-aggregation name.
        avg_name (str): Average sub-aggregation name.

    Returns:
        dict[str, DailySalesStats]: Statistics keyed by formatted bucket date,
        in chronological order.

    """
    return {
        row.key: DailySalesStats(
            order_count=row.doc_count,
            total_sales=row.metrics[total_name],
            avg_sales=row.metrics[avg_name],
        )
        for row in bucket_rows(value, [total_name, avg_name])
    }


def project_min_max(min_value: AggregateValue | None, max_value: AggregateValue | None) -> MinMax:
    """Combine two independent scalar decodes into one min/max pair.

    `None` is preserved on either side: no matching document is not the same
    as a real zero value.
    """
    return MinMax(min=scalar_or_none(min_value), max=scalar_or_none(max_value))


def project_revenue_stats(
    *,
    total: AggregateValue | None,
    average: AggregateValue | None,
    minimum: AggregateValue | None,
    maximum: AggregateValue | None,
) -> RevenueStats:
    """Combine four scalar decodes into revenue statistics, defaulting to `0.0`."""
    return RevenueStats(
        total_revenue=scalar_or_zero(total),
        average_order_value=scalar_or_zero(average),
        min_order_amount=scalar_or_zero(minimum),
        max_order_amount=scalar_or_zero(maximum),
    )
