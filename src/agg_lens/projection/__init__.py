"""Projection of decoded aggregations into domain DTOs."""

from agg_lens.projection.projector import (
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

__all__ = [
    "bucket_rows",
    "project_category_stats",
    "project_customer_order_stats",
    "project_customer_revenue",
    "project_daily_sales",
    "project_key_counts",
    "project_min_max",
    "project_revenue_stats",
    "project_top_customers",
    "scalar_or_none",
    "scalar_or_zero",
]
