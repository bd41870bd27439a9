"""Domain contracts for agg-lens."""

from agg_lens.domain.contracts import (
    BucketRow,
    CategoryStats,
    CustomerOrderStats,
    CustomerRevenue,
    CustomerRevenueStats,
    DailySalesStats,
    MinMax,
    OrderDocument,
    RevenueStats,
)
from agg_lens.domain.enums import (
    AggregateTag,
    BackendName,
    CalendarInterval,
    CommandName,
    MetricKind,
    ReportName,
    SearchName,
    SortOrder,
    metric_tag,
    tag_from_typed_prefix,
)

__all__ = [
    "AggregateTag",
    "BackendName",
    "BucketRow",
    "CalendarInterval",
    "CategoryStats",
    "CommandName",
    "CustomerOrderStats",
    "CustomerRevenue",
    "CustomerRevenueStats",
    "DailySalesStats",
    "MetricKind",
    "MinMax",
    "OrderDocument",
    "ReportName",
    "RevenueStats",
    "SearchName",
    "SortOrder",
    "metric_tag",
    "tag_from_typed_prefix",
]
