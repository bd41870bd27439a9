"""Typed enumerations for query building, decoding and CLI choices."""

from __future__ import annotations

from enum import StrEnum


class BackendName(StrEnum):
    """Represent supported search backends."""

    ELASTICSEARCH = "elasticsearch"
    OPENSEARCH = "opensearch"


class CommandName(StrEnum):
    """Represent supported top-level CLI commands."""

    AGGREGATE = "aggregate"
    SEARCH = "search"
    ADD_ORDER = "add-order"
    SEED = "seed"


class ReportName(StrEnum):
    """Represent aggregation reports exposed by the `aggregate` command."""

    TOTAL_ORDERS = "total-orders"
    TOTAL_REVENUE = "total-revenue"
    AVERAGE_ORDER_VALUE = "average-order-value"
    MIN_MAX = "min-max"
    BY_STATUS = "by-status"
    GROUPED_COUNTS = "grouped-counts"
    REVENUE_PER_CUSTOMER = "revenue-per-customer"
    PAID_REVENUE = "paid-revenue"
    PAID_REVENUE_STATS = "paid-revenue-stats"
    TOP_CUSTOMERS = "top-customers"
    CUSTOMER_STATS = "customer-stats"
    DAILY_SALES = "daily-sales"
    CATEGORY_STATS = "category-stats"


class SearchName(StrEnum):
    """Represent document queries exposed by the `search` command."""

    BY_CUSTOMER = "by-customer"
    BY_STATUS = "by-status"
    AMOUNT_RANGE = "amount-range"
    PAID_ABOVE = "paid-above"
    SORTED_PAGE = "sorted-page"
    TOP_ORDERS = "top-orders"
    HIGH_VALUE = "high-value"
    AMOUNT_GREATER_THAN = "amount-greater-than"


class MetricKind(StrEnum):
    """Represent single-value metric aggregation kinds."""

    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"
    VALUE_COUNT = "value_count"


class CalendarInterval(StrEnum):
    """Represent calendar intervals accepted by date histograms."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class SortOrder(StrEnum):
    """Represent sort directions."""

    ASC = "asc"
    DESC = "desc"


class AggregateTag(StrEnum):
    """Represent the response type declared for one aggregation."""

    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"
    VALUE_COUNT = "value_count"
    STRING_TERMS = "string_terms"
    NUMERIC_TERMS = "numeric_terms"
    COMPOSITE_TERMS = "composite_terms"
    DATE_HISTOGRAM = "date_histogram"
    UNKNOWN = "unknown"

    @property
    def is_metric(self) -> bool:
        """Return whether the tag denotes a single-value metric."""
        return self in _METRIC_TAGS

    @property
    def is_bucket(self) -> bool:
        """Return whether the tag denotes a bucket collection."""
        return self in _BUCKET_TAGS


_METRIC_TAGS = frozenset(
    {AggregateTag.SUM, AggregateTag.AVG, AggregateTag.MIN, AggregateTag.MAX, AggregateTag.VALUE_COUNT},
)
_BUCKET_TAGS = frozenset(
    {
        AggregateTag.STRING_TERMS,
        AggregateTag.NUMERIC_TERMS,
        AggregateTag.COMPOSITE_TERMS,
        AggregateTag.DATE_HISTOGRAM,
    },
)

# Prefixes emitted by the store when `typed_keys=true` is requested.
_TYPED_KEY_PREFIXES: dict[str, AggregateTag] = {
    "sum": AggregateTag.SUM,
    "avg": AggregateTag.AVG,
    "min": AggregateTag.MIN,
    "max": AggregateTag.MAX,
    "value_count": AggregateTag.VALUE_COUNT,
    "sterms": AggregateTag.STRING_TERMS,
    "lterms": AggregateTag.NUMERIC_TERMS,
    "dterms": AggregateTag.NUMERIC_TERMS,
    "multi_terms": AggregateTag.COMPOSITE_TERMS,
    "date_histogram": AggregateTag.DATE_HISTOGRAM,
}


def tag_from_typed_prefix(prefix: str) -> AggregateTag:
    """Map one typed-keys prefix to its aggregate tag.

    Args:
        prefix (str): Prefix found before `#` in a response aggregation name.

    Returns:
        AggregateTag: Matching tag, or `AggregateTag.UNKNOWN`.

    """
    return _TYPED_KEY_PREFIXES.get(prefix.strip().lower(), AggregateTag.UNKNOWN)


def metric_tag(kind: MetricKind) -> AggregateTag:
    """Return the response tag expected for one metric kind.

    Args:
        kind (MetricKind): Requested metric kind.

    Returns:
        AggregateTag: Expected response tag.

    """
    return AggregateTag(kind.value)
