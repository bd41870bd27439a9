"""Filter, aggregation and request builders."""

from agg_lens.query.aggregations import (
    AggregationNode,
    DateHistogramAggregation,
    MetricAggregation,
    MultiTermsAggregation,
    TermsAggregation,
    aggregations,
    date_histogram,
    metric,
    multi_terms,
    terms,
)
from agg_lens.query.filters import (
    Bool,
    FilterExpression,
    Match,
    Range,
    Term,
    and_,
    bool_,
    match,
    not_,
    or_,
    range_,
    term,
)
from agg_lens.query.request import Page, QueryRequest, SortField, build_request, sort_by

__all__ = [
    "AggregationNode",
    "Bool",
    "DateHistogramAggregation",
    "FilterExpression",
    "Match",
    "MetricAggregation",
    "MultiTermsAggregation",
    "Page",
    "QueryRequest",
    "Range",
    "SortField",
    "Term",
    "TermsAggregation",
    "aggregations",
    "and_",
    "bool_",
    "build_request",
    "date_histogram",
    "match",
    "metric",
    "multi_terms",
    "not_",
    "or_",
    "range_",
    "sort_by",
    "term",
]
