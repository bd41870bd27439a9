"""Typed decoding of aggregation responses."""

from agg_lens.decoding.decoder import (
    RawAggregate,
    SearchResponse,
    decode_aggregate,
    decode_aggregations,
    default_value,
    index_typed_aggregations,
    parse_response,
)
from agg_lens.decoding.values import (
    COMPOSITE_KEY_SEPARATOR,
    AggregateValue,
    Bucket,
    BucketKey,
    BucketSet,
    CompositeKey,
    NumericKey,
    ScalarMetric,
    StringKey,
)

__all__ = [
    "COMPOSITE_KEY_SEPARATOR",
    "AggregateValue",
    "Bucket",
    "BucketKey",
    "BucketSet",
    "CompositeKey",
    "NumericKey",
    "RawAggregate",
    "ScalarMetric",
    "SearchResponse",
    "StringKey",
    "decode_aggregate",
    "decode_aggregations",
    "default_value",
    "index_typed_aggregations",
    "parse_response",
]
