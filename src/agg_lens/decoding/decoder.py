"""Decode typed-keys search responses into aggregate values.

Requests are executed with `typed_keys=true`, so every aggregation name in
the response carries its response type as a prefix (`sterms#by_customer`,
`sum#total_spent`). The prefix selects the decoding path; the requested
aggregation node only tells which names to look for and which default to
use when one is missing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from agg_lens.decoding.values import (
    AggregateValue,
    Bucket,
    BucketKey,
    BucketSet,
    CompositeKey,
    NumericKey,
    ScalarMetric,
    StringKey,
)
from agg_lens.domain import AggregateTag, metric_tag, tag_from_typed_prefix
from agg_lens.errors import UnsupportedAggregationShapeError
from agg_lens.query.aggregations import MetricAggregation

if TYPE_CHECKING:
    from collections.abc import Mapping

    from agg_lens.query.aggregations import AggregationNode

_TYPED_KEY_SEPARATOR = "#"
_BUCKET_RESERVED_KEYS = frozenset({"key", "key_as_string", "doc_count", "doc_count_error_upper_bound"})
_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RawAggregate:
    """One aggregation body from the response with its declared tag.

    `prefix` keeps the typed-keys prefix as sent by the store, empty for
    untyped names.
    """

    tag: AggregateTag
    body: Mapping[str, Any]
    prefix: str = ""

    @property
    def shape(self) -> str:
        """Return the name of the response shape for diagnostics."""
        return self.prefix or self.tag.value


@dataclass(frozen=True, slots=True)
class SearchResponse:
    """Normalized view over one raw search response."""

    total_hits: int = 0
    hits: tuple[Mapping[str, Any], ...] = ()
    aggregations: Mapping[str, RawAggregate] = field(default_factory=lambda: MappingProxyType({}))


def index_typed_aggregations(payload: Mapping[str, Any] | None) -> dict[str, RawAggregate]:
    """Index aggregation bodies by their plain name.

    Names without a typed-keys prefix are kept with the `unknown` tag.

    Args:
        payload (Mapping[str, Any] | None): Response `aggregations` object or one bucket.

    Returns:
        dict[str, RawAggregate]: Raw aggregations keyed by plain name.

    """
    indexed: dict[str, RawAggregate] = {}
    for raw_name, body in (payload or {}).items():
        if raw_name in _BUCKET_RESERVED_KEYS or not isinstance(body, dict):
            continue
        prefix, separator, name = raw_name.partition(_TYPED_KEY_SEPARATOR)
        if separator:
            indexed[name] = RawAggregate(tag=tag_from_typed_prefix(prefix), body=body, prefix=prefix)
        else:
            indexed[raw_name] = RawAggregate(tag=AggregateTag.UNKNOWN, body=body)
    return indexed


def _total_hits(hits: Mapping[str, Any]) -> int:
    total = hits.get("total")
    if isinstance(total, dict):
        return int(total.get("value", 0))
    if isinstance(total, (int, float)):
        return int(total)
    return 0


def parse_response(payload: Mapping[str, Any]) -> SearchResponse:
    """Normalize a raw backend response.

    Args:
        payload (Mapping[str, Any]): Raw backend response.

    Returns:
        SearchResponse: Hit count, hits and tagged aggregations.

    """
    hits = payload.get("hits") or {}
    return SearchResponse(
        total_hits=_total_hits(hits),
        hits=tuple(hits.get("hits") or ()),
        aggregations=MappingProxyType(index_typed_aggregations(payload.get("aggregations"))),
    )


def _component_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def _numeric_key(name: str, raw: RawAggregate, value: Any) -> NumericKey:
    if isinstance(value, float) and value.is_integer():
        return NumericKey(int(value))
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return NumericKey(value)
    try:
        return NumericKey(float(value))
    except (TypeError, ValueError) as exc:
        raise UnsupportedAggregationShapeError(
            name=name,
            tag=raw.shape,
            detail=f"bucket key {value!r} is not numeric",
        ) from exc


def _bucket_key(name: str, raw: RawAggregate, bucket: Mapping[str, Any]) -> BucketKey:
    tag = raw.tag
    raw_key = bucket.get("key")
    if tag == AggregateTag.STRING_TERMS:
        return StringKey(_component_text(raw_key))
    if tag == AggregateTag.NUMERIC_TERMS:
        return _numeric_key(name, raw, raw_key)
    if tag == AggregateTag.COMPOSITE_TERMS:
        parts = raw_key if isinstance(raw_key, list) else [raw_key]
        return CompositeKey(tuple(_component_text(part) for part in parts))
    # Date histogram keys are epoch millis; the formatted form is the grouping key.
    return StringKey(str(bucket.get("key_as_string", raw_key)))


def default_value(node: AggregationNode, *, nested: bool) -> AggregateValue:
    """Return the value used when an aggregation is missing from the response.

    Args:
        node (AggregationNode): Requested aggregation node.
        nested (bool): Whether the node is a sub-aggregation inside a bucket.

    Returns:
        AggregateValue: `ScalarMetric(0.0)` for nested metrics, `ScalarMetric(None)`
        for top-level metrics, empty `BucketSet` for bucket nodes.

    """
    if isinstance(node, MetricAggregation):
        return ScalarMetric(0.0 if nested else None)
    return BucketSet()


def _metric_value(body: Mapping[str, Any]) -> float | None:
    value = body.get("value")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _iter_raw_buckets(body: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    buckets = body.get("buckets") or []
    if isinstance(buckets, dict):
        return list(buckets.values())
    return list(buckets)


def _decode_children(node: AggregationNode, bucket: Mapping[str, Any]) -> Mapping[str, AggregateValue]:
    if isinstance(node, MetricAggregation) or not node.sub_aggregations:
        return MappingProxyType({})

    indexed = index_typed_aggregations(bucket)
    decoded: dict[str, AggregateValue] = {}
    for child_name, child_node in node.sub_aggregations:
        decoded[child_name] = _decode_recovering(
            child_name,
            child_node,
            indexed.get(child_name),
            nested=True,
        )
    return MappingProxyType(decoded)


def decode_aggregate(
    name: str,
    node: AggregationNode,
    raw: RawAggregate | None,
    *,
    nested: bool = False,
) -> AggregateValue:
    """Decode one aggregation body against the node that requested it.

    Args:
        name (str): Aggregation name, used in error messages.
        node (AggregationNode): Requested aggregation node.
        raw (RawAggregate | None): Raw aggregation, or `None` when absent.
        nested (bool): Whether the aggregation sits inside a parent bucket.

    Raises:
        UnsupportedAggregationShapeError: If a bucket node comes back with an
            unknown tag or a bucket key its tag cannot carry.

    Returns:
        AggregateValue: Decoded scalar metric or bucket set.

    """
    if raw is None:
        return default_value(node, nested=nested)

    if isinstance(node, MetricAggregation):
        if raw.tag != metric_tag(node.kind):
            return ScalarMetric(None)
        return ScalarMetric(_metric_value(raw.body))

    if raw.tag == AggregateTag.UNKNOWN:
        raise UnsupportedAggregationShapeError(name=name, tag=raw.shape)
    if not raw.tag.is_bucket:
        return BucketSet()

    buckets = tuple(
        Bucket(
            key=_bucket_key(name, raw, bucket),
            doc_count=int(bucket.get("doc_count", 0)),
            sub_aggregates=_decode_children(node, bucket),
        )
        for bucket in _iter_raw_buckets(raw.body)
    )
    return BucketSet(buckets=buckets)


def _decode_recovering(
    name: str,
    node: AggregationNode,
    raw: RawAggregate | None,
    *,
    nested: bool,
) -> AggregateValue:
    try:
        return decode_aggregate(name, node, raw, nested=nested)
    except UnsupportedAggregationShapeError as exc:
        _logger.warning("%s Returning an empty result.", exc)
        return BucketSet()


def decode_aggregations(
    response: SearchResponse | Mapping[str, Any],
    requested: Mapping[str, AggregationNode],
) -> dict[str, AggregateValue]:
    """Decode every requested top-level aggregation.

    Unsupported shapes and missing aggregations never raise: they decode to
    an empty bucket set or a null scalar metric.

    Args:
        response (SearchResponse | Mapping[str, Any]): Parsed or raw backend response.
        requested (Mapping[str, AggregationNode]): Requested top-level aggregations.

    Returns:
        dict[str, AggregateValue]: Decoded values keyed by aggregation name, in request order.

    """
    parsed = response if isinstance(response, SearchResponse) else parse_response(response)
    return {
        name: _decode_recovering(name, node, parsed.aggregations.get(name), nested=False)
        for name, node in requested.items()
    }
