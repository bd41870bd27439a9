"""Immutable aggregation trees and their builder functions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from agg_lens.domain import CalendarInterval, MetricKind
from agg_lens.errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

_EMPTY_FIELD_ERROR = "Aggregation field name must be a non-empty string."
_EMPTY_NAME_ERROR = "Aggregation name must be a non-empty string."
_DUPLICATE_NAME_ERROR = "Duplicate aggregation name '{name}' among siblings."
_NON_POSITIVE_SIZE_ERROR = "Bucket size must be a positive integer, got {size!r}."
_MULTI_TERMS_FIELDS_ERROR = "A multi-field terms aggregation needs at least two fields."
_UNKNOWN_METRIC_ERROR = "Unsupported metric kind {kind!r}. Supported values: {supported}."
_UNKNOWN_INTERVAL_ERROR = "Unsupported calendar interval {interval!r}. Supported values: {supported}."


def _require_field(field: str) -> str:
    if not isinstance(field, str) or not field.strip():
        raise ValidationError(_EMPTY_FIELD_ERROR)
    return field.strip()


def _require_size(size: int) -> int:
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValidationError(_NON_POSITIVE_SIZE_ERROR.format(size=size))
    return size


def _metric_kind(kind: MetricKind | str) -> MetricKind:
    try:
        return MetricKind(kind)
    except ValueError as exc:
        supported = ", ".join(item.value for item in MetricKind)
        raise ValidationError(_UNKNOWN_METRIC_ERROR.format(kind=kind, supported=supported)) from exc


def _calendar_interval(interval: CalendarInterval | str) -> CalendarInterval:
    try:
        return CalendarInterval(interval)
    except ValueError as exc:
        supported = ", ".join(item.value for item in CalendarInterval)
        raise ValidationError(_UNKNOWN_INTERVAL_ERROR.format(interval=interval, supported=supported)) from exc


@dataclass(frozen=True, slots=True)
class MetricAggregation:
    """Single-value metric computed over one field."""

    kind: MetricKind
    field: str

    def to_dsl(self) -> dict[str, Any]:
        """Render the store aggregation DSL fragment."""
        return {self.kind.value: {"field": self.field}}


@dataclass(frozen=True, slots=True)
class TermsAggregation:
    """Buckets documents by the exact value of one field."""

    field: str
    size: int
    sub_aggregations: tuple[tuple[str, AggregationNode], ...] = ()

    def to_dsl(self) -> dict[str, Any]:
        """Render the store aggregation DSL fragment."""
        return _with_children({"terms": {"field": self.field, "size": self.size}}, self.sub_aggregations)


@dataclass(frozen=True, slots=True)
class MultiTermsAggregation:
    """Buckets documents by the combined values of several fields."""

    fields: tuple[str, ...]
    size: int
    sub_aggregations: tuple[tuple[str, AggregationNode], ...] = ()

    def to_dsl(self) -> dict[str, Any]:
        """Render the store aggregation DSL fragment."""
        body = {
            "multi_terms": {
                "terms": [{"field": field} for field in self.fields],
                "size": self.size,
            },
        }
        return _with_children(body, self.sub_aggregations)


@dataclass(frozen=True, slots=True)
class DateHistogramAggregation:
    """Buckets documents by calendar interval on a date field."""

    field: str
    interval: CalendarInterval
    sub_aggregations: tuple[tuple[str, AggregationNode], ...] = ()

    def to_dsl(self) -> dict[str, Any]:
        """Render the store aggregation DSL fragment."""
        body = {"date_histogram": {"field": self.field, "calendar_interval": self.interval.value}}
        return _with_children(body, self.sub_aggregations)


AggregationNode = MetricAggregation | TermsAggregation | MultiTermsAggregation | DateHistogramAggregation


def _with_children(
    body: dict[str, Any],
    children: tuple[tuple[str, AggregationNode], ...],
) -> dict[str, Any]:
    if children:
        body["aggs"] = {name: node.to_dsl() for name, node in children}
    return body


def _normalize_children(
    sub_aggs: Mapping[str, AggregationNode] | Iterable[tuple[str, AggregationNode]] | None,
) -> tuple[tuple[str, AggregationNode], ...]:
    """Validate sibling names and freeze them in declaration order.

    Args:
        sub_aggs: Named children given as a mapping or as `(name, node)` pairs.

    Raises:
        ValidationError: If one name is empty or repeated.

    Returns:
        tuple[tuple[str, AggregationNode], ...]: Ordered, validated children.

    """
    if sub_aggs is None:
        return ()

    pairs = sub_aggs.items() if isinstance(sub_aggs, Mapping) else sub_aggs
    seen: set[str] = set()
    children: list[tuple[str, AggregationNode]] = []
    for name, node in pairs:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(_EMPTY_NAME_ERROR)
        if name in seen:
            raise ValidationError(_DUPLICATE_NAME_ERROR.format(name=name))
        seen.add(name)
        children.append((name, node))
    return tuple(children)


def metric(kind: MetricKind | str, field: str) -> MetricAggregation:
    """Build a single-value metric aggregation.

    Args:
        kind (MetricKind | str): Metric kind (sum, avg, min, max, value_count).
        field (str): Numeric field name (any field for value_count).

    Raises:
        ValidationError: If the kind is unknown or the field name is empty.

    Returns:
        MetricAggregation: Metric node.

    """
    return MetricAggregation(kind=_metric_kind(kind), field=_require_field(field))


def terms(
    field: str,
    size: int,
    sub_aggs: Mapping[str, AggregationNode] | Iterable[tuple[str, AggregationNode]] | None = None,
) -> TermsAggregation:
    """Build a terms bucket aggregation.

    Args:
        field (str): Keyword or numeric field to bucket by.
        size (int): Maximum number of buckets, ordered by document count.
        sub_aggs: Named sub-aggregations computed inside each bucket.

    Returns:
        TermsAggregation: Terms node.

    """
    return TermsAggregation(
        field=_require_field(field),
        size=_require_size(size),
        sub_aggregations=_normalize_children(sub_aggs),
    )


def multi_terms(
    fields: Sequence[str],
    size: int,
    sub_aggs: Mapping[str, AggregationNode] | Iterable[tuple[str, AggregationNode]] | None = None,
) -> MultiTermsAggregation:
    """Build a bucket aggregation grouping by several fields at once.

    Args:
        fields (Sequence[str]): Fields whose combined values form the bucket key.
        size (int): Maximum number of buckets.
        sub_aggs: Named sub-aggregations computed inside each bucket.

    Raises:
        ValidationError: If fewer than two fields are given.

    Returns:
        MultiTermsAggregation: Multi-field terms node.

    """
    normalized = tuple(_require_field(field) for field in fields)
    if len(normalized) < 2:  # noqa: PLR2004
        raise ValidationError(_MULTI_TERMS_FIELDS_ERROR)
    return MultiTermsAggregation(
        fields=normalized,
        size=_require_size(size),
        sub_aggregations=_normalize_children(sub_aggs),
    )


def date_histogram(
    field: str,
    interval: CalendarInterval | str,
    sub_aggs: Mapping[str, AggregationNode] | Iterable[tuple[str, AggregationNode]] | None = None,
) -> DateHistogramAggregation:
    """Build a calendar-interval date histogram.

    Args:
        field (str): Date field name.
        interval (CalendarInterval | str): Calendar interval of each bucket.
        sub_aggs: Named sub-aggregations computed inside each bucket.

    Raises:
        ValidationError: If the interval is unknown or the field name is empty.

    Returns:
        DateHistogramAggregation: Date histogram node.

    """
    return DateHistogramAggregation(
        field=_require_field(field),
        interval=_calendar_interval(interval),
        sub_aggregations=_normalize_children(sub_aggs),
    )


def aggregations(*pairs: tuple[str, AggregationNode]) -> dict[str, AggregationNode]:
    """Build a validated top-level aggregation mapping.

    Args:
        *pairs: `(name, node)` pairs in request order.

    Returns:
        dict[str, AggregationNode]: Named top-level aggregations.

    """
    return dict(_normalize_children(pairs))
