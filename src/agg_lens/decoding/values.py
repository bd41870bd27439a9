"""Decoded aggregation values: scalar metrics and bucket sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

COMPOSITE_KEY_SEPARATOR = "|"


@dataclass(frozen=True, slots=True)
class StringKey:
    """Bucket key produced by keyword terms and date histograms."""

    value: str

    @property
    def display(self) -> str:
        """Return the display/grouping form of the key."""
        return self.value


@dataclass(frozen=True, slots=True)
class NumericKey:
    """Bucket key produced by numeric terms."""

    value: int | float

    @property
    def display(self) -> str:
        """Return the display/grouping form of the key."""
        return str(self.value)


@dataclass(frozen=True, slots=True)
class CompositeKey:
    """Bucket key produced by multi-field terms.

    The display form joins the stringified components with `|`. It is a
    grouping label only and is not parsed back into components.
    """

    parts: tuple[str, ...]

    @property
    def display(self) -> str:
        """Return the display/grouping form of the key."""
        return COMPOSITE_KEY_SEPARATOR.join(self.parts)


BucketKey = StringKey | NumericKey | CompositeKey


@dataclass(frozen=True, slots=True)
class ScalarMetric:
    """Single-value metric; `None` when the store reported no value."""

    value: float | None = None

    def or_zero(self) -> float:
        """Return the metric value, defaulting to `0.0` when absent."""
        return 0.0 if self.value is None else self.value


@dataclass(frozen=True, slots=True)
class Bucket:
    """One bucket with its document count and decoded sub-aggregations."""

    key: BucketKey
    doc_count: int
    sub_aggregates: Mapping[str, AggregateValue] = field(default_factory=lambda: MappingProxyType({}))

    def metric(self, name: str) -> float:
        """Return one scalar sub-aggregate, defaulting to `0.0`.

        Args:
            name (str): Sub-aggregation name.

        Returns:
            float: Metric value or `0.0` when absent, null or not a scalar.

        """
        value = self.sub_aggregates.get(name)
        if isinstance(value, ScalarMetric):
            return value.or_zero()
        return 0.0


@dataclass(frozen=True, slots=True)
class BucketSet:
    """Ordered bucket collection, in the order returned by the store."""

    buckets: tuple[Bucket, ...] = ()

    def __iter__(self) -> Iterator[Bucket]:
        return iter(self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)

    @property
    def total_doc_count(self) -> int:
        """Return the summed document count across buckets."""
        return sum(bucket.doc_count for bucket in self.buckets)


AggregateValue = ScalarMetric | BucketSet
