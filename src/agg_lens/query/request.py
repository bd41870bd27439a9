"""Query request assembling one filter, aggregations, sort and paging."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from agg_lens.domain import SortOrder
from agg_lens.errors import ValidationError
from agg_lens.query.aggregations import aggregations as build_aggregations

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from agg_lens.query.aggregations import AggregationNode
    from agg_lens.query.filters import FilterExpression

_NEGATIVE_MAX_HITS_ERROR = "max_hits must be zero or a positive integer, got {value!r}."
_INVALID_PAGE_ERROR = "Page number must be >= 0 and page size > 0, got number={number!r}, size={size!r}."
_EMPTY_SORT_FIELD_ERROR = "Sort field name must be a non-empty string."


@dataclass(frozen=True, slots=True)
class SortField:
    """One sort criterion."""

    field: str
    order: SortOrder = SortOrder.ASC

    def to_dsl(self) -> dict[str, Any]:
        """Render the store sort DSL fragment."""
        return {self.field: {"order": self.order.value}}


@dataclass(frozen=True, slots=True)
class Page:
    """Zero-based page selection."""

    number: int = 0
    size: int = 10

    @property
    def offset(self) -> int:
        """Return the first hit offset of this page."""
        return self.number * self.size


@dataclass(frozen=True, slots=True)
class QueryRequest:
    """Represent one search request sent to the backend.

    Args:
        filter: Optional filter expression; `None` matches every document.
        aggregations: Named top-level aggregations.
        max_hits: Number of documents returned; `0` suppresses hits.
        sort: Sort criteria applied to hits.
        page: Optional page selection; overrides `max_hits` when given.

    """

    filter: FilterExpression | None = None
    aggregations: Mapping[str, AggregationNode] = field(default_factory=dict)
    max_hits: int = 0
    sort: tuple[SortField, ...] = ()
    page: Page | None = None

    def to_body(self) -> dict[str, Any]:
        """Render the full search body.

        Returns:
            dict[str, Any]: Backend search body.

        """
        body: dict[str, Any] = {
            "query": self.filter.to_dsl() if self.filter is not None else {"match_all": {}},
            "track_total_hits": True,
        }
        if self.page is not None:
            body["from"] = self.page.offset
            body["size"] = self.page.size
        else:
            body["size"] = self.max_hits
        if self.sort:
            body["sort"] = [item.to_dsl() for item in self.sort]
        if self.aggregations:
            body["aggs"] = {name: node.to_dsl() for name, node in self.aggregations.items()}
        return body


def sort_by(field_name: str, *, descending: bool = False) -> SortField:
    """Build one sort criterion.

    Args:
        field_name (str): Field to sort on.
        descending (bool): Whether to sort in descending order.

    Raises:
        ValidationError: If the field name is empty.

    Returns:
        SortField: Sort criterion.

    """
    if not field_name or not field_name.strip():
        raise ValidationError(_EMPTY_SORT_FIELD_ERROR)
    return SortField(field=field_name.strip(), order=SortOrder.DESC if descending else SortOrder.ASC)


def build_request(
    *,
    filter_expr: FilterExpression | None = None,
    aggs: Mapping[str, AggregationNode] | Sequence[tuple[str, AggregationNode]] | None = None,
    max_hits: int = 0,
    sort: Sequence[SortField] = (),
    page: Page | None = None,
) -> QueryRequest:
    """Build and validate one query request.

    Args:
        filter_expr (FilterExpression | None): Optional filter expression.
        aggs: Named top-level aggregations as a mapping or `(name, node)` pairs.
        max_hits (int): Number of hits to return, `0` for aggregations only.
        sort (Sequence[SortField]): Sort criteria.
        page (Page | None): Optional page selection.

    Raises:
        ValidationError: If `max_hits` or `page` is invalid, or names repeat.

    Returns:
        QueryRequest: Immutable query request.

    """
    if isinstance(max_hits, bool) or not isinstance(max_hits, int) or max_hits < 0:
        raise ValidationError(_NEGATIVE_MAX_HITS_ERROR.format(value=max_hits))
    if page is not None and (page.number < 0 or page.size <= 0):
        raise ValidationError(_INVALID_PAGE_ERROR.format(number=page.number, size=page.size))

    pairs = list(aggs.items()) if hasattr(aggs, "items") else list(aggs or ())
    return QueryRequest(
        filter=filter_expr,
        aggregations=build_aggregations(*pairs),
        max_hits=max_hits,
        sort=tuple(sort),
        page=page,
    )
