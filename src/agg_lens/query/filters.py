"""Immutable filter expressions and their builder functions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from agg_lens.errors import ValidationError

_EMPTY_FIELD_ERROR = "Filter field name must be a non-empty string."
_EMPTY_BOOL_ERROR = "A bool filter needs at least one must, should or must_not clause; omit the filter instead."
_EMPTY_RANGE_ERROR = "A range filter on '{field}' needs at least one of gt, gte, lt or lte."
_CONFLICTING_BOUNDS_ERROR = (
    "A range filter on '{field}' takes one lower bound (gt or gte) and one upper bound (lt or lte)."
)

TermValue = str | int | float | bool
RangeBound = int | float | str | date | datetime


def _require_field(field: str) -> str:
    if not isinstance(field, str) or not field.strip():
        raise ValidationError(_EMPTY_FIELD_ERROR)
    return field.strip()


def _bound_to_dsl(value: RangeBound) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


@dataclass(frozen=True, slots=True)
class Term:
    """Exact match on a keyword or numeric field."""

    field: str
    value: TermValue

    def to_dsl(self) -> dict[str, Any]:
        """Render the store query DSL fragment."""
        return {"term": {self.field: self.value}}


@dataclass(frozen=True, slots=True)
class Match:
    """Full-text match on an analyzed field."""

    field: str
    text: str

    def to_dsl(self) -> dict[str, Any]:
        """Render the store query DSL fragment."""
        return {"match": {self.field: self.text}}


@dataclass(frozen=True, slots=True)
class Range:
    """Range on a numeric or date field.

    `gte`/`lte` are inclusive bounds, `gt`/`lt` exclusive ones. Bounds may be
    numbers, dates or date-math strings such as `now-30d/d`.
    """

    field: str
    gte: RangeBound | None = None
    lte: RangeBound | None = None
    gt: RangeBound | None = None
    lt: RangeBound | None = None

    def to_dsl(self) -> dict[str, Any]:
        """Render the store query DSL fragment."""
        bounds: dict[str, Any] = {}
        for operator in ("gt", "gte", "lt", "lte"):
            value = getattr(self, operator)
            if value is not None:
                bounds[operator] = _bound_to_dsl(value)
        return {"range": {self.field: bounds}}


@dataclass(frozen=True, slots=True)
class Bool:
    """Boolean combination of nested filter expressions."""

    must: tuple[FilterExpression, ...] = ()
    should: tuple[FilterExpression, ...] = ()
    must_not: tuple[FilterExpression, ...] = ()

    def to_dsl(self) -> dict[str, Any]:
        """Render the store query DSL fragment."""
        clauses: dict[str, Any] = {}
        if self.must:
            clauses["must"] = [expr.to_dsl() for expr in self.must]
        if self.should:
            clauses["should"] = [expr.to_dsl() for expr in self.should]
            clauses["minimum_should_match"] = 1
        if self.must_not:
            clauses["must_not"] = [expr.to_dsl() for expr in self.must_not]
        return {"bool": clauses}


FilterExpression = Term | Match | Range | Bool


def term(field: str, value: TermValue) -> Term:
    """Build an exact-match filter.

    Args:
        field (str): Keyword or numeric field name.
        value (TermValue): Literal value to match.

    Returns:
        Term: Term filter.

    """
    return Term(field=_require_field(field), value=value)


def match(field: str, text: str) -> Match:
    """Build a full-text match filter.

    Args:
        field (str): Analyzed field name.
        text (str): Text to match.

    Returns:
        Match: Match filter.

    """
    return Match(field=_require_field(field), text=text)


def range_(
    field: str,
    *,
    gte: RangeBound | None = None,
    lte: RangeBound | None = None,
    gt: RangeBound | None = None,
    lt: RangeBound | None = None,
) -> Range:
    """Build a range filter.

    Args:
        field (str): Numeric or date field name.
        gte (RangeBound | None): Lower bound, inclusive.
        lte (RangeBound | None): Upper bound, inclusive.
        gt (RangeBound | None): Lower bound, exclusive.
        lt (RangeBound | None): Upper bound, exclusive.

    Raises:
        ValidationError: If every bound is missing, or one side has both forms.

    Returns:
        Range: Range filter.

    """
    name = _require_field(field)
    if gte is None and lte is None and gt is None and lt is None:
        raise ValidationError(_EMPTY_RANGE_ERROR.format(field=name))
    if (gte is not None and gt is not None) or (lte is not None and lt is not None):
        raise ValidationError(_CONFLICTING_BOUNDS_ERROR.format(field=name))
    return Range(field=name, gte=gte, lte=lte, gt=gt, lt=lt)


def bool_(
    *,
    must: tuple[FilterExpression, ...] | list[FilterExpression] = (),
    should: tuple[FilterExpression, ...] | list[FilterExpression] = (),
    must_not: tuple[FilterExpression, ...] | list[FilterExpression] = (),
) -> Bool:
    """Build a boolean filter from clause lists.

    Raises:
        ValidationError: If every clause list is empty.

    Returns:
        Bool: Boolean filter.

    """
    if not must and not should and not must_not:
        raise ValidationError(_EMPTY_BOOL_ERROR)
    return Bool(must=tuple(must), should=tuple(should), must_not=tuple(must_not))


def and_(*exprs: FilterExpression) -> Bool:
    """Combine filters so that every one must match."""
    return bool_(must=exprs)


def or_(*exprs: FilterExpression) -> Bool:
    """Combine filters so that at least one must match."""
    return bool_(should=exprs)


def not_(*exprs: FilterExpression) -> Bool:
    """Exclude documents matching any of the filters."""
    return bool_(must_not=exprs)
