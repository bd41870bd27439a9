from __future__ import annotations

import pytest

from agg_lens.domain import CalendarInterval, MetricKind
from agg_lens.errors import ValidationError
from agg_lens.query import aggregations, date_histogram, metric, multi_terms, terms

_TOP_CUSTOMERS = 5


def test_metric_renders_kind_and_field() -> None:
    assert metric(MetricKind.SUM, "total_amount").to_dsl() == {"sum": {"field": "total_amount"}}
    assert metric("value_count", "order_id").to_dsl() == {"value_count": {"field": "order_id"}}


def test_metric_rejects_unknown_kind() -> None:
    with pytest.raises(ValidationError, match="Unsupported metric kind .median."):
        metric("median", "total_amount")


def test_terms_renders_children_under_aggs_in_declaration_order() -> None:
    node = terms(
        "customer",
        _TOP_CUSTOMERS,
        [
            ("total_spent", metric(MetricKind.SUM, "total_amount")),
            ("avg_spent", metric(MetricKind.AVG, "total_amount")),
        ],
    )

    dsl = node.to_dsl()

    assert dsl["terms"] == {"field": "customer", "size": _TOP_CUSTOMERS}
    assert list(dsl["aggs"]) == ["total_spent", "avg_spent"]
    assert dsl["aggs"]["avg_spent"] == {"avg": {"field": "total_amount"}}


def test_terms_without_children_has_no_aggs_key() -> None:
    assert "aggs" not in terms("status", 10).to_dsl()


@pytest.mark.parametrize("size", [0, -3, True])
def test_terms_rejects_non_positive_size(size: int) -> None:
    with pytest.raises(ValidationError, match="positive integer"):
        terms("status", size)


def test_duplicate_sibling_names_are_rejected() -> None:
    with pytest.raises(ValidationError, match="Duplicate aggregation name 'total'"):
        terms(
            "customer",
            5,
            [("total", metric("sum", "total_amount")), ("total", metric("max", "total_amount"))],
        )


def test_same_name_is_allowed_at_different_levels() -> None:
    node = terms("customer", 5, {"customer": terms("category", 3)})

    assert node.to_dsl()["aggs"]["customer"]["terms"]["field"] == "category"


def test_multi_terms_renders_field_list() -> None:
    node = multi_terms(["region", "tier"], 10)

    assert node.to_dsl() == {
        "multi_terms": {"terms": [{"field": "region"}, {"field": "tier"}], "size": 10},
    }


def test_multi_terms_needs_two_fields() -> None:
    with pytest.raises(ValidationError, match="at least two fields"):
        multi_terms(["region"], 10)


def test_date_histogram_renders_calendar_interval() -> None:
    node = date_histogram("order_date", CalendarInterval.DAY, {"total_sales": metric("sum", "total_amount")})

    assert node.to_dsl() == {
        "date_histogram": {"field": "order_date", "calendar_interval": "day"},
        "aggs": {"total_sales": {"sum": {"field": "total_amount"}}},
    }


def test_date_histogram_rejects_unknown_interval() -> None:
    with pytest.raises(ValidationError, match="Unsupported calendar interval 'fortnight'"):
        date_histogram("order_date", "fortnight")


def test_aggregations_keeps_request_order_and_rejects_empty_names() -> None:
    named = aggregations(("b", metric("min", "x")), ("a", metric("max", "x")))

    assert list(named) == ["b", "a"]
    with pytest.raises(ValidationError, match="non-empty"):
        aggregations(("", metric("min", "x")))
