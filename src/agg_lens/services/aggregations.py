"""Order aggregation reports composed from filters, aggregation trees and projections."""

from __future__ import annotations

from typing import TYPE_CHECKING

from agg_lens.decoding import decode_aggregations
from agg_lens.domain import CalendarInterval, MetricKind
from agg_lens.errors import ValidationError
from agg_lens.projection import (
    project_category_stats,
    project_customer_order_stats,
    project_customer_revenue,
    project_daily_sales,
    project_key_counts,
    project_min_max,
    project_revenue_stats,
    project_top_customers,
    scalar_or_zero,
)
from agg_lens.query import (
    and_,
    build_request,
    date_histogram,
    match,
    metric,
    multi_terms,
    range_,
    term,
    terms,
)
from agg_lens.services.config import ServiceConfig
from agg_lens.services.execution import execute_request

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from agg_lens.decoding import AggregateValue
    from agg_lens.domain import (
        CategoryStats,
        CustomerOrderStats,
        CustomerRevenue,
        CustomerRevenueStats,
        DailySalesStats,
        MinMax,
        RevenueStats,
    )
    from agg_lens.query import AggregationNode, FilterExpression
    from agg_lens.search.protocols import SearchBackend

_NO_GROUPING_FIELDS_ERROR = "At least one grouping field must be provided."
_NEGATIVE_LOOKBACK_ERROR = "Lookback window must be zero or more days, got {days!r}."


class OrderAggregationService:
    """Run aggregation reports against the orders index.

    Each public method builds its own request, performs one backend round
    trip and returns projected DTOs. No state is kept between calls.
    """

    def __init__(self, backend: SearchBackend, config: ServiceConfig | None = None) -> None:
        """Bind the service to one backend.

        Args:
            backend (SearchBackend): Search backend adapter.
            config (ServiceConfig | None): Index and field layout; defaults apply when omitted.

        """
        self._backend = backend
        self._config = config or ServiceConfig()

    def aggregate(
        self,
        aggs: Mapping[str, AggregationNode] | Sequence[tuple[str, AggregationNode]],
        *,
        filter_expr: FilterExpression | None = None,
    ) -> dict[str, AggregateValue]:
        """Execute arbitrary aggregations and decode every requested name.

        Args:
            aggs: Named top-level aggregations.
            filter_expr (FilterExpression | None): Optional filter.

        Raises:
            QueryExecutionError: If the backend call fails.

        Returns:
            dict[str, AggregateValue]: Decoded values keyed by aggregation name.

        """
        request = build_request(filter_expr=filter_expr, aggs=aggs, max_hits=0)
        response = execute_request(backend=self._backend, index=self._config.index, request=request)
        return decode_aggregations(response, request.aggregations)

    def _paid_filter(self) -> FilterExpression:
        return term(self._config.status_field, self._config.paid_status)

    def _paid_within_lookback(self, lookback_days: int | None) -> FilterExpression:
        days = self._config.lookback_days if lookback_days is None else lookback_days
        if days < 0:
            raise ValidationError(_NEGATIVE_LOOKBACK_ERROR.format(days=days))
        return and_(
            self._paid_filter(),
            range_(self._config.order_date_field, gte=f"now-{days}d/d"),
        )

    def total_orders_count(self) -> int:
        """Count orders through a value_count on the order id."""
        values = self.aggregate({"total_orders": metric(MetricKind.VALUE_COUNT, self._config.order_id_field)})
        return int(scalar_or_zero(values["total_orders"]))

    def total_revenue(self) -> float:
        """Sum order amounts over every order."""
        values = self.aggregate({"total_revenue": metric(MetricKind.SUM, self._config.amount_field)})
        return scalar_or_zero(values["total_revenue"])

    def average_order_value(self) -> float:
        """Average order amount over every order."""
        values = self.aggregate({"avg_order_value": metric(MetricKind.AVG, self._config.amount_field)})
        return scalar_or_zero(values["avg_order_value"])

    def min_max_amount(self) -> MinMax:
        """Return the smallest and largest order amounts, `None` when no order exists."""
        values = self.aggregate(
            [
                ("min_amount", metric(MetricKind.MIN, self._config.amount_field)),
                ("max_amount", metric(MetricKind.MAX, self._config.amount_field)),
            ],
        )
        return project_min_max(values["min_amount"], values["max_amount"])

    def orders_grouped_by_status(self, size: int = 10) -> dict[str, int]:
        """Count orders per status value."""
        values = self.aggregate({"orders_by_status": terms(self._config.status_field, size)})
        return project_key_counts(values["orders_by_status"])

    def grouped_counts(
        self,
        fields: Sequence[str],
        *,
        size: int = 10,
        filter_expr: FilterExpression | None = None,
    ) -> dict[str, int]:
        """Count documents per value of one field or per combination of several.

        Several fields produce composite keys such as `east|gold`.

        Args:
            fields (Sequence[str]): Grouping fields.
            size (int): Maximum number of groups.
            filter_expr (FilterExpression | None): Optional filter.

        Raises:
            ValidationError: If no field is given.

        Returns:
            dict[str, int]: Document counts keyed by display key.

        """
        if not fields:
            raise ValidationError(_NO_GROUPING_FIELDS_ERROR)
        node = terms(fields[0], size) if len(fields) == 1 else multi_terms(fields, size)
        values = self.aggregate({"groups": node}, filter_expr=filter_expr)
        return project_key_counts(values["groups"])

    def revenue_per_customer(self, size: int = 5) -> list[CustomerRevenueStats]:
        """Return order count and total spend for the busiest customers."""
        node = terms(
            self._config.customer_field,
            size,
            {"total_spent": metric(MetricKind.SUM, self._config.amount_field)},
        )
        values = self.aggregate({"revenue_per_customer": node})
        return project_customer_revenue(values["revenue_per_customer"])

    def paid_revenue(self) -> float:
        """Sum order amounts over paid orders."""
        values = self.aggregate(
            {"paid_revenue": metric(MetricKind.SUM, self._config.amount_field)},
            filter_expr=self._paid_filter(),
        )
        return scalar_or_zero(values["paid_revenue"])

    def paid_revenue_stats(self) -> RevenueStats:
        """Return total, average, min and max amounts over paid orders."""
        amount = self._config.amount_field
        values = self.aggregate(
            [
                ("total_revenue", metric(MetricKind.SUM, amount)),
                ("average_order_value", metric(MetricKind.AVG, amount)),
                ("min_order_amount", metric(MetricKind.MIN, amount)),
                ("max_order_amount", metric(MetricKind.MAX, amount)),
            ],
            filter_expr=self._paid_filter(),
        )
        return project_revenue_stats(
            total=values["total_revenue"],
            average=values["average_order_value"],
            minimum=values["min_order_amount"],
            maximum=values["max_order_amount"],
        )

    def top_customers_by_revenue(self, size: int = 5) -> list[CustomerRevenue]:
        """Return total spend of the busiest customers over paid orders."""
        node = terms(
            self._config.customer_field,
            size,
            {"total_spent": metric(MetricKind.SUM, self._config.amount_field)},
        )
        values = self.aggregate({"revenue_per_customer": node}, filter_expr=self._paid_filter())
        return project_top_customers(values["revenue_per_customer"])

    def customer_order_stats(
        self,
        lookback_days: int | None = None,
        size: int = 10,
    ) -> dict[str, CustomerOrderStats]:
        """Return per-customer order statistics over recent paid orders.

        Args:
            lookback_days (int | None): Window in days; the configured default when `None`.
            size (int): Maximum number of customers.

        Returns:
            dict[str, CustomerOrderStats]: Statistics keyed by customer.

        """
        amount = self._config.amount_field
        node = terms(
            self._config.customer_field,
            size,
            [
                ("avg_order_value", metric(MetricKind.AVG, amount)),
                ("max_order_value", metric(MetricKind.MAX, amount)),
            ],
        )
        values = self.aggregate(
            {"orders_by_customer": node},
            filter_expr=self._paid_within_lookback(lookback_days),
        )
        return project_customer_order_stats(values["orders_by_customer"])

    def daily_sales_for_customer(
        self,
        customer: str,
        min_amount: float = 100.0,
        interval: CalendarInterval = CalendarInterval.DAY,
    ) -> dict[str, DailySalesStats]:
        """Return per-interval sales of one customer's larger orders.

        Args:
            customer (str): Customer name, matched as full text.
            min_amount (float): Minimum order amount, inclusive.
            interval (CalendarInterval): Histogram interval.

        Returns:
            dict[str, DailySalesStats]: Statistics keyed by bucket date, chronologically.

        """
        amount = self._config.amount_field
        node = date_histogram(
            self._config.order_date_field,
            interval,
            [
                ("total_sales", metric(MetricKind.SUM, amount)),
                ("avg_sales", metric(MetricKind.AVG, amount)),
            ],
        )
        values = self.aggregate(
            {"daily_sales": node},
            filter_expr=and_(
                match(self._config.customer_field, customer),
                range_(amount, gte=min_amount),
            ),
        )
        return project_daily_sales(values["daily_sales"])

    def category_stats(self, lookback_days: int | None = None, size: int = 5) -> list[CategoryStats]:
        """Return sales statistics of the busiest categories over recent paid orders.

        Args:
            lookback_days (int | None): Window in days; the configured default when `None`.
            size (int): Maximum number of categories.

        Returns:
            list[CategoryStats]: One row per category.

        """
        amount = self._config.amount_field
        node = terms(
            self._config.category_field,
            size,
            [
                ("total_sales", metric(MetricKind.SUM, amount)),
                ("avg_sales", metric(MetricKind.AVG, amount)),
                ("max_sale", metric(MetricKind.MAX, amount)),
            ],
        )
        values = self.aggregate(
            {"orders_by_category": node},
            filter_expr=self._paid_within_lookback(lookback_days),
        )
        return project_category_stats(values["orders_by_category"])
