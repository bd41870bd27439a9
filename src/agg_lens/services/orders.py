"""Document searches over the orders index."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from agg_lens.domain import OrderDocument
from agg_lens.query import Page, and_, build_request, match, range_, sort_by, term
from agg_lens.services.config import ServiceConfig
from agg_lens.services.execution import execute_request

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from agg_lens.query import FilterExpression, SortField
    from agg_lens.search.protocols import SearchBackend


def order_from_hit(hit: Mapping[str, Any]) -> OrderDocument:
    """Build one order from a search hit.

    Args:
        hit (Mapping[str, Any]): Raw hit with `_id` and `_source`.

    Returns:
        OrderDocument: Parsed order.

    """
    source = dict(hit.get("_source") or {})
    if hit.get("_id") is not None:
        source["id"] = str(hit["_id"])
    return OrderDocument.model_validate(source)


class OrderSearchService:
    """Run document searches against the orders index."""

    def __init__(self, backend: SearchBackend, config: ServiceConfig | None = None) -> None:
        """Bind the service to one backend.

        Args:
            backend (SearchBackend): Search backend adapter.
            config (ServiceConfig | None): Index and field layout; defaults apply when omitted.

        """
        self._backend = backend
        self._config = config or ServiceConfig()

    def search(
        self,
        filter_expr: FilterExpression | None = None,
        *,
        sort: Sequence[SortField] = (),
        page: Page | None = None,
        max_hits: int | None = None,
    ) -> list[OrderDocument]:
        """Return the orders matching one filter.

        Args:
            filter_expr (FilterExpression | None): Optional filter; every order when `None`.
            sort (Sequence[SortField]): Sort criteria.
            page (Page | None): Optional page selection.
            max_hits (int | None): Number of orders; the configured default when `None`.

        Raises:
            QueryExecutionError: If the backend call fails.

        Returns:
            list[OrderDocument]: Matching orders in backend order.

        """
        request = build_request(
            filter_expr=filter_expr,
            max_hits=self._config.search_size if max_hits is None else max_hits,
            sort=sort,
            page=page,
        )
        response = execute_request(backend=self._backend, index=self._config.index, request=request)
        return [order_from_hit(hit) for hit in response.hits]

    def orders_by_customer(self, customer: str) -> list[OrderDocument]:
        """Return orders of one customer, matched exactly."""
        return self.search(term(self._config.customer_field, customer))

    def orders_by_status(self, status: str) -> list[OrderDocument]:
        """Return orders whose status matches the text."""
        return self.search(match(self._config.status_field, status))

    def orders_in_amount_range(self, gte: float | None = None, lte: float | None = None) -> list[OrderDocument]:
        """Return orders whose amount lies within inclusive bounds."""
        return self.search(range_(self._config.amount_field, gte=gte, lte=lte))

    def paid_orders_above(self, min_amount: float) -> list[OrderDocument]:
        """Return paid orders of at least `min_amount`."""
        return self.search(
            and_(
                term(self._config.status_field, self._config.paid_status),
                range_(self._config.amount_field, gte=min_amount),
            ),
        )

    def sorted_page(
        self,
        sort_field: str,
        *,
        page: int = 0,
        size: int = 5,
        descending: bool = True,
    ) -> list[OrderDocument]:
        """Return one page of every order sorted on one field.

        Args:
            sort_field (str): Field to sort on.
            page (int): Zero-based page number.
            size (int): Page size.
            descending (bool): Whether to sort in descending order.

        Returns:
            list[OrderDocument]: Orders of the requested page.

        """
        return self.search(sort=[sort_by(sort_field, descending=descending)], page=Page(number=page, size=size))

    def top_orders(self, size: int = 3) -> list[OrderDocument]:
        """Return the largest orders by amount."""
        return self.sorted_page(self._config.amount_field, page=0, size=size, descending=True)

    def high_value_orders(self, min_amount: float) -> list[OrderDocument]:
        """Return orders of at least `min_amount`, largest first."""
        return self.search(
            range_(self._config.amount_field, gte=min_amount),
            sort=[sort_by(self._config.amount_field, descending=True)],
        )
