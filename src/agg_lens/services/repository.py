"""Order persistence on top of the search backend."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from agg_lens.query import range_, term
from agg_lens.services.config import ServiceConfig
from agg_lens.services.orders import OrderSearchService

if TYPE_CHECKING:
    from agg_lens.domain import OrderDocument
    from agg_lens.search.protocols import SearchBackend


class OrderRepository(Protocol):
    """Define keyed order persistence."""

    def save(self, order: OrderDocument) -> OrderDocument:
        """Store one order and return it with its identifier."""

    def find_by_customer(self, customer: str) -> list[OrderDocument]:
        """Return orders of one customer."""

    def find_by_total_amount_greater_than(self, amount: float) -> list[OrderDocument]:
        """Return orders whose amount is strictly greater than `amount`."""


class BackendOrderRepository:
    """Order repository storing documents in the orders index."""

    def __init__(self, backend: SearchBackend, config: ServiceConfig | None = None) -> None:
        """Bind the repository to one backend.

        Args:
            backend (SearchBackend): Search backend adapter.
            config (ServiceConfig | None): Index and field layout; defaults apply when omitted.

        """
        self._backend = backend
        self._config = config or ServiceConfig()
        self._search = OrderSearchService(backend, self._config)

    def save(self, order: OrderDocument) -> OrderDocument:
        """Index one order and return it with the identifier assigned by the backend.

        Args:
            order (OrderDocument): Order to store.

        Returns:
            OrderDocument: Stored order.

        """
        response = self._backend.index_document(
            index=self._config.index,
            document=order.to_source(),
            document_id=order.id,
        )
        document_id = response.get("_id", order.id)
        return order.model_copy(update={"id": None if document_id is None else str(document_id)})

    def find_by_customer(self, customer: str) -> list[OrderDocument]:
        """Return every order of one customer, up to `finder_size`."""
        return self._search.search(
            term(self._config.customer_field, customer),
            max_hits=self._config.finder_size,
        )

    def find_by_total_amount_greater_than(self, amount: float) -> list[OrderDocument]:
        """Return every order whose amount is strictly greater than `amount`, up to `finder_size`."""
        return self._search.search(
            range_(self._config.amount_field, gt=amount),
            max_hits=self._config.finder_size,
        )
