"""Runtime configuration shared by the order query services."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ServiceConfig(BaseModel):
    """Represent the index and field layout queried by the services.

    Args:
        index: Orders index name.
        lookback_days: Default window for "last N days" reports.
        paid_status: Status value of paid orders.
        search_size: Default number of documents returned by searches.
        finder_size: Number of documents returned by repository finders; the store's default result window.
        order_id_field: Keyword field holding the business order id.
        customer_field: Keyword field holding the customer name.
        order_date_field: Date field of the order.
        amount_field: Numeric field holding the order total.
        status_field: Keyword field holding the order status.
        category_field: Keyword field holding the order category.

    """

    model_config = ConfigDict(frozen=True)

    index: str = "orders_pagination"
    lookback_days: int = Field(default=30, ge=0)
    paid_status: str = "PAID"
    search_size: int = Field(default=10, ge=0)
    finder_size: int = Field(default=10_000, ge=0)
    order_id_field: str = "order_id"
    customer_field: str = "customer"
    order_date_field: str = "order_date"
    amount_field: str = "total_amount"
    status_field: str = "status"
    category_field: str = "category"
