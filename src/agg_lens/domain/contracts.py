"""Domain contracts for order documents and aggregation results."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class OrderDocument(BaseModel):
    """Represent one order stored in the orders index."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    order_id: str
    customer: str
    order_date: date | None = None
    total_amount: float | None = None
    status: str | None = None
    category: str | None = None

    def to_source(self) -> dict[str, object]:
        """Return the document body stored by the backend.

        Returns:
            dict[str, object]: JSON-ready source payload without the document id.

        """
        return self.model_dump(mode="json", exclude={"id"}, exclude_none=True)


class MinMax(BaseModel):
    """Represent a min/max pair where `None` means no data."""

    min: float | None = None
    max: float | None = None


class RevenueStats(BaseModel):
    """Represent revenue statistics over a filtered order set."""

    total_revenue: float = 0.0
    average_order_value: float = 0.0
    min_order_amount: float = 0.0
    max_order_amount: float = 0.0


class CustomerRevenue(BaseModel):
    """Represent total spend of one customer."""

    customer: str
    total_spent: float = 0.0


class CustomerRevenueStats(BaseModel):
    """Represent order count and total spend of one customer."""

    customer: str
    order_count: int = 0
    total_spent: float = 0.0


class CustomerOrderStats(BaseModel):
    """Represent per-customer order statistics."""

    order_count: int = 0
    avg_order_value: float = 0.0
    max_order_value: float = 0.0


class CategoryStats(BaseModel):
    """Represent per-category sales statistics."""

    category: str
    total_sales: float = 0.0
    avg_sales: float = 0.0
    max_sale: float = 0.0


class DailySalesStats(BaseModel):
    """Represent sales statistics for one calendar day."""

    order_count: int = 0
    total_sales: float = 0.0
    avg_sales: float = 0.0


class BucketRow(BaseModel):
    """Represent one flattened bucket with its requested metric values."""

    key: str
    doc_count: int = 0
    metrics: dict[str, float] = Field(default_factory=dict)
