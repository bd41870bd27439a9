"""Order query services."""

from agg_lens.services.aggregations import OrderAggregationService
from agg_lens.services.config import ServiceConfig
from agg_lens.services.execution import execute_request
from agg_lens.services.orders import OrderSearchService, order_from_hit
from agg_lens.services.repository import BackendOrderRepository, OrderRepository

__all__ = [
    "BackendOrderRepository",
    "OrderAggregationService",
    "OrderRepository",
    "OrderSearchService",
    "ServiceConfig",
    "execute_request",
    "order_from_hit",
]
