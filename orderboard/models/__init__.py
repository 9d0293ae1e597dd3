"""Application models package."""

from orderboard.models.order import Order, OrderItem
from orderboard.models.site import Site

__all__ = ["Site", "Order", "OrderItem"]
