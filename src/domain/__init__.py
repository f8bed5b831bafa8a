from .base import BaseModel, generate_uuid
from .client import Client
from .product import Product
from .order import Order, OrderStatus, BILLABLE_ORDER_STATUSES
from .order_item import OrderItem, OrderItemDetail
from .invoice import Invoice, InvoiceStatus, InvoiceType
from .order_lock_audit import OrderLockAudit

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Client",
    "Product",
    "Order",
    "OrderStatus",
    "BILLABLE_ORDER_STATUSES",
    "OrderItem",
    "OrderItemDetail",
    "Invoice",
    "InvoiceStatus",
    "InvoiceType",
    "OrderLockAudit",
]
