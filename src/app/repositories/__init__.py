from .invoice_repository import InvoiceRepository, DuplicateInvoiceError
from .order_repository import OrderRepository
from .order_item_repository import OrderItemRepository
from .order_lock_audit_repository import OrderLockAuditRepository
from .client_repository import ClientRepository

__all__ = [
    "InvoiceRepository",
    "DuplicateInvoiceError",
    "OrderRepository",
    "OrderItemRepository",
    "OrderLockAuditRepository",
    "ClientRepository",
]
