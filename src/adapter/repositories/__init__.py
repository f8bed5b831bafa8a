from .invoice_repository import SqlAlchemyInvoiceRepository
from .order_repository import SqlAlchemyOrderRepository
from .order_item_repository import SqlAlchemyOrderItemRepository
from .order_lock_audit_repository import SqlAlchemyOrderLockAuditRepository
from .client_repository import SqlAlchemyClientRepository

__all__ = [
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyOrderItemRepository",
    "SqlAlchemyOrderLockAuditRepository",
    "SqlAlchemyClientRepository",
]
