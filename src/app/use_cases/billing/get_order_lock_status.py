"""GetOrderLockStatus Use Case

Reports whether an order may still be edited, based on the status of the
invoice it is linked to.
"""

from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_lock_audit_repository import OrderLockAuditRepository
from src.domain.invoice import InvoiceStatus
from .dtos import OrderLockStatusDTO, OrderLockAuditDTO


class GetOrderLockStatus:
    """
    Use Case: Get order lock status

    Business Rules:
    1. Unlinked orders are editable
    2. Orders linked to a draft invoice are editable
    3. Orders linked to a sent, partial or paid invoice are locked
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        invoice_repo: InvoiceRepository,
        lock_audit_repo: OrderLockAuditRepository,
    ):
        self.order_repo = order_repo
        self.invoice_repo = invoice_repo
        self.lock_audit_repo = lock_audit_repo

    async def execute(self, order_id: str) -> Result[OrderLockStatusDTO]:
        try:
            order = await self.order_repo.get_by_id(order_id)

            if not order:
                return Return.err(
                    Error(
                        code="ORDER_NOT_FOUND",
                        message=f"Order with ID {order_id} not found",
                        reason="Order does not exist",
                    )
                )

            audits = await self.lock_audit_repo.get_by_order_id(order_id)
            history = [
                OrderLockAuditDTO(
                    invoice_id=audit.invoice_id,
                    invoice_status=InvoiceStatus(audit.invoice_status).value,
                    locked_by=audit.locked_by,
                    locked_at=audit.locked_at,
                )
                for audit in audits
            ]

            invoice = None
            if order.invoice_id:
                invoice = await self.invoice_repo.get_by_id(order.invoice_id)

            if invoice is None:
                return Return.ok(
                    OrderLockStatusDTO(
                        order_id=order.id,
                        order_number=order.order_number,
                        is_locked=False,
                        locked_reason="Order is not linked to an invoice",
                        history=history,
                    )
                )

            status = InvoiceStatus(invoice.status)
            if status.locks_orders:
                reason = f"Order locked by invoice {invoice.invoice_number} (status: {status.value})"
            else:
                reason = "Order editable (invoice is draft)"

            return Return.ok(
                OrderLockStatusDTO(
                    order_id=order.id,
                    order_number=order.order_number,
                    is_locked=status.locks_orders,
                    invoice_id=invoice.id,
                    invoice_number=invoice.invoice_number,
                    invoice_status=status.value,
                    locked_reason=reason,
                    history=history,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_ORDER_LOCK_STATUS_FAILED",
                    message="Failed to get order lock status",
                    reason=str(e),
                )
            )
