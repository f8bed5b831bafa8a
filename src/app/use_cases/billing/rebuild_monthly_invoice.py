"""RebuildMonthlyInvoice Use Case

Replaces an unpaid monthly invoice with a freshly generated one, for
corrections after order data changed.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.order_repository import OrderRepository
from src.domain.invoice import InvoiceStatus
from .generate_monthly_invoice import GenerateMonthlyInvoice
from .dtos import GenerateMonthlyInvoiceCommandDTO, MonthlyInvoiceOutcome

logger = logging.getLogger(__name__)


class RebuildMonthlyInvoice:
    """
    Use Case: Rebuild a client's monthly invoice

    Business Rules:
    1. Only an existing invoice can be rebuilt; otherwise use generation
    2. Paid invoices are never rebuilt
    3. The old invoice is removed and its orders released before regenerating
    4. Regeneration follows GenerateMonthlyInvoice exactly

    Flow:
    1. Look up the invoice for the period
    2. Refuse when missing or paid
    3. Unlink orders, delete invoice, commit
    4. Delegate to GenerateMonthlyInvoice
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        order_repo: OrderRepository,
        generator: GenerateMonthlyInvoice,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.order_repo = order_repo
        self.generator = generator

    async def execute(
        self, command: GenerateMonthlyInvoiceCommandDTO
    ) -> Result[MonthlyInvoiceOutcome]:
        try:
            existing = await self.invoice_repo.get_for_period(
                client_id=command.client_id,
                month=command.month,
                year=command.year,
            )

            if not existing:
                return Return.err(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message="No invoice found for this period. Use generate instead of rebuild.",
                        reason=f"client {command.client_id}, {command.year}-{command.month:02d}",
                    )
                )

            invoice_id = existing.id
            invoice_number = existing.invoice_number
            old_amount = existing.total_amount

            if InvoiceStatus(existing.status) is InvoiceStatus.PAID:
                return Return.err(
                    Error(
                        code="INVOICE_PAID",
                        message=f"Invoice {invoice_number} is already paid and cannot be rebuilt",
                    )
                )

            logger.info(
                f"Rebuild requested for invoice {invoice_number} by {command.actor_id} "
                f"(old amount: {old_amount})"
            )

            released = await self.order_repo.unlink_from_invoice(invoice_id)
            await self.invoice_repo.delete(invoice_id)
            await self.uow.commit()

            logger.info(f"Deleted invoice {invoice_number}; released {released} orders")

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to remove invoice for rebuild (client {command.client_id}): {e}")
            return Return.err(
                Error(
                    code="INVOICE_REBUILD_FAILED",
                    message="Failed to delete existing invoice for rebuild",
                    reason=str(e),
                )
            )

        return await self.generator.execute(command)
