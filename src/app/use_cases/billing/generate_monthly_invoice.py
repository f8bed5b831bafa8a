"""GenerateMonthlyInvoice Use Case

Bills a client for the orders fulfilled in one calendar month and links
those orders to the new invoice.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository, DuplicateInvoiceError
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_item_repository import OrderItemRepository
from src.app.repositories.order_lock_audit_repository import OrderLockAuditRepository
from src.domain.invoice import Invoice, InvoiceStatus, InvoiceType
from src.domain.order import Order, BILLABLE_ORDER_STATUSES
from src.domain.order_lock_audit import OrderLockAudit
from .invoice_calculation import (
    build_invoice_notes,
    build_invoice_number,
    calculate_due_date,
    calculate_order_charge,
    calculate_unit_rate,
    get_billing_period,
    is_fulfilled_within,
    round_money,
)
from .dtos import (
    ExistingInvoiceDTO,
    GenerateMonthlyInvoiceCommandDTO,
    GeneratedInvoiceDTO,
    InvoiceBreakdownEntryDTO,
    InvoiceDTO,
    InvoiceGenerationStatsDTO,
    InvoiceLineItemDTO,
    MonthlyInvoiceOutcome,
    SkipReason,
    SkippedInvoiceDTO,
)

logger = logging.getLogger(__name__)


class OrderLinkError(Exception):
    """Raised when not every targeted order could be linked to the invoice"""


@dataclass
class OrderPricing:
    line_items: List[InvoiceLineItemDTO] = field(default_factory=list)
    total_amount: Decimal = Decimal("0")
    total_units: int = 0


class GenerateMonthlyInvoice:
    """
    Use Case: Generate a monthly invoice for a client

    Business Rules:
    1. At most one monthly invoice per client and billing month
    2. Orders are billed in the month of their fulfillment timestamp
       (delivered_at, else dispatched_at), inclusive of both period ends
    3. Order charge = 2.50 + (units - 1) x 1.25; zero-unit orders are free
    4. No invoice is written when nothing is billable
    5. Invoice and order links succeed together or the invoice is removed
    6. Lock audit loss does not undo the invoice

    Flow:
    1. Check for an existing invoice for the period
    2. Derive billing period
    3. Collect orders fulfilled in the period
    4. Price each order from its items
    5. Assemble the invoice
    6. Insert invoice, link orders, write lock audit
    7. Return invoice and stats
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        order_repo: OrderRepository,
        order_item_repo: OrderItemRepository,
        lock_audit_repo: OrderLockAuditRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.order_repo = order_repo
        self.order_item_repo = order_item_repo
        self.lock_audit_repo = lock_audit_repo

    async def execute(
        self, command: GenerateMonthlyInvoiceCommandDTO
    ) -> Result[MonthlyInvoiceOutcome]:
        """
        Execute monthly invoice generation

        Args:
            command: GenerateMonthlyInvoiceCommandDTO with client, period, actor, draft flag

        Returns:
            Result[MonthlyInvoiceOutcome]: generated or skipped outcome, or error
        """
        # Identity of the persisted invoice, captured before any rollback
        # can expire the ORM instance
        created_id: Optional[str] = None
        created_number: Optional[str] = None

        try:
            # Step 1: Idempotency check
            existing = await self.invoice_repo.get_for_period(
                client_id=command.client_id,
                month=command.month,
                year=command.year,
            )

            if existing:
                logger.info(
                    f"Invoice {existing.invoice_number} already exists for client "
                    f"{command.client_id} ({command.year}-{command.month:02d})"
                )
                return Return.ok(self._duplicate(existing))

            # Step 2: Billing period
            period_start, period_end = get_billing_period(command.year, command.month)

            # Step 3: Orders fulfilled within the period
            candidates = await self.order_repo.get_by_client_and_statuses(
                command.client_id, BILLABLE_ORDER_STATUSES
            )
            orders = [
                order for order in candidates
                if is_fulfilled_within(order, period_start, period_end)
            ]

            if not orders:
                return Return.ok(
                    SkippedInvoiceDTO(
                        reason=SkipReason.NO_ORDERS,
                        message="No billable orders found for this period",
                    )
                )

            # Step 4: Price orders
            pricing = await self._price_orders(orders)

            if pricing.total_amount == 0:
                return Return.ok(
                    SkippedInvoiceDTO(
                        reason=SkipReason.ZERO_AMOUNT,
                        message="No billable orders found (all orders have zero units)",
                    )
                )

            # Step 5: Assemble invoice
            invoice = self._build_invoice(command, period_start, period_end, orders, pricing)
            invoice_number = invoice.invoice_number
            order_ids = [order.id for order in orders]

            # Step 6.1: Insert invoice
            try:
                persisted = await self.invoice_repo.create(invoice)
                await self.uow.commit()
            except DuplicateInvoiceError:
                await self.uow.rollback()
                return await self._resolve_insert_conflict(command)
            except Exception as e:
                await self.uow.rollback()
                logger.error(f"Failed to create invoice {invoice_number}: {e}")
                return Return.err(
                    Error(
                        code="INVOICE_CREATE_FAILED",
                        message=f"Failed to create invoice {invoice_number}",
                        reason=str(e),
                    )
                )

            created_id = persisted.id
            created_number = persisted.invoice_number
            created_status = InvoiceStatus(persisted.status)

            # Step 6.2: Link orders (all or none)
            try:
                linked = await self.order_repo.link_to_invoice(
                    order_ids, created_id, created_number
                )
                if linked != len(order_ids):
                    raise OrderLinkError(
                        f"Linked {linked} of {len(order_ids)} orders; "
                        f"the rest are linked to another invoice"
                    )
                await self.uow.commit()
            except Exception as e:
                await self.uow.rollback()
                logger.error(
                    f"Failed to link orders to invoice {created_number}. Rolling back..."
                )
                compensated = await self._compensate(created_id, created_number)
                created_id = None
                return Return.err(
                    Error(
                        code="ORDER_LINK_FAILED",
                        message="Transaction failed: could not link orders to invoice",
                        reason=self._failure_reason(e, compensated),
                    )
                )

            invoice_dto = self._to_invoice_dto(persisted)

            # Step 6.3: Lock audit trail
            audit_recorded = await self._record_lock_audit(
                created_id, created_number, created_status, order_ids, command.actor_id
            )

            if created_status.locks_orders:
                lock_state = "locked (immutable)"
            else:
                lock_state = "linked (editable until sent)"
            logger.info(f"{len(order_ids)} orders {lock_state} to invoice {created_number}")

            # Step 7: Build response
            response = GeneratedInvoiceDTO(
                message=f"Invoice {created_number} generated successfully",
                invoice=invoice_dto,
                stats=InvoiceGenerationStatsDTO(
                    order_count=len(orders),
                    total_units=pricing.total_units,
                    total_amount=invoice_dto.total_amount,
                    orders_locked=True,
                    audit_recorded=audit_recorded,
                ),
            )

            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            compensated = None
            if created_id is not None:
                compensated = await self._compensate(created_id, created_number)
            logger.error(f"Invoice generation failed for client {command.client_id}: {e}")
            return Return.err(
                Error(
                    code="INVOICE_GENERATION_FAILED",
                    message="Invoice generation transaction failed",
                    reason=self._failure_reason(e, compensated),
                )
            )

    async def _price_orders(self, orders: List[Order]) -> OrderPricing:
        """
        Price orders in retrieval order

        The per-unit rate is rounded once per order and applied to every
        item, so an order's breakdown amounts can drift from its charge by
        up to a cent per item.
        """
        pricing = OrderPricing()
        breakdown: List[InvoiceBreakdownEntryDTO] = []

        for order in orders:
            items = await self.order_item_repo.get_details_by_order_id(order.id)
            order_units = sum(item.quantity or 0 for item in items)

            if order_units <= 0:
                continue

            charge = calculate_order_charge(order_units)
            rate = calculate_unit_rate(charge, order_units)
            pricing.total_amount += charge
            pricing.total_units += order_units

            order_date = order.delivered_at or order.dispatched_at or order.created_at
            for item in items:
                quantity = item.quantity or 0
                breakdown.append(
                    InvoiceBreakdownEntryDTO(
                        sku=item.sku or "N/A",
                        product_name=item.product_name or "Unknown Product",
                        order_number=order.order_number,
                        order_date=order_date,
                        quantity=quantity,
                        rate=rate,
                        amount=round_money(rate * quantity),
                    )
                )

            pricing.line_items.append(
                InvoiceLineItemDTO(
                    description=f"Order Fulfillment - Order #{order.order_number}",
                    quantity=order_units,
                    unit_price=rate,
                    amount=round_money(charge),
                    order_id=order.id,
                    order_number=order.order_number,
                )
            )

        if pricing.line_items:
            pricing.line_items[0].detailed_breakdown = breakdown

        return pricing

    def _build_invoice(self, command, period_start, period_end, orders, pricing) -> Invoice:
        subtotal = round_money(pricing.total_amount)
        tax_amount = Decimal("0.00")
        total_amount = subtotal + tax_amount

        return Invoice(
            invoice_number=build_invoice_number(command.client_id, command.year, command.month),
            client_id=command.client_id,
            type=InvoiceType.MONTHLY,
            billing_period_month=command.month,
            billing_period_year=command.year,
            billing_period_start=period_start,
            billing_period_end=period_end,
            order_count=len(orders),
            line_items=[
                item.model_dump(mode="json", exclude_none=True)
                for item in pricing.line_items
            ],
            subtotal=subtotal,
            tax_rate=Decimal("0"),
            tax_amount=tax_amount,
            total_amount=total_amount,
            balance_due=total_amount,
            due_date=calculate_due_date(period_end),
            status=InvoiceStatus.DRAFT if command.is_draft else InvoiceStatus.SENT,
            created_by=command.actor_id,
            notes=build_invoice_notes(command.month, command.year, command.is_draft),
        )

    async def _resolve_insert_conflict(
        self, command: GenerateMonthlyInvoiceCommandDTO
    ) -> Result[MonthlyInvoiceOutcome]:
        """A unique violation on insert means a concurrent run won the race"""
        logger.info(
            f"Concurrent generation detected for client {command.client_id} "
            f"({command.year}-{command.month:02d})"
        )

        existing = await self.invoice_repo.get_for_period(
            client_id=command.client_id,
            month=command.month,
            year=command.year,
        )

        if existing:
            return Return.ok(self._duplicate(existing))

        # Winner already gone (e.g. rebuilt in between); still nothing to write
        return Return.ok(
            SkippedInvoiceDTO(
                reason=SkipReason.DUPLICATE,
                message="Invoice already exists for this period",
            )
        )

    async def _record_lock_audit(
        self,
        invoice_id: str,
        invoice_number: str,
        invoice_status: InvoiceStatus,
        order_ids: List[str],
        actor_id: str,
    ) -> bool:
        records = [
            OrderLockAudit(
                order_id=order_id,
                invoice_id=invoice_id,
                locked_by=actor_id,
                invoice_status=invoice_status,
            )
            for order_id in order_ids
        ]

        try:
            await self.lock_audit_repo.create_many(records)
            await self.uow.commit()
            return True
        except Exception as e:
            await self.uow.rollback()
            logger.warning(
                f"Lock audit not recorded for invoice {invoice_number} "
                f"({len(order_ids)} orders): {e}"
            )
            return False

    async def _compensate(self, invoice_id: str, invoice_number: str) -> bool:
        """Unlink orders and delete the invoice"""
        try:
            await self.order_repo.unlink_from_invoice(invoice_id)
            await self.invoice_repo.delete(invoice_id)
            await self.uow.commit()
            logger.info(f"Rolled back invoice {invoice_number}")
            return True
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Rollback of invoice {invoice_number} ({invoice_id}) failed: {e}")
            return False

    @staticmethod
    def _failure_reason(error: Exception, compensated: Optional[bool]) -> str:
        if compensated is False:
            return f"{error} (invoice rollback failed; manual cleanup required)"
        return str(error)

    @staticmethod
    def _duplicate(existing: Invoice) -> SkippedInvoiceDTO:
        return SkippedInvoiceDTO(
            reason=SkipReason.DUPLICATE,
            message=f"Invoice already exists: {existing.invoice_number}",
            existing_invoice=ExistingInvoiceDTO(
                id=existing.id,
                invoice_number=existing.invoice_number,
                status=InvoiceStatus(existing.status).value,
            ),
        )

    @staticmethod
    def _to_invoice_dto(invoice: Invoice) -> InvoiceDTO:
        return InvoiceDTO(
            id=invoice.id,
            invoice_number=invoice.invoice_number,
            client_id=invoice.client_id,
            type=InvoiceType(invoice.type).value,
            status=InvoiceStatus(invoice.status).value,
            billing_period_month=invoice.billing_period_month,
            billing_period_year=invoice.billing_period_year,
            billing_period_start=invoice.billing_period_start,
            billing_period_end=invoice.billing_period_end,
            order_count=invoice.order_count,
            line_items=invoice.line_items,
            subtotal=invoice.subtotal,
            tax_amount=invoice.tax_amount,
            total_amount=invoice.total_amount,
            balance_due=invoice.balance_due,
            due_date=invoice.due_date,
            created_by=invoice.created_by,
            notes=invoice.notes,
            created_at=invoice.created_at,
        )
