"""Unit tests for RebuildMonthlyInvoice use case

Tests cover:
- Missing invoice refused
- Paid invoice refused
- Unpaid invoice removed, orders released, generation delegated
- Removal failure
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from libs.result import Return
from src.app.use_cases.billing.rebuild_monthly_invoice import RebuildMonthlyInvoice
from src.app.use_cases.billing.dtos import (
    GenerateMonthlyInvoiceCommandDTO,
    SkippedInvoiceDTO,
    SkipReason,
)
from src.domain.invoice import Invoice, InvoiceStatus

CLIENT_ID = "c-0000000000ab"


def make_invoice(status):
    return Invoice(
        id="inv-old",
        invoice_number="INV-202603-0000AB",
        client_id=CLIENT_ID,
        billing_period_month=3,
        billing_period_year=2026,
        billing_period_start=datetime(2026, 3, 1),
        billing_period_end=datetime(2026, 3, 31, 23, 59, 59),
        subtotal=Decimal("5.00"),
        total_amount=Decimal("5.00"),
        balance_due=Decimal("5.00"),
        due_date=date(2026, 4, 30),
        status=status,
    )


@pytest.fixture
def mock_invoice_repo():
    repo = MagicMock()
    repo.get_for_period = AsyncMock(return_value=None)
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def mock_order_repo():
    repo = MagicMock()
    repo.unlink_from_invoice = AsyncMock(return_value=2)
    return repo


@pytest.fixture
def mock_generator():
    generator = MagicMock()
    generator.execute = AsyncMock(
        return_value=Return.ok(
            SkippedInvoiceDTO(
                reason=SkipReason.NO_ORDERS,
                message="No billable orders found for this period",
            )
        )
    )
    return generator


@pytest.fixture
def use_case(mock_uow, mock_invoice_repo, mock_order_repo, mock_generator):
    """RebuildMonthlyInvoice use case instance with mocked dependencies"""
    return RebuildMonthlyInvoice(
        uow=mock_uow,
        invoice_repo=mock_invoice_repo,
        order_repo=mock_order_repo,
        generator=mock_generator,
    )


@pytest.fixture
def command():
    return GenerateMonthlyInvoiceCommandDTO(
        client_id=CLIENT_ID, month=3, year=2026, actor_id="admin_1"
    )


@pytest.mark.asyncio
class TestRebuildMonthlyInvoice:

    async def test_missing_invoice_refused(self, use_case, command, mock_generator, mock_invoice_repo):
        """
        Given: No invoice for the period
        When: Rebuilding
        Then: INVOICE_NOT_FOUND, nothing generated
        """
        result = await use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "INVOICE_NOT_FOUND"
        assert result.error.message == (
            "No invoice found for this period. Use generate instead of rebuild."
        )
        mock_invoice_repo.delete.assert_not_called()
        mock_generator.execute.assert_not_called()

    async def test_paid_invoice_refused(
        self, use_case, command, mock_invoice_repo, mock_order_repo, mock_generator
    ):
        """
        Given: The period's invoice is paid
        When: Rebuilding
        Then: INVOICE_PAID, invoice and order links untouched
        """
        mock_invoice_repo.get_for_period.return_value = make_invoice(InvoiceStatus.PAID)

        result = await use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "INVOICE_PAID"
        assert result.error.message == (
            "Invoice INV-202603-0000AB is already paid and cannot be rebuilt"
        )
        mock_order_repo.unlink_from_invoice.assert_not_called()
        mock_invoice_repo.delete.assert_not_called()
        mock_generator.execute.assert_not_called()

    @pytest.mark.parametrize(
        "status", [InvoiceStatus.DRAFT, InvoiceStatus.SENT, InvoiceStatus.PARTIAL]
    )
    async def test_unpaid_invoice_replaced(
        self, use_case, command, mock_invoice_repo, mock_order_repo, mock_generator, mock_uow, status
    ):
        """
        Given: An unpaid invoice for the period
        When: Rebuilding
        Then: Orders released, invoice deleted and committed, then generation runs
        """
        mock_invoice_repo.get_for_period.return_value = make_invoice(status)

        result = await use_case.execute(command)

        assert result.is_ok()
        assert result.value.reason == SkipReason.NO_ORDERS
        mock_order_repo.unlink_from_invoice.assert_called_once_with("inv-old")
        mock_invoice_repo.delete.assert_called_once_with("inv-old")
        mock_uow.commit.assert_called_once()
        mock_generator.execute.assert_called_once_with(command)

    async def test_removal_failure(
        self, use_case, command, mock_invoice_repo, mock_generator, mock_uow
    ):
        mock_invoice_repo.get_for_period.return_value = make_invoice(InvoiceStatus.SENT)
        mock_invoice_repo.delete.side_effect = Exception("lock timeout")

        result = await use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "INVOICE_REBUILD_FAILED"
        assert result.error.reason == "lock timeout"
        mock_uow.rollback.assert_called_once()
        mock_generator.execute.assert_not_called()
