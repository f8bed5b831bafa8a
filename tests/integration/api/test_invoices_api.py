"""Integration tests for Invoice and Order API endpoints"""

import pytest
from datetime import datetime
from decimal import Decimal
from httpx import AsyncClient
from sqlmodel import select
from unittest.mock import AsyncMock

from src.depends import build_invoice_generator, get_invoice_generator
from src.domain.invoice import Invoice, InvoiceStatus

CLIENT_ID = "c-0000000000ab"


def monthly_payload(**overrides):
    payload = {
        "client_id": CLIENT_ID,
        "month": 3,
        "year": 2026,
        "actor_id": "user_123",
    }
    payload.update(overrides)
    return payload


class TestInvoicesAPIIntegration:
    """Integration test suite for POST /billing/invoices/monthly"""

    @pytest.mark.asyncio
    async def test_generate_monthly_invoice_created(self, client: AsyncClient, seed):
        """POST /billing/invoices/monthly with billable orders returns 201"""
        # Arrange
        await seed.client(CLIENT_ID)
        await seed.order("o1", CLIENT_ID, [3], delivered_at=datetime(2026, 3, 5))
        await seed.order("o2", CLIENT_ID, [1], delivered_at=datetime(2026, 3, 20))

        # Act
        response = await client.post("/billing/invoices/monthly", json=monthly_payload())

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["skipped"] is False
        assert data["message"] == "Invoice INV-202603-0000AB generated successfully"
        assert data["data"]["invoice_number"] == "INV-202603-0000AB"
        assert data["data"]["status"] == "sent"
        assert data["data"]["due_date"] == "2026-04-30"
        assert Decimal(data["data"]["total_amount"]) == Decimal("7.50")
        assert len(data["data"]["line_items"]) == 2
        assert data["stats"]["order_count"] == 2
        assert data["stats"]["total_units"] == 4
        assert data["stats"]["orders_locked"] is True

    @pytest.mark.asyncio
    async def test_generate_monthly_invoice_duplicate_skipped(self, client: AsyncClient, seed):
        """Second POST for the same client and month returns 200 skipped"""
        await seed.client(CLIENT_ID)
        await seed.order("o1", CLIENT_ID, [1], delivered_at=datetime(2026, 3, 5))

        first = await client.post("/billing/invoices/monthly", json=monthly_payload())
        second = await client.post("/billing/invoices/monthly", json=monthly_payload())

        assert first.status_code == 201
        assert second.status_code == 200
        data = second.json()
        assert data["success"] is False
        assert data["skipped"] is True
        assert data["reason"] == "duplicate"
        assert data["message"] == "Invoice already exists: INV-202603-0000AB"
        assert data["existing_invoice"]["id"] == first.json()["data"]["id"]

    @pytest.mark.asyncio
    async def test_generate_monthly_invoice_failure_returns_500(self, app, client: AsyncClient, db_session, seed):
        """POST /billing/invoices/monthly returns 500 with the error body when linking fails"""
        # Arrange
        await seed.client(CLIENT_ID)
        await seed.order("o1", CLIENT_ID, [1], delivered_at=datetime(2026, 3, 5))

        async def generator_with_failing_link():
            use_case = build_invoice_generator(db_session)
            use_case.order_repo.link_to_invoice = AsyncMock(side_effect=Exception("deadlock detected"))
            return use_case

        app.dependency_overrides[get_invoice_generator] = generator_with_failing_link

        # Act
        response = await client.post("/billing/invoices/monthly", json=monthly_payload())

        # Assert
        assert response.status_code == 500
        assert response.json() == {
            "error": {
                "code": "ORDER_LINK_FAILED",
                "message": "Transaction failed: could not link orders to invoice",
            }
        }
        rows = await db_session.execute(select(Invoice.id))
        assert rows.all() == []

    @pytest.mark.asyncio
    async def test_generate_monthly_invoice_no_orders(self, client: AsyncClient, seed):
        await seed.client(CLIENT_ID)

        response = await client.post("/billing/invoices/monthly", json=monthly_payload())

        assert response.status_code == 200
        assert response.json()["reason"] == "no_orders"
        assert response.json()["data"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"month": 13},
            {"month": 0},
            {"year": 1999},
            {"client_id": ""},
            {"client_id": "   "},
            {"actor_id": ""},
        ],
    )
    async def test_generate_monthly_invoice_validation_error(self, client: AsyncClient, overrides):
        """POST /billing/invoices/monthly with invalid request returns 400"""
        response = await client.post("/billing/invoices/monthly", json=monthly_payload(**overrides))

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_generate_monthly_invoice_missing_field(self, client: AsyncClient):
        payload = monthly_payload()
        del payload["actor_id"]

        response = await client.post("/billing/invoices/monthly", json=payload)

        assert response.status_code == 400
        assert "actor_id" in response.json()["error"]["message"]


class TestOrderLockAPIIntegration:
    """Integration test suite for GET /billing/orders/{order_id}/lock"""

    @pytest.mark.asyncio
    async def test_unlinked_order(self, client: AsyncClient, seed):
        await seed.client(CLIENT_ID)
        await seed.order("o1", CLIENT_ID, [1], delivered_at=datetime(2026, 3, 5))

        response = await client.get("/billing/orders/o1/lock")

        assert response.status_code == 200
        data = response.json()
        assert data["is_locked"] is False
        assert data["locked_reason"] == "Order is not linked to an invoice"
        assert data["history"] == []

    @pytest.mark.asyncio
    async def test_order_locked_after_sent_invoice(self, client: AsyncClient, seed):
        """
        Given: Order billed on a sent invoice
        When: Getting lock status
        Then: Locked with audit history
        """
        await seed.client(CLIENT_ID)
        await seed.order("o1", CLIENT_ID, [1], delivered_at=datetime(2026, 3, 5))
        await client.post("/billing/invoices/monthly", json=monthly_payload())

        response = await client.get("/billing/orders/o1/lock")

        assert response.status_code == 200
        data = response.json()
        assert data["is_locked"] is True
        assert data["invoice_number"] == "INV-202603-0000AB"
        assert data["invoice_status"] == "sent"
        assert data["locked_reason"] == "Order locked by invoice INV-202603-0000AB (status: sent)"
        assert len(data["history"]) == 1
        assert data["history"][0]["locked_by"] == "user_123"

    @pytest.mark.asyncio
    async def test_order_editable_on_draft_invoice(self, client: AsyncClient, seed):
        await seed.client(CLIENT_ID)
        await seed.order("o1", CLIENT_ID, [1], delivered_at=datetime(2026, 3, 5))
        await client.post("/billing/invoices/monthly", json=monthly_payload(is_draft=True))

        response = await client.get("/billing/orders/o1/lock")

        data = response.json()
        assert data["is_locked"] is False
        assert data["invoice_status"] == "draft"
        assert data["locked_reason"] == "Order editable (invoice is draft)"

    @pytest.mark.asyncio
    async def test_unknown_order_returns_404(self, client: AsyncClient):
        response = await client.get("/billing/orders/missing/lock")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ORDER_NOT_FOUND"


class TestRebuildInvoiceAPIIntegration:
    """Integration test suite for POST /billing/invoices/monthly/rebuild"""

    @pytest.mark.asyncio
    async def test_rebuild_replaces_invoice(self, client: AsyncClient, seed):
        """Rebuild after a late order returns 201 with the corrected invoice"""
        await seed.client(CLIENT_ID)
        await seed.order("o1", CLIENT_ID, [1], delivered_at=datetime(2026, 3, 5))
        first = await client.post("/billing/invoices/monthly", json=monthly_payload())
        await seed.order("o2", CLIENT_ID, [1], delivered_at=datetime(2026, 3, 28))

        response = await client.post(
            "/billing/invoices/monthly/rebuild", json=monthly_payload(actor_id="admin_1")
        )

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["data"]["id"] != first.json()["data"]["id"]
        assert Decimal(data["data"]["total_amount"]) == Decimal("5.00")
        assert data["stats"]["order_count"] == 2

    @pytest.mark.asyncio
    async def test_rebuild_paid_invoice_refused(self, client: AsyncClient, db_session, seed):
        await seed.client(CLIENT_ID)
        await seed.order("o1", CLIENT_ID, [1], delivered_at=datetime(2026, 3, 5))
        created = await client.post("/billing/invoices/monthly", json=monthly_payload())
        invoice = await db_session.get(Invoice, created.json()["data"]["id"])
        invoice.status = InvoiceStatus.PAID
        await db_session.commit()

        response = await client.post("/billing/invoices/monthly/rebuild", json=monthly_payload())

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVOICE_PAID"

    @pytest.mark.asyncio
    async def test_rebuild_without_invoice_returns_404(self, client: AsyncClient, seed):
        await seed.client(CLIENT_ID)

        response = await client.post("/billing/invoices/monthly/rebuild", json=monthly_payload())

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "INVOICE_NOT_FOUND"
