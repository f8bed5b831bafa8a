"""Invoice Domain Entity

Monthly bill for one client, built from the orders fulfilled in a
calendar month. Line items are embedded in the invoice record.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON, Date, DateTime, Numeric, String, Text, UniqueConstraint
from src.domain.base import BaseModel, generate_uuid


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    PARTIAL = "partial"
    PAID = "paid"

    @property
    def locks_orders(self) -> bool:
        """Orders linked to a non-draft invoice are treated as immutable"""
        return self is not InvoiceStatus.DRAFT


class InvoiceType(str, Enum):
    """Invoice types"""
    MONTHLY = "monthly"


class Invoice(BaseModel, table=True):
    """
    Invoice - Monthly fulfillment bill for a client

    Domain Rules:
    - At most one monthly invoice per (client_id, billing month, billing year)
    - invoice_number is INV-YYYYMM-XXXXXX (last six chars of client_id);
      clients sharing an id suffix share a number, so it is indexed, not unique
    - tax is not charged: total_amount == subtotal, tax_amount == 0
    - balance_due equals total_amount at creation
    - due_date is billing_period_end + 30 days
    - Status transitions: draft -> sent -> partial/paid
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_client_id', 'client_id'),
        Index('ix_invoices_status', 'status'),
        Index('ix_invoices_invoice_number', 'invoice_number'),
        UniqueConstraint(
            'client_id', 'billing_period_month', 'billing_period_year', 'type',
            name='uq_invoices_client_period_type',
        ),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="Unique invoice identifier (UUID)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Human-readable invoice number (e.g., INV-202603-0000AB)"
    )

    client_id: str = Field(
        description="Client ID"
    )

    type: InvoiceType = Field(
        default=InvoiceType.MONTHLY,
        description="Invoice type"
    )

    billing_period_month: int = Field(
        description="Billing month (1-12)"
    )

    billing_period_year: int = Field(
        description="Billing year"
    )

    billing_period_start: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        description="First instant of the billing month (UTC)"
    )

    billing_period_end: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        description="Last second of the billing month (UTC)"
    )

    order_count: int = Field(
        default=0,
        description="Number of orders included in the invoice"
    )

    line_items: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="One line item per order; first carries the per-SKU breakdown"
    )

    subtotal: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Sum of order charges"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 2), nullable=False),
        description="Tax rate (always zero)"
    )

    tax_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Tax amount (always zero)"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Total amount (subtotal + tax)"
    )

    balance_due: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Outstanding balance"
    )

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Payment due date"
    )

    status: InvoiceStatus = Field(
        description="Invoice status (draft, sent, partial, paid)"
    )

    created_by: Optional[str] = Field(
        default=None,
        description="User (or 'system') that generated the invoice"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-text notes"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Last update timestamp"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "5b0f7a52-3c1e-4a6e-9a55-0000000000ab",
                "invoice_number": "INV-202603-0000AB",
                "client_id": "c-0000000000ab",
                "type": "monthly",
                "billing_period_month": 3,
                "billing_period_year": 2026,
                "billing_period_start": "2026-03-01T00:00:00",
                "billing_period_end": "2026-03-31T23:59:59",
                "order_count": 2,
                "subtotal": "7.50",
                "tax_amount": "0.00",
                "total_amount": "7.50",
                "balance_due": "7.50",
                "due_date": "2026-04-30",
                "status": "draft",
                "created_by": "system",
            }
        }
