"""Data Transfer Objects for Billing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, Field


class GenerateMonthlyInvoiceCommandDTO(BaseModel):
    """
    Command DTO for generating a monthly invoice

    Used as input to GenerateMonthlyInvoice use case.
    """

    client_id: str = Field(
        ...,
        min_length=1,
        description="Client identifier"
    )

    month: int = Field(
        ...,
        ge=1,
        le=12,
        description="Billing month (1-12)"
    )

    year: int = Field(
        ...,
        ge=2000,
        le=2100,
        description="Billing year"
    )

    actor_id: str = Field(
        ...,
        min_length=1,
        description="User who triggered generation ('system' for batch runs)"
    )

    is_draft: bool = Field(
        default=False,
        description="Create as draft (orders linked but not locked)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "c-0000000000ab",
                "month": 3,
                "year": 2026,
                "actor_id": "user_123",
                "is_draft": False
            }
        }


class SkipReason(str, Enum):
    """Why no invoice was written"""
    DUPLICATE = "duplicate"
    NO_ORDERS = "no_orders"
    ZERO_AMOUNT = "zero_amount"


class InvoiceBreakdownEntryDTO(BaseModel):
    """Per-SKU breakdown row used when rendering invoice documents"""

    sku: str
    product_name: str
    order_number: str
    order_date: datetime
    quantity: int
    unit: str = "ORD"
    rate: Decimal
    amount: Decimal


class InvoiceLineItemDTO(BaseModel):
    """
    One line item per billed order

    Only the first line item carries the detailed breakdown.
    """

    description: str
    quantity: int = Field(..., description="Billable units of the order")
    unit_price: Decimal = Field(..., description="Order charge divided by units")
    amount: Decimal = Field(..., description="Order charge")
    order_id: str
    order_number: str
    detailed_breakdown: Optional[List[InvoiceBreakdownEntryDTO]] = None


class InvoiceDTO(BaseModel):
    """Response DTO for a persisted invoice"""

    id: str
    invoice_number: str
    client_id: str
    type: str
    status: str
    billing_period_month: int
    billing_period_year: int
    billing_period_start: datetime
    billing_period_end: datetime
    order_count: int
    line_items: List[InvoiceLineItemDTO]
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    balance_due: Decimal
    due_date: date
    created_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class InvoiceGenerationStatsDTO(BaseModel):
    order_count: int
    total_units: int
    total_amount: Decimal
    orders_locked: bool = Field(
        ...,
        description="Orders were linked to the invoice"
    )
    audit_recorded: bool = Field(
        ...,
        description="Lock audit trail was written; false means the trail needs reconciliation"
    )


class ExistingInvoiceDTO(BaseModel):
    """Identifying fields of the invoice that blocked a duplicate"""

    id: str
    invoice_number: str
    status: str


class GeneratedInvoiceDTO(BaseModel):
    """Invoice persisted, orders linked"""

    outcome: Literal["generated"] = "generated"
    message: str
    invoice: InvoiceDTO
    stats: InvoiceGenerationStatsDTO


class SkippedInvoiceDTO(BaseModel):
    """Nothing to bill; no invoice written"""

    outcome: Literal["skipped"] = "skipped"
    reason: SkipReason
    message: str
    existing_invoice: Optional[ExistingInvoiceDTO] = None


MonthlyInvoiceOutcome = Annotated[
    Union[GeneratedInvoiceDTO, SkippedInvoiceDTO],
    Field(discriminator="outcome"),
]


class OrderLockAuditDTO(BaseModel):
    invoice_id: str
    invoice_status: str
    locked_by: Optional[str] = None
    locked_at: datetime


class OrderLockStatusDTO(BaseModel):
    """
    Response DTO for order lock status

    Returned by GetOrderLockStatus use case.
    """

    order_id: str
    order_number: str
    is_locked: bool
    invoice_id: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_status: Optional[str] = None
    locked_reason: str
    history: List[OrderLockAuditDTO] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "order_id": "0b7c3d0e-8f4a-4b1e-9d2c-7a1e5f6b9c01",
                "order_number": "ORD-1001",
                "is_locked": True,
                "invoice_id": "5b0f7a52-3c1e-4a6e-9a55-0000000000ab",
                "invoice_number": "INV-202603-0000AB",
                "invoice_status": "sent",
                "locked_reason": "Order locked by invoice INV-202603-0000AB (status: sent)",
                "history": []
            }
        }


class ClientInvoiceRunDTO(BaseModel):
    """Outcome of one client within a monthly invoicing run"""

    client_id: str
    client_name: str
    status: Literal["success", "skipped", "error"]
    invoice_number: Optional[str] = None
    amount: Optional[Decimal] = None
    order_count: Optional[int] = None
    reason: Optional[str] = None
    message: Optional[str] = None
    duration_ms: int


class MonthlyInvoiceRunResultDTO(BaseModel):
    """
    Summary DTO for a monthly invoicing run

    Returned by MonthlyInvoiceWorker.run_once.
    """

    billing_month: int
    billing_year: int
    total_clients: int
    successful: int
    skipped: int
    failed: int
    results: List[ClientInvoiceRunDTO] = Field(default_factory=list)
    execution_time_ms: int
