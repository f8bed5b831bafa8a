"""Request and response schemas for Invoice API

Pydantic models for validating incoming HTTP requests and shaping the
monthly invoice generation response.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from src.app.use_cases.billing.dtos import (
    ExistingInvoiceDTO,
    GeneratedInvoiceDTO,
    InvoiceDTO,
    InvoiceGenerationStatsDTO,
    MonthlyInvoiceOutcome,
)


class GenerateMonthlyInvoiceRequestSchema(BaseModel):
    """
    Request schema for generating a monthly invoice

    Used for POST /billing/invoices/monthly endpoint.
    """

    client_id: str = Field(
        ...,
        min_length=1,
        description="Client identifier (required, non-empty)"
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
        description="User triggering the generation"
    )

    is_draft: bool = Field(
        default=False,
        description="Create as draft instead of sending (orders stay editable)"
    )

    @field_validator('client_id', 'actor_id')
    @classmethod
    def strip_identifier(cls, v):
        """Reject whitespace-only identifiers"""
        v = v.strip()
        if not v:
            raise ValueError("Identifier must not be blank")
        return v

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


class MonthlyInvoiceResponseSchema(BaseModel):
    """
    Response schema for monthly invoice generation

    success=true means an invoice was written; skipped=true means there
    was nothing to do.
    """

    success: bool
    skipped: bool = False
    reason: Optional[str] = None
    message: str
    data: Optional[InvoiceDTO] = None
    stats: Optional[InvoiceGenerationStatsDTO] = None
    existing_invoice: Optional[ExistingInvoiceDTO] = None

    @classmethod
    def from_outcome(cls, outcome: MonthlyInvoiceOutcome) -> "MonthlyInvoiceResponseSchema":
        if isinstance(outcome, GeneratedInvoiceDTO):
            return cls(
                success=True,
                message=outcome.message,
                data=outcome.invoice,
                stats=outcome.stats,
            )
        return cls(
            success=False,
            skipped=True,
            reason=outcome.reason.value,
            message=outcome.message,
            existing_invoice=outcome.existing_invoice,
        )
