"""Order Lock Audit Domain Entity

Append-only trail of orders being linked to invoices.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from src.domain.base import BaseModel, generate_uuid
from src.domain.invoice import InvoiceStatus


class OrderLockAudit(BaseModel, table=True):
    """
    Order Lock Audit - one row per order per invoice generation

    Domain Rules:
    - Records are immutable (append-only)
    - invoice_status is captured at lock time, distinguishing draft-time
      linking from final locking
    """

    __tablename__ = "order_lock_audit"
    __table_args__ = (
        Index('ix_order_lock_audit_order_id', 'order_id'),
        Index('ix_order_lock_audit_invoice_id', 'invoice_id'),
        UniqueConstraint('order_id', 'invoice_id', name='uq_order_lock_audit_order_invoice'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
    )

    order_id: str = Field(
        sa_column=Column(
            String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
        ),
        description="Linked order"
    )

    invoice_id: str = Field(
        sa_column=Column(
            String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False
        ),
        description="Invoice the order was linked to"
    )

    locked_by: Optional[str] = Field(
        default=None,
        description="Actor that triggered the generation"
    )

    invoice_status: InvoiceStatus = Field(
        description="Invoice status at lock time"
    )

    locked_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Lock timestamp (immutable)"
    )
