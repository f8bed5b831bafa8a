"""Order Domain Entity

Client order tracked through fulfillment. Orders are billed in the month
they were delivered (or dispatched, if no delivery time is recorded).
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, ForeignKey, String
from src.domain.base import BaseModel, generate_uuid


class OrderStatus(str, Enum):
    """Order status types"""
    PENDING = "pending"
    PROCESSING = "processing"
    DISPATCHED = "dispatched"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


BILLABLE_ORDER_STATUSES = (OrderStatus.DELIVERED, OrderStatus.DISPATCHED)


class Order(BaseModel, table=True):
    """
    Order - Client fulfillment order

    Domain Rules:
    - An order is linked to at most one invoice (invoice_id)
    - Once linked to a non-draft invoice the order is locked by convention
    - invoiced_in is the legacy invoice-number reference, kept in sync with invoice_id
    """

    __tablename__ = "orders"
    __table_args__ = (
        Index('ix_orders_client_id_status', 'client_id', 'status'),
        Index('ix_orders_invoice_id', 'invoice_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="Unique order identifier (UUID)"
    )

    order_number: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Human-readable order number"
    )

    client_id: str = Field(
        description="Client ID"
    )

    status: OrderStatus = Field(
        default=OrderStatus.PENDING,
        description="Order status"
    )

    dispatched_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="Dispatch timestamp (UTC)"
    )

    delivered_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="Delivery timestamp (UTC)"
    )

    invoice_id: Optional[str] = Field(
        default=None,
        sa_column=Column(
            String(36), ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True
        ),
        description="Invoice this order is billed on"
    )

    invoiced_in: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Legacy invoice number reference"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Order creation timestamp"
    )

    @property
    def fulfilled_at(self) -> Optional[datetime]:
        """Delivery time if recorded, else dispatch time"""
        return self.delivered_at or self.dispatched_at
