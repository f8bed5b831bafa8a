"""Order Item Domain Entity"""

from typing import Optional
from sqlmodel import Field, Column, Index, SQLModel
from sqlalchemy import ForeignKey, String
from src.domain.base import BaseModel, generate_uuid


class OrderItem(BaseModel, table=True):
    """Order Item - quantity of one product within an order"""

    __tablename__ = "order_items"
    __table_args__ = (
        Index('ix_order_items_order_id', 'order_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
    )

    order_id: str = Field(
        sa_column=Column(
            String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
        ),
    )

    product_id: Optional[str] = Field(
        default=None,
        sa_column=Column(
            String(36), ForeignKey("products.id", ondelete="SET NULL"), nullable=True
        ),
    )

    quantity: Optional[int] = Field(
        default=0,
        description="Units ordered"
    )


class OrderItemDetail(SQLModel):
    """Order item joined with its product (read model)"""

    order_item_id: str
    order_id: str
    quantity: int = 0
    product_id: Optional[str] = None
    sku: Optional[str] = None
    product_name: Optional[str] = None
    category: Optional[str] = None
