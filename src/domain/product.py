"""Product Domain Entity"""

from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String
from src.domain.base import BaseModel, generate_uuid


class Product(BaseModel, table=True):
    """Product - stock keeping unit stored for a client"""

    __tablename__ = "products"

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
    )

    sku: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Stock keeping unit code"
    )

    name: str = Field(
        description="Product name"
    )

    category: Optional[str] = Field(
        default=None,
        description="Product category"
    )
