"""Client Domain Entity"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import DateTime, String
from src.domain.base import BaseModel, generate_uuid


class Client(BaseModel, table=True):
    """Client - warehouse customer billed monthly"""

    __tablename__ = "clients"

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
    )

    company_name: str = Field(
        description="Company name"
    )

    email: Optional[str] = Field(
        default=None,
        description="Billing contact email"
    )

    is_active: bool = Field(
        default=True,
        description="Inactive clients are skipped by monthly invoicing"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )
