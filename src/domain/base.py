"""Base classes shared by domain entities"""

from uuid import uuid4
from sqlmodel import SQLModel


def generate_uuid() -> str:
    """Generate a string UUID primary key"""
    return str(uuid4())


class BaseModel(SQLModel):
    """Base for all SQLModel entities"""
    pass
