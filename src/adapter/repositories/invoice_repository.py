"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository, DuplicateInvoiceError
from src.domain.invoice import Invoice, InvoiceType


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        A unique violation on the client billing period surfaces
        as DuplicateInvoiceError. The session must be rolled back afterwards.
        """
        self.session.add(invoice)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DuplicateInvoiceError(str(e.orig)) from e
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        statement = select(Invoice).where(Invoice.id == invoice_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_for_period(
        self,
        client_id: str,
        month: int,
        year: int,
        invoice_type: InvoiceType = InvoiceType.MONTHLY,
    ) -> Optional[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.client_id == client_id)
            .where(Invoice.type == invoice_type)
            .where(Invoice.billing_period_month == month)
            .where(Invoice.billing_period_year == year)
        )
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def delete(self, invoice_id: str) -> None:
        statement = delete(Invoice).where(Invoice.id == invoice_id)
        await self.session.execute(statement)
        await self.session.flush()
