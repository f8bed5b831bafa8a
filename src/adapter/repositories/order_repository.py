"""SQLAlchemy Order Repository Implementation"""

from typing import List, Optional, Sequence
from sqlalchemy import or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_repository import OrderRepository
from src.domain.order import Order, OrderStatus


class SqlAlchemyOrderRepository(OrderRepository):
    """SQLAlchemy implementation of OrderRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        statement = select(Order).where(Order.id == order_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_client_and_statuses(
        self, client_id: str, statuses: Sequence[OrderStatus]
    ) -> List[Order]:
        statement = (
            select(Order)
            .where(Order.client_id == client_id)
            .where(Order.status.in_(list(statuses)))
            .order_by(Order.created_at, Order.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def link_to_invoice(
        self, order_ids: Sequence[str], invoice_id: str, invoice_number: str
    ) -> int:
        """
        Link orders to an invoice in a single UPDATE

        The statement only touches orders that are unlinked or already
        linked to this invoice, so the returned count is lower than
        len(order_ids) when another invoice holds one of them.
        """
        if not order_ids:
            return 0

        statement = (
            update(Order)
            .where(Order.id.in_(list(order_ids)))
            .where(or_(Order.invoice_id.is_(None), Order.invoice_id == invoice_id))
            .values(invoice_id=invoice_id, invoiced_in=invoice_number)
        )
        result = await self.session.execute(statement)
        await self.session.flush()
        return result.rowcount

    async def unlink_from_invoice(self, invoice_id: str) -> int:
        statement = (
            update(Order)
            .where(Order.invoice_id == invoice_id)
            .values(invoice_id=None, invoiced_in=None)
        )
        result = await self.session.execute(statement)
        await self.session.flush()
        return result.rowcount
