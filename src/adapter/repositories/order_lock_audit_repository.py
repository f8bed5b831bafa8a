"""SQLAlchemy Order Lock Audit Repository Implementation"""

from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_lock_audit_repository import OrderLockAuditRepository
from src.domain.order_lock_audit import OrderLockAudit


class SqlAlchemyOrderLockAuditRepository(OrderLockAuditRepository):
    """SQLAlchemy implementation of OrderLockAuditRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_many(self, records: List[OrderLockAudit]) -> List[OrderLockAudit]:
        self.session.add_all(records)
        await self.session.flush()
        return records

    async def get_by_order_id(self, order_id: str) -> List[OrderLockAudit]:
        statement = (
            select(OrderLockAudit)
            .where(OrderLockAudit.order_id == order_id)
            .order_by(OrderLockAudit.locked_at)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
