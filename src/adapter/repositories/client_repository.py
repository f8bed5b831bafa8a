"""SQLAlchemy Client Repository Implementation"""

from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.client_repository import ClientRepository
from src.domain.client import Client


class SqlAlchemyClientRepository(ClientRepository):
    """SQLAlchemy implementation of ClientRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active_clients(self) -> List[Client]:
        statement = (
            select(Client)
            .where(Client.is_active == True)  # noqa: E712
            .order_by(Client.company_name)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
