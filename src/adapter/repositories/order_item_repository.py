"""SQLAlchemy Order Item Repository Implementation"""

from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_item_repository import OrderItemRepository
from src.domain.order_item import OrderItem, OrderItemDetail
from src.domain.product import Product


class SqlAlchemyOrderItemRepository(OrderItemRepository):
    """SQLAlchemy implementation of OrderItemRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_details_by_order_id(self, order_id: str) -> List[OrderItemDetail]:
        statement = (
            select(OrderItem, Product)
            .outerjoin(Product, OrderItem.product_id == Product.id)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.id)
        )
        result = await self.session.execute(statement)

        return [
            OrderItemDetail(
                order_item_id=item.id,
                order_id=item.order_id,
                quantity=item.quantity or 0,
                product_id=item.product_id,
                sku=product.sku if product else None,
                product_name=product.name if product else None,
                category=product.category if product else None,
            )
            for item, product in result.all()
        ]
