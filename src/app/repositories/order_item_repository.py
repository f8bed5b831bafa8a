"""Order Item Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.order_item import OrderItemDetail


class OrderItemRepository(ABC):
    """Repository interface for reading order items with product details"""

    @abstractmethod
    async def get_details_by_order_id(self, order_id: str) -> List[OrderItemDetail]:
        """
        Retrieve an order's items joined with product SKU, name and category

        Args:
            order_id: Order ID

        Returns:
            List of OrderItemDetail
        """
        pass
