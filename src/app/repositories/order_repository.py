"""Order Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from src.domain.order import Order, OrderStatus


class OrderRepository(ABC):
    """Repository interface for Order reads and invoice linking"""

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_client_and_statuses(
        self, client_id: str, statuses: Sequence[OrderStatus]
    ) -> List[Order]:
        """
        Retrieve a client's orders in any of the given statuses

        Returns:
            Orders sorted by creation time
        """
        pass

    @abstractmethod
    async def link_to_invoice(
        self, order_ids: Sequence[str], invoice_id: str, invoice_number: str
    ) -> int:
        """
        Point orders at an invoice

        Orders already linked to a different invoice are left untouched.

        Args:
            order_ids: Orders to link
            invoice_id: Invoice ID
            invoice_number: Legacy invoice-number reference

        Returns:
            Number of orders updated
        """
        pass

    @abstractmethod
    async def unlink_from_invoice(self, invoice_id: str) -> int:
        """
        Clear the invoice reference of every order linked to an invoice

        Returns:
            Number of orders updated
        """
        pass
