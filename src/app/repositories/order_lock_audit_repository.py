"""Order Lock Audit Repository Interface

Append-only: no update or delete operations.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.order_lock_audit import OrderLockAudit


class OrderLockAuditRepository(ABC):
    """Repository interface for the order lock audit trail"""

    @abstractmethod
    async def create_many(self, records: List[OrderLockAudit]) -> List[OrderLockAudit]:
        """
        Insert audit records

        Args:
            records: OrderLockAudit entities to persist

        Returns:
            Created records
        """
        pass

    @abstractmethod
    async def get_by_order_id(self, order_id: str) -> List[OrderLockAudit]:
        """
        Retrieve an order's lock history, oldest first
        """
        pass
