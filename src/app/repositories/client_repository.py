"""Client Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.client import Client


class ClientRepository(ABC):
    """Repository interface for Client reads"""

    @abstractmethod
    async def get_active_clients(self) -> List[Client]:
        """
        Retrieve all active clients ordered by company name
        """
        pass
