"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.invoice import Invoice, InvoiceType


class DuplicateInvoiceError(Exception):
    """Raised when an insert collides with an invoice for the same client and period"""


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Provides access to invoice data for billing operations.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice

        Raises:
            DuplicateInvoiceError: an invoice already exists for the period
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_for_period(
        self,
        client_id: str,
        month: int,
        year: int,
        invoice_type: InvoiceType = InvoiceType.MONTHLY,
    ) -> Optional[Invoice]:
        """
        Retrieve the client's invoice for a billing month

        Used to prevent duplicate invoice generation.

        Args:
            client_id: Client identifier
            month: Billing month (1-12)
            year: Billing year
            invoice_type: Invoice type

        Returns:
            Invoice if one exists, None otherwise
        """
        pass

    @abstractmethod
    async def delete(self, invoice_id: str) -> None:
        """
        Delete an invoice

        Only used to compensate a failed generation.

        Args:
            invoice_id: Invoice ID
        """
        pass
