"""Background workers"""
from .monthly_invoicing import MonthlyInvoiceWorker

__all__ = ["MonthlyInvoiceWorker"]
