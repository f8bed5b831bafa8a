"""Billing domain use cases"""
from .generate_monthly_invoice import GenerateMonthlyInvoice, OrderLinkError
from .get_order_lock_status import GetOrderLockStatus
from .rebuild_monthly_invoice import RebuildMonthlyInvoice
from .dtos import (
    GenerateMonthlyInvoiceCommandDTO,
    SkipReason,
    InvoiceBreakdownEntryDTO,
    InvoiceLineItemDTO,
    InvoiceDTO,
    InvoiceGenerationStatsDTO,
    ExistingInvoiceDTO,
    GeneratedInvoiceDTO,
    SkippedInvoiceDTO,
    MonthlyInvoiceOutcome,
    OrderLockAuditDTO,
    OrderLockStatusDTO,
    ClientInvoiceRunDTO,
    MonthlyInvoiceRunResultDTO,
)

__all__ = [
    "GenerateMonthlyInvoice",
    "OrderLinkError",
    "GetOrderLockStatus",
    "RebuildMonthlyInvoice",
    "GenerateMonthlyInvoiceCommandDTO",
    "SkipReason",
    "InvoiceBreakdownEntryDTO",
    "InvoiceLineItemDTO",
    "InvoiceDTO",
    "InvoiceGenerationStatsDTO",
    "ExistingInvoiceDTO",
    "GeneratedInvoiceDTO",
    "SkippedInvoiceDTO",
    "MonthlyInvoiceOutcome",
    "OrderLockAuditDTO",
    "OrderLockStatusDTO",
    "ClientInvoiceRunDTO",
    "MonthlyInvoiceRunResultDTO",
]
