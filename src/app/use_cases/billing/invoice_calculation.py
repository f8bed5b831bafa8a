"""Monthly invoice calculations

Pure helpers for billing periods, fulfillment pricing and invoice fields.
All datetimes are naive UTC.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple
from src.domain.order import Order

BASE_RATE = Decimal("2.50")  # first unit of an order
ADDITIONAL_UNIT_RATE = Decimal("1.25")  # every unit after the first
PAYMENT_TERMS_DAYS = 30
CENT = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round to cents, half up"""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_order_charge(units: int) -> Decimal:
    """
    Fulfillment charge for one order

    BASE_RATE for the first unit plus ADDITIONAL_UNIT_RATE for each
    additional unit. Orders without units are not charged.

    Args:
        units: Total units across the order's items

    Returns:
        Charge for the order
    """
    if units <= 0:
        return Decimal("0.00")
    return BASE_RATE + max(units - 1, 0) * ADDITIONAL_UNIT_RATE


def calculate_unit_rate(charge: Decimal, units: int) -> Decimal:
    """Average per-unit rate of an order, rounded to cents"""
    return round_money(charge / Decimal(units))


def get_billing_period(year: int, month: int) -> Tuple[datetime, datetime]:
    """
    Get billing period start and end for a calendar month

    Args:
        year: Year
        month: Month (1-12)

    Returns:
        Tuple of (first instant of the month, last day at 23:59:59)
    """
    period_start = datetime(year, month, 1, 0, 0, 0)

    _, last_day = calendar.monthrange(year, month)
    period_end = datetime(year, month, last_day, 23, 59, 59)

    return period_start, period_end


def as_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are taken as UTC"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def fulfillment_timestamp(order: Order) -> Optional[datetime]:
    """Delivery time if present, else dispatch time"""
    fulfilled_at = order.fulfilled_at
    if fulfilled_at is None:
        return None
    return as_utc(fulfilled_at)


def is_fulfilled_within(order: Order, period_start: datetime, period_end: datetime) -> bool:
    """True when the order's fulfillment falls in [period_start, period_end]"""
    fulfilled_at = fulfillment_timestamp(order)
    if fulfilled_at is None:
        return False
    return period_start <= fulfilled_at <= period_end


def build_invoice_number(client_id: str, year: int, month: int) -> str:
    """Format: INV-YYYYMM-XXXXXX (last six chars of client_id, uppercased)"""
    return f"INV-{year}{month:02d}-{client_id[-6:].upper()}"


def calculate_due_date(period_end: datetime) -> date:
    """Billing period end plus payment terms, as a date"""
    return (period_end + timedelta(days=PAYMENT_TERMS_DAYS)).date()


def build_invoice_notes(month: int, year: int, is_draft: bool) -> str:
    generated = "automatically" if is_draft else "manually"
    return f"Monthly invoice for {calendar.month_name[month]} {year}. Generated {generated}."
