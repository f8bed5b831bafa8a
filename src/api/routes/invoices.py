"""Invoice API Routes

FastAPI routes for monthly invoice generation and rebuild.
"""

from fastapi import APIRouter, Depends, Response, status

from src.api.error import ClientError
from src.api.schemas.invoice_request import (
    GenerateMonthlyInvoiceRequestSchema,
    MonthlyInvoiceResponseSchema,
)
from src.app.use_cases.billing import (
    GenerateMonthlyInvoice,
    GenerateMonthlyInvoiceCommandDTO,
    GeneratedInvoiceDTO,
    RebuildMonthlyInvoice,
)
from src.depends import get_invoice_generator, get_invoice_rebuilder

router = APIRouter(prefix="/billing/invoices", tags=["Invoices"])


@router.post(
    "/monthly",
    response_model=MonthlyInvoiceResponseSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {
            "description": "Nothing to bill (duplicate, no orders, or zero amount)",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "skipped": True,
                        "reason": "duplicate",
                        "message": "Invoice already exists: INV-202603-0000AB"
                    }
                }
            }
        },
        400: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Invalid request parameters"
                        }
                    }
                }
            }
        },
        500: {
            "description": "Generation failed; any partially written invoice was rolled back",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ORDER_LINK_FAILED",
                            "message": "Transaction failed: could not link orders to invoice"
                        }
                    }
                }
            }
        }
    }
)
async def generate_monthly_invoice(
    request: GenerateMonthlyInvoiceRequestSchema,
    response: Response,
    use_case: GenerateMonthlyInvoice = Depends(get_invoice_generator),
):
    """
    Generate the monthly invoice for a client.

    Bills every delivered or dispatched order fulfilled within the month
    and links those orders to the invoice. Safe to retry: an existing
    invoice for the same client and month is reported as skipped.

    **Returns:**
    - 201: Invoice generated
    - 200: Skipped (duplicate, no_orders, zero_amount)
    - 400: Validation error
    - 500: Generation failed
    """
    command = GenerateMonthlyInvoiceCommandDTO(
        client_id=request.client_id,
        month=request.month,
        year=request.year,
        actor_id=request.actor_id,
        is_draft=request.is_draft,
    )

    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not isinstance(result.value, GeneratedInvoiceDTO):
        response.status_code = status.HTTP_200_OK

    return MonthlyInvoiceResponseSchema.from_outcome(result.value)


REBUILD_ERROR_STATUS = {
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVOICE_PAID": status.HTTP_400_BAD_REQUEST,
}


@router.post(
    "/monthly/rebuild",
    response_model=MonthlyInvoiceResponseSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Validation error, or the invoice is already paid",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_PAID",
                            "message": "Invoice INV-202603-0000AB is already paid and cannot be rebuilt"
                        }
                    }
                }
            }
        },
        404: {
            "description": "No invoice exists for the period",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_NOT_FOUND",
                            "message": "No invoice found for this period. Use generate instead of rebuild."
                        }
                    }
                }
            }
        }
    }
)
async def rebuild_monthly_invoice(
    request: GenerateMonthlyInvoiceRequestSchema,
    response: Response,
    use_case: RebuildMonthlyInvoice = Depends(get_invoice_rebuilder),
):
    """
    Delete an unpaid monthly invoice and generate it again.

    The old invoice's orders are released first, so the new invoice picks
    up every order currently fulfilled in the month.

    **Returns:**
    - 201: Invoice regenerated
    - 200: Old invoice removed, nothing left to bill
    - 400: Validation error or invoice already paid
    - 404: No invoice for the period
    - 500: Rebuild failed
    """
    command = GenerateMonthlyInvoiceCommandDTO(
        client_id=request.client_id,
        month=request.month,
        year=request.year,
        actor_id=request.actor_id,
        is_draft=request.is_draft,
    )

    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(
            result.error,
            status_code=REBUILD_ERROR_STATUS.get(
                result.error.code, status.HTTP_500_INTERNAL_SERVER_ERROR
            ),
        )

    if not isinstance(result.value, GeneratedInvoiceDTO):
        response.status_code = status.HTTP_200_OK

    return MonthlyInvoiceResponseSchema.from_outcome(result.value)
