"""Order API Routes"""

from fastapi import APIRouter, Depends, status

from src.api.error import ClientError
from src.app.use_cases.billing import GetOrderLockStatus, OrderLockStatusDTO
from src.depends import get_order_lock_status

router = APIRouter(prefix="/billing/orders", tags=["Orders"])


@router.get(
    "/{order_id}/lock",
    response_model=OrderLockStatusDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Order not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ORDER_NOT_FOUND",
                            "message": "Order with ID 123 not found"
                        }
                    }
                }
            }
        }
    }
)
async def get_order_lock(
    order_id: str,
    use_case: GetOrderLockStatus = Depends(get_order_lock_status),
):
    """
    Get whether an order can still be edited.

    Orders linked to a sent, partial or paid invoice are locked; orders
    linked to a draft invoice stay editable.
    """
    result = await use_case.execute(order_id)

    if result.is_err():
        if result.error.code == "ORDER_NOT_FOUND":
            raise ClientError(result.error, status_code=status.HTTP_404_NOT_FOUND)
        raise ClientError(result.error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return result.value
