"""Purchase request and sale processing endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_otp_service
from app.errors.response_codes import SuccessCode, paginated_response, success_response
from app.middleware.auth import get_current_user, require_admin
from app.models.sale import SaleStatus
from app.models.user import User
from app.schemas.auth_schemas import OtpResponse
from app.schemas.sale_schemas import ProcessSaleRequest, PurchaseRequest
from app.services import sale_service
from app.services.otp_service import OtpService

router = APIRouter()


@router.post("/initiate-purchase")
def initiate_purchase(
    body: PurchaseRequest,
    db: Session = Depends(get_db),
    otp_service: OtpService = Depends(get_otp_service),
    current_user: User = Depends(get_current_user),
):
    """
    ## Request a purchase code (Step 1 of 2)

    **Role:** Any authenticated user.

    - HTTP 404 → vehicle does not exist.
    - HTTP 400 → vehicle is not available.
    - Next: **POST /sales/purchase?otp_code=...** with the same body.
    """
    sale_service.purchase_initiate(db, otp_service, body.vehicle_id, current_user.email)
    return success_response(
        code=SuccessCode.OTP_SENT,
        data=OtpResponse(message="Verification code sent to your email. Submit it to confirm the purchase."),
    )


@router.post("/purchase", status_code=status.HTTP_201_CREATED)
def confirm_purchase(
    body: PurchaseRequest,
    otp_code: str = Query(..., pattern=r"^\d{6}$"),
    db: Session = Depends(get_db),
    otp_service: OtpService = Depends(get_otp_service),
    current_user: User = Depends(get_current_user),
):
    """
    ## Confirm a purchase (Step 2 of 2)

    **Role:** Any authenticated user.

    Reserves the vehicle and records a `requested` sale at the current price.
    A used code is gone even when the vehicle was taken in the meantime.
    """
    sale = sale_service.purchase_confirm(
        db, otp_service, current_user, body.vehicle_id, otp_code, notes=body.notes
    )
    return success_response(code=SuccessCode.PURCHASE_REQUESTED, data=sale_service.to_sale_response(sale))


@router.get("/my-purchases")
def my_purchases(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    total, sales = sale_service.list_my_purchases(db, current_user.id, page, page_size)
    return paginated_response(
        data=[sale_service.to_sale_response(s) for s in sales],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("")
def list_sales(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    sale_status: Optional[SaleStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    ## List all sales

    **Role:** Admin. Optional `status` filter, newest first.
    """
    total, sales = sale_service.list_sales(db, page, page_size, status=sale_status)
    return paginated_response(
        data=[sale_service.to_sale_response(s) for s in sales],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("/process")
def process_sale(
    body: ProcessSaleRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    ## Process a requested sale

    **Role:** Admin.

    | Target      | Effect on vehicle      |
    |-------------|------------------------|
    | approved    | stays reserved         |
    | completed   | sold                   |
    | cancelled   | available again        |

    HTTP 400 when the sale is no longer `requested`.
    """
    sale = sale_service.process_sale(db, body.sale_id, body.status, body.notes)
    return success_response(code=SuccessCode.SALE_PROCESSED, data=sale_service.to_sale_response(sale))
