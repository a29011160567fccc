"""Customer directory endpoints (admin only)"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.dependencies import get_db
from app.errors.response_codes import SuccessCode, paginated_response, success_response
from app.middleware.auth import require_admin
from app.models.user import User
from app.services import customer_service

router = APIRouter()


@router.get("")
def list_customers(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    ## List customers

    **Role:** Admin. `purchase_count` counts completed sales only.
    """
    total, customers = customer_service.list_customers(db, page, page_size)
    return paginated_response(data=customers, total=total, page=page, page_size=page_size)


@router.get("/{customer_id}")
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    customer = customer_service.get_customer(db, customer_id)
    return success_response(code=SuccessCode.RETRIEVED, data=customer)
