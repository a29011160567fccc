"""Customer directory for admins"""
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.errors.exceptions import NotFoundException
from app.models.sale import Sale, SaleStatus
from app.models.user import User, UserRole
from app.schemas.customer_schemas import CustomerResponse


def _completed_counts(db: Session, customer_ids: List[int]) -> dict:
    if not customer_ids:
        return {}
    rows = (
        db.query(Sale.customer_id, func.count(Sale.id))
        .filter(Sale.customer_id.in_(customer_ids), Sale.status == SaleStatus.COMPLETED)
        .group_by(Sale.customer_id)
        .all()
    )
    return {customer_id: count for customer_id, count in rows}


def to_customer_response(user: User, purchase_count: int) -> CustomerResponse:
    return CustomerResponse(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        phone=user.phone or "",
        is_active=user.is_active,
        created_at=user.created_at,
        last_login_at=user.last_login_at,
        purchase_count=purchase_count,
    )


def list_customers(db: Session, page: int = 1, page_size: int = 10) -> Tuple[int, List[CustomerResponse]]:
    """
    Page through customer accounts, newest first.

    purchase_count only counts completed sales.
    """
    q = db.query(User).filter(User.role == UserRole.CUSTOMER)
    total = q.count()
    users = (
        q.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    counts = _completed_counts(db, [u.id for u in users])
    return total, [to_customer_response(u, counts.get(u.id, 0)) for u in users]


def get_customer(db: Session, customer_id: int) -> CustomerResponse:
    user = (
        db.query(User)
        .filter(User.id == customer_id, User.role == UserRole.CUSTOMER)
        .first()
    )
    if user is None:
        raise NotFoundException(detail="Customer not found")
    counts = _completed_counts(db, [user.id])
    return to_customer_response(user, counts.get(user.id, 0))
