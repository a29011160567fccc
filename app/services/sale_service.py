"""Sale service: OTP-gated purchase requests and admin processing."""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from app.errors.exceptions import (
    ConflictException,
    InvalidStateException,
    NotFoundException,
)
from app.models.otp import OtpCode, OtpPurpose
from app.models.sale import Sale, SaleStatus
from app.models.user import User
from app.models.vehicle import Vehicle, VehicleStatus
from app.schemas.sale_schemas import SaleResponse
from app.services.otp_service import OtpService
from app.utils.logger import log_workflow_event
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def to_sale_response(sale: Sale) -> SaleResponse:
    """Build a SaleResponse with the joined customer and vehicle names."""
    return SaleResponse(
        id=sale.id,
        vehicle_id=sale.vehicle_id,
        customer_id=sale.customer_id,
        customer_name=sale.customer.full_name if sale.customer else "",
        vehicle_make_model=sale.vehicle.make_model if sale.vehicle else "",
        sale_price=sale.sale_price,
        status=sale.status,
        requested_at=sale.requested_at,
        completed_at=sale.completed_at,
        notes=sale.notes or "",
    )


def _swap_vehicle_status(db: Session, vehicle_id: int, expected: VehicleStatus, new: VehicleStatus) -> bool:
    """Conditional UPDATE; True only if the vehicle was still in *expected*."""
    changed = (
        db.query(Vehicle)
        .filter(Vehicle.id == vehicle_id, Vehicle.status == expected)
        .update({"status": new, "updated_at": utcnow()}, synchronize_session=False)
    )
    return changed == 1


def _swap_sale_status(db: Session, sale_id: int, expected: SaleStatus, changes: dict) -> bool:
    changed = (
        db.query(Sale)
        .filter(Sale.id == sale_id, Sale.status == expected)
        .update(changes, synchronize_session=False)
    )
    return changed == 1


def _get_vehicle_or_404(db: Session, vehicle_id: int) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if vehicle is None:
        raise NotFoundException(detail="Vehicle not found")
    return vehicle


# ─────────────────────────────────────────────────────────────────────────────
# Purchase request (customer)
# ─────────────────────────────────────────────────────────────────────────────

def purchase_initiate(db: Session, otp_service: OtpService, vehicle_id: int, requester_email: str) -> None:
    vehicle = _get_vehicle_or_404(db, vehicle_id)
    if vehicle.status != VehicleStatus.AVAILABLE:
        raise InvalidStateException(detail="Vehicle is not available for purchase")

    otp_service.issue_challenge(requester_email, OtpPurpose.PURCHASE_REQUEST)
    logger.info(f"[Sale] Purchase code issued for vehicle={vehicle_id} to {requester_email}")


def purchase_confirm(
    db: Session,
    otp_service: OtpService,
    customer: User,
    vehicle_id: int,
    code: str,
    notes: str = "",
) -> Sale:
    """
    Consume the purchase code, then reserve the vehicle and record the sale
    in one transaction.
    """

    def reserve_and_record(_otp_row: OtpCode) -> Sale:
        # The vehicle may have changed since the initiate step
        vehicle = _get_vehicle_or_404(db, vehicle_id)
        if vehicle.status != VehicleStatus.AVAILABLE:
            raise InvalidStateException(detail="Vehicle is not available for purchase")

        pending = (
            db.query(Sale.id)
            .filter(
                Sale.vehicle_id == vehicle_id,
                Sale.customer_id == customer.id,
                Sale.status == SaleStatus.REQUESTED,
            )
            .first()
        )
        if pending is not None:
            raise ConflictException(detail="You already have a pending request for this vehicle")

        try:
            if not _swap_vehicle_status(db, vehicle_id, VehicleStatus.AVAILABLE, VehicleStatus.RESERVED):
                raise InvalidStateException(detail="Vehicle is not available for purchase")

            sale = Sale(
                vehicle_id=vehicle_id,
                customer_id=customer.id,
                sale_price=vehicle.price,
                status=SaleStatus.REQUESTED,
                requested_at=utcnow(),
                notes=notes or "",
            )
            db.add(sale)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(sale)
        log_workflow_event(
            "PURCHASE REQUESTED",
            f"sale={sale.id} vehicle={vehicle_id} price={sale.sale_price}",
            user_id=customer.id,
            user_email=customer.email,
        )
        return sale

    return otp_service.run_guarded(customer.email, code, OtpPurpose.PURCHASE_REQUEST, reserve_and_record)


# ─────────────────────────────────────────────────────────────────────────────
# Processing (admin)
# ─────────────────────────────────────────────────────────────────────────────

def process_sale(db: Session, sale_id: int, new_status: SaleStatus, notes: Optional[str] = None) -> Sale:
    """
    Move a Requested sale to its single next status.

    completed → vehicle sold, completed_at stamped
    cancelled → vehicle available again
    anything else → status and notes only
    """
    sale = db.query(Sale).filter(Sale.id == sale_id).first()
    if sale is None:
        raise NotFoundException(detail="Sale not found")

    if sale.status != SaleStatus.REQUESTED:
        raise InvalidStateException(detail="Sale cannot be processed in its current status")

    changes = {"status": new_status}
    if notes is not None:
        changes["notes"] = notes
    if new_status == SaleStatus.COMPLETED:
        changes["completed_at"] = utcnow()

    try:
        if not _swap_sale_status(db, sale.id, SaleStatus.REQUESTED, changes):
            raise InvalidStateException(detail="Sale cannot be processed in its current status")

        if new_status == SaleStatus.COMPLETED:
            _swap_vehicle_status(db, sale.vehicle_id, VehicleStatus.RESERVED, VehicleStatus.SOLD)
        elif new_status == SaleStatus.CANCELLED:
            _swap_vehicle_status(db, sale.vehicle_id, VehicleStatus.RESERVED, VehicleStatus.AVAILABLE)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(sale)
    log_workflow_event("SALE PROCESSED", f"sale={sale.id} status={new_status.value}")
    return sale


# ─────────────────────────────────────────────────────────────────────────────
# Listings
# ─────────────────────────────────────────────────────────────────────────────

def _page(q, page: int, page_size: int) -> Tuple[int, List[Sale]]:
    total = q.count()
    sales = (
        q.options(joinedload(Sale.vehicle), joinedload(Sale.customer))
        .order_by(Sale.requested_at.desc(), Sale.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return total, sales


def list_my_purchases(db: Session, customer_id: int, page: int = 1, page_size: int = 10) -> Tuple[int, List[Sale]]:
    return _page(db.query(Sale).filter(Sale.customer_id == customer_id), page, page_size)


def list_sales(
    db: Session,
    page: int = 1,
    page_size: int = 10,
    status: Optional[SaleStatus] = None,
) -> Tuple[int, List[Sale]]:
    q = db.query(Sale)
    if status is not None:
        q = q.filter(Sale.status == status)
    return _page(q, page, page_size)
