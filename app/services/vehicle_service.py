"""Vehicle inventory service: browsing, CRUD and the OTP-gated update."""
from __future__ import annotations

import logging
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.errors.exceptions import ConflictException, InvalidStateException, NotFoundException
from app.models.otp import OtpCode, OtpPurpose
from app.models.sale import Sale
from app.models.vehicle import Vehicle, VehicleStatus
from app.schemas.vehicle_schemas import VehicleCreate, VehicleFilter, VehicleUpdate
from app.services.otp_service import OtpService
from app.utils.logger import log_workflow_event
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

# Statuses an admin may set directly; reserved/sold belong to the sale workflow.
ADMIN_SETTABLE_STATUSES = {VehicleStatus.AVAILABLE, VehicleStatus.MAINTENANCE}

_TEXT_FILTERS = ("make", "model", "color", "fuel_type", "transmission")


# ─────────────────────────────────────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────────────────────────────────────

def list_vehicles(db: Session, filters: VehicleFilter, is_admin: bool) -> Tuple[int, List[Vehicle]]:
    q = db.query(Vehicle)

    for name in _TEXT_FILTERS:
        value = getattr(filters, name)
        if value:
            q = q.filter(func.lower(getattr(Vehicle, name)).contains(value.lower()))

    if filters.min_year is not None:
        q = q.filter(Vehicle.year >= filters.min_year)
    if filters.max_year is not None:
        q = q.filter(Vehicle.year <= filters.max_year)
    if filters.min_price is not None:
        q = q.filter(Vehicle.price >= filters.min_price)
    if filters.max_price is not None:
        q = q.filter(Vehicle.price <= filters.max_price)
    if filters.status is not None:
        q = q.filter(Vehicle.status == filters.status)

    # Customers can only see available vehicles
    if not is_admin:
        q = q.filter(Vehicle.status == VehicleStatus.AVAILABLE)

    total = q.count()
    vehicles = (
        q.order_by(Vehicle.id)
        .offset((filters.page - 1) * filters.page_size)
        .limit(filters.page_size)
        .all()
    )
    return total, vehicles


def get_vehicle(db: Session, vehicle_id: int, is_admin: bool = True) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if vehicle is None:
        raise NotFoundException(detail="Vehicle not found")
    if not is_admin and vehicle.status != VehicleStatus.AVAILABLE:
        raise NotFoundException(detail="Vehicle not available")
    return vehicle


def _vin_taken(db: Session, vin: str, exclude_id: int = None) -> bool:
    q = db.query(Vehicle.id).filter(Vehicle.vin == vin)
    if exclude_id is not None:
        q = q.filter(Vehicle.id != exclude_id)
    return q.first() is not None


# ─────────────────────────────────────────────────────────────────────────────
# Mutations
# ─────────────────────────────────────────────────────────────────────────────

def create_vehicle(db: Session, payload: VehicleCreate) -> Vehicle:
    if _vin_taken(db, payload.vin):
        raise ConflictException(detail="Vehicle with this VIN already exists")

    vehicle = Vehicle(
        **payload.model_dump(),
        status=VehicleStatus.AVAILABLE,
        created_at=utcnow(),
    )
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    logger.info(f"[Vehicle] Created id={vehicle.id} vin={vehicle.vin}")
    return vehicle


def update_initiate(db: Session, otp_service: OtpService, vehicle_id: int, admin_email: str) -> None:
    get_vehicle(db, vehicle_id)
    otp_service.issue_challenge(admin_email, OtpPurpose.UPDATE_VEHICLE)


def update_confirm(
    db: Session,
    otp_service: OtpService,
    vehicle_id: int,
    admin_email: str,
    code: str,
    payload: VehicleUpdate,
) -> Vehicle:
    """Consume the update code, then apply only the provided fields."""

    def apply_update(_otp_row: OtpCode) -> Vehicle:
        vehicle = get_vehicle(db, vehicle_id)
        changes = payload.model_dump(exclude_unset=True)

        new_vin = changes.get("vin")
        if new_vin is not None and new_vin != vehicle.vin and _vin_taken(db, new_vin, exclude_id=vehicle.id):
            raise ConflictException(detail="Vehicle with this VIN already exists")

        new_status = changes.get("status")
        if new_status is not None and new_status != vehicle.status:
            if vehicle.status not in ADMIN_SETTABLE_STATUSES or new_status not in ADMIN_SETTABLE_STATUSES:
                raise InvalidStateException(
                    detail=f"Vehicle status cannot change from {vehicle.status.value} "
                           f"to {VehicleStatus(new_status).value} through an update"
                )

        for field, value in changes.items():
            setattr(vehicle, field, value)
        vehicle.updated_at = utcnow()

        db.commit()
        db.refresh(vehicle)
        log_workflow_event("VEHICLE UPDATED", f"id={vehicle.id} fields={sorted(changes)}", user_email=admin_email)
        return vehicle

    return otp_service.run_guarded(admin_email, code, OtpPurpose.UPDATE_VEHICLE, apply_update)


def delete_vehicle(db: Session, vehicle_id: int) -> None:
    vehicle = get_vehicle(db, vehicle_id)

    has_sales = db.query(Sale.id).filter(Sale.vehicle_id == vehicle.id).first() is not None
    if has_sales:
        raise ConflictException(detail="Cannot delete vehicle with existing sales records")

    db.delete(vehicle)
    db.commit()
    log_workflow_event("VEHICLE DELETED", f"id={vehicle_id}")
