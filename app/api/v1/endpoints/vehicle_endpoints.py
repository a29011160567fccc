"""Vehicle inventory endpoints"""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_otp_service
from app.errors.response_codes import SuccessCode, paginated_response, success_response
from app.middleware.auth import get_current_user, require_admin
from app.models.user import User
from app.schemas.auth_schemas import OtpResponse
from app.schemas.vehicle_schemas import VehicleCreate, VehicleFilter, VehicleResponse, VehicleUpdate
from app.services import vehicle_service
from app.services.otp_service import OtpService

router = APIRouter()

OTP_PATTERN = r"^\d{6}$"


@router.get("")
def list_vehicles(
    filters: Annotated[VehicleFilter, Query()],
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    ## Browse the inventory

    **Role:** Any authenticated user. Customers only see available vehicles.

    Filters: `make`, `model`, `color`, `fuel_type`, `transmission`
    (case-insensitive substring), `min_year`, `max_year`, `min_price`,
    `max_price`, `status`. Paging: `page` (≥1), `page_size` (1-100, default 10).
    """
    total, vehicles = vehicle_service.list_vehicles(db, filters, is_admin=current_user.is_admin)
    return paginated_response(
        data=[VehicleResponse.model_validate(v) for v in vehicles],
        total=total,
        page=filters.page,
        page_size=filters.page_size,
    )


@router.get("/{vehicle_id}")
def get_vehicle(
    vehicle_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    vehicle = vehicle_service.get_vehicle(db, vehicle_id, is_admin=current_user.is_admin)
    return success_response(code=SuccessCode.RETRIEVED, data=VehicleResponse.model_validate(vehicle))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_vehicle(
    body: VehicleCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    ## Add a vehicle

    **Role:** Admin. New vehicles start as `available`; HTTP 409 on a duplicate VIN.
    """
    vehicle = vehicle_service.create_vehicle(db, body)
    return success_response(code=SuccessCode.VEHICLE_CREATED, data=VehicleResponse.model_validate(vehicle))


@router.post("/{vehicle_id}/initiate-update")
def initiate_vehicle_update(
    vehicle_id: int,
    db: Session = Depends(get_db),
    otp_service: OtpService = Depends(get_otp_service),
    admin: User = Depends(require_admin),
):
    """
    ## Request a code to update a vehicle (Step 1 of 2)

    **Role:** Admin. The code goes to the admin's own email.
    Next: **PUT /vehicles/{vehicle_id}?otp_code=...**.
    """
    vehicle_service.update_initiate(db, otp_service, vehicle_id, admin.email)
    return success_response(
        code=SuccessCode.OTP_SENT,
        data=OtpResponse(message="Verification code sent to your email. Submit it with the update."),
    )


@router.put("/{vehicle_id}")
def update_vehicle(
    vehicle_id: int,
    body: VehicleUpdate,
    otp_code: str = Query(..., pattern=OTP_PATTERN),
    db: Session = Depends(get_db),
    otp_service: OtpService = Depends(get_otp_service),
    admin: User = Depends(require_admin),
):
    """
    ## Apply a vehicle update (Step 2 of 2)

    **Role:** Admin. Only the fields present in the body change. Status may
    only move between `available` and `maintenance` here.
    """
    vehicle = vehicle_service.update_confirm(db, otp_service, vehicle_id, admin.email, otp_code, body)
    return success_response(code=SuccessCode.UPDATED, data=VehicleResponse.model_validate(vehicle))


@router.delete("/{vehicle_id}")
def delete_vehicle(
    vehicle_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    ## Delete a vehicle

    **Role:** Admin. HTTP 409 when any sale references the vehicle.
    """
    vehicle_service.delete_vehicle(db, vehicle_id)
    return success_response(code=SuccessCode.DELETED)
