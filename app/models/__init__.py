"""Database models"""
from app.models.user import User, UserRole
from app.models.vehicle import Vehicle, VehicleStatus
from app.models.sale import Sale, SaleStatus
from app.models.otp import OtpCode, OtpPurpose

__all__ = [
    "User", "UserRole",
    "Vehicle", "VehicleStatus",
    "Sale", "SaleStatus",
    "OtpCode", "OtpPurpose",
]
