"""Pydantic schemas for request/response validation"""
from app.schemas.auth_schemas import (
    RegisterRequest,
    LoginRequest,
    VerifyOtpRequest,
    OtpResponse,
    AuthResponse,
    TokenData,
    UserResponse,
)
from app.schemas.vehicle_schemas import (
    VehicleCreate,
    VehicleUpdate,
    VehicleFilter,
    VehicleResponse,
)
from app.schemas.sale_schemas import (
    PurchaseRequest,
    ProcessSaleRequest,
    SaleResponse,
)
from app.schemas.customer_schemas import CustomerResponse

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "VerifyOtpRequest",
    "OtpResponse",
    "AuthResponse",
    "TokenData",
    "UserResponse",
    "VehicleCreate",
    "VehicleUpdate",
    "VehicleFilter",
    "VehicleResponse",
    "PurchaseRequest",
    "ProcessSaleRequest",
    "SaleResponse",
    "CustomerResponse",
]
