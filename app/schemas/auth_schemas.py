"""Authentication and user schemas"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from app.models.user import UserRole


class RegisterRequest(BaseModel):
    """Registration form (step 1 of 2)"""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., max_length=150)
    password: str = Field(..., min_length=6, max_length=100)
    phone: str = Field("", max_length=20)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v


class LoginRequest(BaseModel):
    """Schema for login request"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class VerifyOtpRequest(BaseModel):
    """Email + code pair for the confirm step of registration and login"""
    email: EmailStr
    otp_code: str = Field(..., min_length=6, max_length=6, pattern=r"^\d{6}$")


class OtpResponse(BaseModel):
    """Acknowledgment of an initiate step; never carries the code"""
    message: str
    requires_otp: bool = True


class AuthResponse(BaseModel):
    """Token response schema"""
    access_token: str
    token_type: str = "bearer"
    email: str
    full_name: str
    role: UserRole
    expires_at: datetime


class TokenData(BaseModel):
    """Token data schema for JWT payload"""
    user_id: Optional[int] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[UserRole] = None


class UserResponse(BaseModel):
    """Schema for user response"""
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    role: UserRole
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True
