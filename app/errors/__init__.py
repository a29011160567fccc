"""Error handling module"""
from app.errors.exceptions import (
    BadRequestException,
    InvalidOtpException,
    InvalidStateException,
    UnauthorizedException,
    InvalidCredentialsException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    InternalServerException,
)
from app.errors.response_codes import (
    SuccessCode,
    ErrorCode,
    success_response,
    error_response,
    paginated_response
)

__all__ = [
    "BadRequestException",
    "InvalidOtpException",
    "InvalidStateException",
    "UnauthorizedException",
    "InvalidCredentialsException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "InternalServerException",
    "SuccessCode",
    "ErrorCode",
    "success_response",
    "error_response",
    "paginated_response"
]
