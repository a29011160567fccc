"""Custom exceptions for error handling"""
from typing import List, Optional

from fastapi import HTTPException, status

from app.errors.response_codes import ErrorCode, ResponseCode


class BaseHTTPException(HTTPException):
    """Base exception class for all custom HTTP exceptions"""
    response_code: ResponseCode = ErrorCode.BAD_REQUEST

    def __init__(self, detail: str = None, headers: dict = None, errors: Optional[List[str]] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.detail,
            headers=headers
        )
        self.errors = errors


class BadRequestException(BaseHTTPException):
    """400 Bad Request"""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Bad request"
    response_code = ErrorCode.BAD_REQUEST


class InvalidOtpException(BadRequestException):
    """400 Wrong, expired, already used or out-of-scope OTP"""
    detail = "Invalid or expired OTP"
    response_code = ErrorCode.INVALID_OTP


class InvalidStateException(BadRequestException):
    """400 Action not legal for the current vehicle or sale status"""
    detail = "Action not allowed in the current state"
    response_code = ErrorCode.INVALID_STATE


class UnauthorizedException(BaseHTTPException):
    """401 Unauthorized"""
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"
    response_code = ErrorCode.UNAUTHORIZED

    def __init__(self, detail: str = None, errors: Optional[List[str]] = None):
        super().__init__(
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
            errors=errors,
        )


class InvalidCredentialsException(UnauthorizedException):
    """401 Bad email/password pair or inactive account"""
    detail = "Invalid credentials"
    response_code = ErrorCode.INVALID_CREDENTIALS


class ForbiddenException(BaseHTTPException):
    """403 Forbidden"""
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden: Insufficient permissions"
    response_code = ErrorCode.INSUFFICIENT_PERMISSIONS


class NotFoundException(BaseHTTPException):
    """404 Not Found"""
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resource not found"
    response_code = ErrorCode.NOT_FOUND


class ConflictException(BaseHTTPException):
    """409 Conflict"""
    status_code = status.HTTP_409_CONFLICT
    detail = "Resource already exists"
    response_code = ErrorCode.CONFLICT


class InternalServerException(BaseHTTPException):
    """500 Internal Server Error"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"
    response_code = ErrorCode.INTERNAL_ERROR
