"""
HTTP Response Codes and Messages
Centralized response handling for consistent API responses
"""
import math
from typing import Any, Dict, List, Optional
from fastapi import status


class ResponseCode:
    """HTTP Response Code Container"""
    def __init__(self, code: int, message: str, status_code: int):
        self.code = code
        self.message = message
        self.status_code = status_code


class SuccessCode:
    """Success Response Codes (2xx)"""

    # 200 - Success
    OK = ResponseCode(
        code=200,
        message="Request processed successfully",
        status_code=status.HTTP_200_OK
    )

    RETRIEVED = ResponseCode(
        code=2001,
        message="Data retrieved successfully",
        status_code=status.HTTP_200_OK
    )

    UPDATED = ResponseCode(
        code=2002,
        message="Resource updated successfully",
        status_code=status.HTTP_200_OK
    )

    DELETED = ResponseCode(
        code=2003,
        message="Resource deleted successfully",
        status_code=status.HTTP_200_OK
    )

    OTP_SENT = ResponseCode(
        code=2004,
        message="OTP sent to your email",
        status_code=status.HTTP_200_OK
    )

    AUTHENTICATED = ResponseCode(
        code=2005,
        message="Login successful",
        status_code=status.HTTP_200_OK
    )

    SALE_PROCESSED = ResponseCode(
        code=2006,
        message="Sale processed successfully",
        status_code=status.HTTP_200_OK
    )

    # 201 - Created
    USER_REGISTERED = ResponseCode(
        code=2011,
        message="Registration completed successfully",
        status_code=status.HTTP_201_CREATED
    )

    VEHICLE_CREATED = ResponseCode(
        code=2012,
        message="Vehicle added successfully",
        status_code=status.HTTP_201_CREATED
    )

    PURCHASE_REQUESTED = ResponseCode(
        code=2013,
        message="Purchase request created successfully",
        status_code=status.HTTP_201_CREATED
    )


class ErrorCode:
    """Error Response Codes (4xx, 5xx)"""

    # 400 - Bad Request
    BAD_REQUEST = ResponseCode(
        code=400,
        message="Bad request",
        status_code=status.HTTP_400_BAD_REQUEST
    )

    INVALID_OTP = ResponseCode(
        code=4006,
        message="Invalid or expired OTP",
        status_code=status.HTTP_400_BAD_REQUEST
    )

    INVALID_STATE = ResponseCode(
        code=4007,
        message="Action not allowed in the current state",
        status_code=status.HTTP_400_BAD_REQUEST
    )

    # 401 - Unauthorized
    UNAUTHORIZED = ResponseCode(
        code=401,
        message="Authentication required",
        status_code=status.HTTP_401_UNAUTHORIZED
    )

    INVALID_CREDENTIALS = ResponseCode(
        code=4011,
        message="Invalid credentials",
        status_code=status.HTTP_401_UNAUTHORIZED
    )

    # 403 - Forbidden
    FORBIDDEN = ResponseCode(
        code=403,
        message="Access forbidden",
        status_code=status.HTTP_403_FORBIDDEN
    )

    INSUFFICIENT_PERMISSIONS = ResponseCode(
        code=4031,
        message="Insufficient permissions to perform this action",
        status_code=status.HTTP_403_FORBIDDEN
    )

    # 404 - Not Found
    NOT_FOUND = ResponseCode(
        code=404,
        message="Resource not found",
        status_code=status.HTTP_404_NOT_FOUND
    )

    # 409 - Conflict
    CONFLICT = ResponseCode(
        code=409,
        message="Resource conflict",
        status_code=status.HTTP_409_CONFLICT
    )

    # 422 - Unprocessable Entity
    VALIDATION_ERROR = ResponseCode(
        code=422,
        message="Validation failed",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
    )

    # 500 - Internal Server Error
    INTERNAL_ERROR = ResponseCode(
        code=500,
        message="Internal server error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    DATABASE_ERROR = ResponseCode(
        code=5001,
        message="Database operation failed",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def success_response(
    code: ResponseCode = SuccessCode.OK,
    data: Any = None,
    message: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a standardized success response

    Args:
        code: ResponseCode object
        data: Response data
        message: Optional custom message

    Returns:
        Standardized response dictionary
    """
    return {
        "success": True,
        "code": code.code,
        "message": message or code.message,
        "data": data
    }


def error_response(
    code: ResponseCode = ErrorCode.INTERNAL_ERROR,
    message: Optional[str] = None,
    errors: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Create a standardized error response

    Args:
        code: ResponseCode object
        message: Optional custom message
        errors: Optional list of detailed error messages

    Returns:
        Standardized error response dictionary
    """
    response = {
        "success": False,
        "code": code.code,
        "message": message or code.message
    }

    if errors:
        response["errors"] = errors

    return response


def paginated_response(
    data: list,
    total: int,
    page: int,
    page_size: int,
    code: ResponseCode = SuccessCode.RETRIEVED,
    message: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a standardized paginated response

    The page itself travels in ``data`` as
    ``{data, current_page, page_size, total_count, total_pages}``.
    """
    return success_response(
        code=code,
        message=message,
        data={
            "data": data,
            "current_page": page,
            "page_size": page_size,
            "total_count": total,
            "total_pages": math.ceil(total / page_size) if page_size else 0,
        },
    )
