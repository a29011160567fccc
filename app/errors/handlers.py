"""Error handlers for the application"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.errors.response_codes import ErrorCode, ResponseCode, error_response

logger = logging.getLogger(__name__)

_STATUS_TO_CODE = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.BAD_REQUEST,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
}


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Render typed workflow exceptions (and framework 404/405s) in the response envelope
    """
    code: ResponseCode = getattr(exc, "response_code", None) or _STATUS_TO_CODE.get(
        exc.status_code,
        ResponseCode(code=exc.status_code, message=str(exc.detail), status_code=exc.status_code),
    )
    errors = getattr(exc, "errors", None)

    if exc.status_code >= 500:
        logger.error(f"Server error on {request.url}: {exc.detail}")
    else:
        logger.info(f"{exc.status_code} on {request.method} {request.url.path}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(code=code, message=str(exc.detail), errors=errors),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle validation errors
    """
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(x) for x in error["loc"])
        errors.append(f"{field}: {error['msg']}")

    logger.warning(f"Validation error on {request.url}: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response(code=ErrorCode.VALIDATION_ERROR, errors=errors),
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """
    Handle SQLAlchemy database errors
    """
    logger.error(f"Database error on {request.method} {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            code=ErrorCode.DATABASE_ERROR,
            message="An error occurred while processing your request",
            errors=["Internal server error"],
        ),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle general exceptions
    """
    logger.error(f"Unhandled exception on {request.method} {request.url}: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            code=ErrorCode.INTERNAL_ERROR,
            message="An error occurred while processing your request",
            errors=["Internal server error"],
        ),
    )
