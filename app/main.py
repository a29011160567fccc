"""Main FastAPI application"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.core.config import settings
from app.utils.logger import setup_file_logging
from app.api.v1.api import api_router
from app.db.init_db import init_db, create_initial_data
from app.errors.handlers import (
    http_exception_handler,
    validation_exception_handler,
    sqlalchemy_exception_handler,
    general_exception_handler
)
from app.services.scheduler_service import OtpCleanupScheduler

setup_file_logging(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO), log_dir=settings.LOG_DIR,
                   file_name=settings.LOG_FILE_NAME)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Car dealership inventory and sales API with OTP-confirmed registration, login, "
                "vehicle updates and purchase requests",
    version=settings.PROJECT_VERSION,
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(api_router, prefix=settings.API_V1_STR)

otp_cleanup = OtpCleanupScheduler()


@app.on_event("startup")
async def startup_event():
    """Initialize database, seed data and the OTP cleanup job"""
    if settings.uses_insecure_jwt_key:
        logger.warning("JWT_SECRET_KEY is not set - using the built-in development key. Do not run like this in production!")

    try:
        init_db()
        create_initial_data()
        logger.warning(f"{settings.PROJECT_NAME} STARTED - Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        logger.warning(f"{settings.PROJECT_NAME} STARTED - Database initialization failed, but API is running")

    if settings.OTP_CLEANUP_ENABLED:
        otp_cleanup.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Stop background jobs and log application shutdown"""
    otp_cleanup.shutdown()
    logger.warning(f"{settings.PROJECT_NAME} SHUTDOWN")
