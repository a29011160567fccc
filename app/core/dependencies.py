"""FastAPI dependencies"""
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.services.otp_service import OtpService
from app.services.token_service import TokenIssuer
from app.utils.email import build_notifier


def get_db() -> Generator:
    """
    Database session dependency
    Yields a database session and ensures it's closed after use
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_notifier():
    """OTP notifier selected by OTP_DELIVERY (console or smtp)"""
    return build_notifier()


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer.from_settings()


def get_otp_service(
    db: Session = Depends(get_db),
    notifier=Depends(get_notifier),
) -> OtpService:
    """OTP engine bound to the request's session"""
    return OtpService(db, notifier=notifier)
