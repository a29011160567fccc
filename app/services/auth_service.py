"""Authentication service: password hashing and the two-phase register/login flows"""
from typing import Optional
import logging

from passlib.context import CryptContext
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.errors.exceptions import ConflictException, InvalidCredentialsException
from app.models.otp import OtpCode, OtpPurpose
from app.models.user import User, UserRole
from app.schemas.auth_schemas import AuthResponse, RegisterRequest
from app.services.otp_service import OtpService, normalize_email
from app.services.token_service import TokenIssuer
from app.utils.logger import log_workflow_event
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a hashed password (constant time)"""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    return pwd_context.hash(password)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Get user by email, ignoring case
    """
    return db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """
    Get user by ID
    """
    return db.query(User).filter(User.id == user_id).first()


def issue_auth_response(issuer: TokenIssuer, user: User) -> AuthResponse:
    token, expires_at = issuer.issue(user.id, user.email, user.full_name, user.role)
    return AuthResponse(
        access_token=token,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
        expires_at=expires_at,
    )


# ── registration ──────────────────────────────────────────────────────────────

def register_initiate(db: Session, otp_service: OtpService, data: RegisterRequest) -> None:
    """
    Step 1: reject taken emails, then send a registration code.

    The submitted profile and the password hash are bound to the code so the
    confirm step can create the account without receiving them again.
    """
    if get_user_by_email(db, data.email):
        raise ConflictException(detail="Email is already registered")

    pending = {
        "first_name": data.first_name,
        "last_name": data.last_name,
        "phone": data.phone,
        "hashed_password": get_password_hash(data.password),
    }
    otp_service.issue_challenge(data.email, OtpPurpose.REGISTRATION, payload=pending)
    log_workflow_event("REGISTER INITIATED", user_email=normalize_email(data.email))


def register_confirm(
    db: Session,
    otp_service: OtpService,
    issuer: TokenIssuer,
    email: str,
    code: str,
) -> AuthResponse:
    """Step 2: consume the code, create the Customer account, return a token."""

    def create_account(otp_row: OtpCode) -> AuthResponse:
        # Double-check in case another registration completed in between
        if get_user_by_email(db, email):
            raise ConflictException(detail="An account with this email already exists. Please log in.")

        pending = otp_row.payload or {}
        user = User(
            first_name=pending.get("first_name", ""),
            last_name=pending.get("last_name", ""),
            email=normalize_email(email),
            hashed_password=pending.get("hashed_password", ""),
            phone=pending.get("phone", ""),
            role=UserRole.CUSTOMER,
            is_active=True,
            created_at=utcnow(),
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictException(detail="An account with this email already exists. Please log in.")
        db.refresh(user)

        log_workflow_event("REGISTER COMPLETED", user_id=user.id, user_email=user.email)
        return issue_auth_response(issuer, user)

    return otp_service.run_guarded(email, code, OtpPurpose.REGISTRATION, create_account)


# ── login ─────────────────────────────────────────────────────────────────────

def login_initiate(db: Session, otp_service: OtpService, email: str, password: str) -> None:
    """Step 1: check the password, then send a login code."""
    user = get_user_by_email(db, email)
    if user is None or not user.is_active:
        raise InvalidCredentialsException(errors=["User not found or inactive"])
    if not verify_password(password, user.hashed_password):
        log_workflow_event("LOGIN", "bad password", user_id=user.id, user_email=user.email, failed=True)
        raise InvalidCredentialsException(errors=["Invalid password"])

    otp_service.issue_challenge(user.email, OtpPurpose.LOGIN)


def login_confirm(
    db: Session,
    otp_service: OtpService,
    issuer: TokenIssuer,
    email: str,
    code: str,
) -> AuthResponse:
    """Step 2: consume the code, stamp last_login_at, return a token."""

    def sign_in(_otp_row: OtpCode) -> AuthResponse:
        user = get_user_by_email(db, email)
        if user is None or not user.is_active:
            raise InvalidCredentialsException(errors=["User not found or inactive"])

        user.last_login_at = utcnow()
        db.commit()
        db.refresh(user)
        return issue_auth_response(issuer, user)

    return otp_service.run_guarded(email, code, OtpPurpose.LOGIN, sign_in)
