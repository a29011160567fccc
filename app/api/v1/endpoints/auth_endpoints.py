"""Authentication endpoints: two-step registration and login"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from app.core.dependencies import get_db, get_otp_service, get_token_issuer
from app.errors.response_codes import SuccessCode, success_response
from app.middleware.auth import get_current_user
from app.models.user import User
from app.schemas.auth_schemas import (
    LoginRequest,
    OtpResponse,
    RegisterRequest,
    UserResponse,
    VerifyOtpRequest,
)
from app.services import auth_service
from app.services.otp_service import OtpService
from app.services.token_service import TokenIssuer

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", status_code=status.HTTP_200_OK)
def register(
    body: RegisterRequest,
    db: Session = Depends(get_db),
    otp_service: OtpService = Depends(get_otp_service),
):
    """
    ## Register a new customer account (Step 1 of 2)

    **Role:** Public.

    Validates the submitted data and sends a 6-digit code to the email address.
    The account is **not** created at this stage.

    | Field      | Type   | Description                    |
    |------------|--------|--------------------------------|
    | first_name | string | Required                       |
    | last_name  | string | Required                       |
    | email      | string | Valid email, the code goes here|
    | password   | string | Minimum 6 characters           |
    | phone      | string | Optional                       |

    - HTTP 200 → show the code entry screen.
    - HTTP 409 → email already registered.
    - Next: **POST /auth/verify-registration**.
    """
    auth_service.register_initiate(db, otp_service, body)
    return success_response(
        code=SuccessCode.OTP_SENT,
        data=OtpResponse(message="Verification code sent to your email. Enter it to complete registration."),
    )


@router.post("/verify-registration", status_code=status.HTTP_201_CREATED)
def verify_registration(
    body: VerifyOtpRequest,
    db: Session = Depends(get_db),
    otp_service: OtpService = Depends(get_otp_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """
    ## Verify code and complete registration (Step 2 of 2)

    **Role:** Public.

    On success the customer account is created and a bearer token returned,
    so no separate login is needed.

    - HTTP 400 → invalid or expired code; start again from `/auth/register`.
    - HTTP 409 → the account was created in the meantime, log in instead.
    """
    auth = auth_service.register_confirm(db, otp_service, issuer, body.email, body.otp_code)
    return success_response(code=SuccessCode.USER_REGISTERED, data=auth)


@router.post("/login", status_code=status.HTTP_200_OK)
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    otp_service: OtpService = Depends(get_otp_service),
):
    """
    ## Login with email and password (Step 1 of 2)

    **Role:** Public.

    Checks the credentials and sends a 6-digit login code. No token yet.

    - HTTP 401 → unknown email, inactive account or wrong password.
    - Next: **POST /auth/verify-login**.
    """
    auth_service.login_initiate(db, otp_service, body.email, body.password)
    return success_response(
        code=SuccessCode.OTP_SENT,
        data=OtpResponse(message="Login code sent to your email."),
    )


@router.post("/verify-login", status_code=status.HTTP_200_OK)
def verify_login(
    body: VerifyOtpRequest,
    db: Session = Depends(get_db),
    otp_service: OtpService = Depends(get_otp_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """
    ## Verify login code (Step 2 of 2)

    **Role:** Public.

    Returns `{access_token, token_type, email, full_name, role, expires_at}`.
    Send the token as `Authorization: Bearer <token>` afterwards.
    """
    auth = auth_service.login_confirm(db, otp_service, issuer, body.email, body.otp_code)
    return success_response(code=SuccessCode.AUTHENTICATED, data=auth)


@router.get("/me")
def read_current_user(current_user: User = Depends(get_current_user)):
    """
    ## Get the current user's profile

    **Role:** Any authenticated user.
    """
    return success_response(code=SuccessCode.RETRIEVED, data=UserResponse.model_validate(current_user))
