"""Two-step registration and login"""
import pytest

from app.errors.exceptions import ConflictException, InvalidCredentialsException, InvalidOtpException
from app.models.otp import OtpCode, OtpPurpose
from app.models.user import User, UserRole
from app.schemas.auth_schemas import RegisterRequest
from app.services import auth_service

NEW_EMAIL = "new.customer@autobuyers.net"


def _registration(email=NEW_EMAIL, password="Secret123!"):
    return RegisterRequest(first_name=" Maria ", last_name="Lopez", email=email, password=password, phone="5550111")


def test_register_then_confirm_creates_customer(db, otp_service, notifier, token_issuer):
    auth_service.register_initiate(db, otp_service, _registration())
    assert db.query(User).count() == 0

    code = notifier.last_code(NEW_EMAIL, OtpPurpose.REGISTRATION)
    auth = auth_service.register_confirm(db, otp_service, token_issuer, NEW_EMAIL, code)

    user = db.query(User).one()
    assert user.email == NEW_EMAIL
    assert user.first_name == "Maria"
    assert user.last_name == "Lopez"
    assert user.phone == "5550111"
    assert user.role == UserRole.CUSTOMER
    assert user.is_active is True
    assert auth_service.verify_password("Secret123!", user.hashed_password)

    assert auth.email == NEW_EMAIL
    assert auth.full_name == "Maria Lopez"
    assert auth.role == UserRole.CUSTOMER
    assert token_issuer.validate(auth.access_token).user_id == user.id


def test_pending_registration_never_stores_plain_password(db, otp_service):
    auth_service.register_initiate(db, otp_service, _registration(password="Plaintext9"))

    payload = db.query(OtpCode).one().payload
    assert "password" not in payload
    assert "Plaintext9" not in str(payload)
    assert auth_service.verify_password("Plaintext9", payload["hashed_password"])


def test_wrong_code_then_right_code_then_replay(db, otp_service, notifier, token_issuer):
    auth_service.register_initiate(db, otp_service, _registration())
    code = notifier.last_code(NEW_EMAIL, OtpPurpose.REGISTRATION)
    wrong = "000000" if code != "000000" else "999999"

    with pytest.raises(InvalidOtpException):
        auth_service.register_confirm(db, otp_service, token_issuer, NEW_EMAIL, wrong)
    assert db.query(User).count() == 0

    auth_service.register_confirm(db, otp_service, token_issuer, NEW_EMAIL, code)
    assert db.query(User).count() == 1

    with pytest.raises(InvalidOtpException):
        auth_service.register_confirm(db, otp_service, token_issuer, NEW_EMAIL, code)
    assert db.query(User).count() == 1


def test_register_rejects_existing_email_ignoring_case(db, otp_service, notifier, create_user):
    create_user(email=NEW_EMAIL)

    with pytest.raises(ConflictException):
        auth_service.register_initiate(db, otp_service, _registration(email="New.Customer@AutoBuyers.net"))
    assert notifier.sent == []


def test_confirm_conflicts_when_email_taken_meanwhile(db, otp_service, notifier, token_issuer, create_user):
    auth_service.register_initiate(db, otp_service, _registration())
    code = notifier.last_code(NEW_EMAIL, OtpPurpose.REGISTRATION)
    create_user(email=NEW_EMAIL)

    with pytest.raises(ConflictException):
        auth_service.register_confirm(db, otp_service, token_issuer, NEW_EMAIL, code)


def test_login_issues_code_and_confirm_returns_token(db, otp_service, notifier, token_issuer, create_user):
    user = create_user(email="jane.roe@autobuyers.net", password="Secret123!")
    assert user.last_login_at is None

    auth_service.login_initiate(db, otp_service, "Jane.Roe@autobuyers.net", "Secret123!")
    code = notifier.last_code("jane.roe@autobuyers.net", OtpPurpose.LOGIN)
    auth = auth_service.login_confirm(db, otp_service, token_issuer, "jane.roe@autobuyers.net", code)

    db.refresh(user)
    assert user.last_login_at is not None
    assert token_issuer.validate(auth.access_token).user_id == user.id


@pytest.mark.parametrize(
    "email, password",
    [
        ("jane.roe@autobuyers.net", "WrongPass1"),
        ("nobody@autobuyers.net", "Secret123!"),
    ],
)
def test_login_rejects_bad_credentials(db, otp_service, notifier, create_user, email, password):
    create_user(email="jane.roe@autobuyers.net", password="Secret123!")

    with pytest.raises(InvalidCredentialsException):
        auth_service.login_initiate(db, otp_service, email, password)
    assert notifier.sent == []


def test_login_rejects_inactive_user(db, otp_service, create_user):
    create_user(email="jane.roe@autobuyers.net", password="Secret123!", is_active=False)

    with pytest.raises(InvalidCredentialsException):
        auth_service.login_initiate(db, otp_service, "jane.roe@autobuyers.net", "Secret123!")


def test_login_confirm_fails_if_user_deactivated_meanwhile(db, otp_service, notifier, token_issuer, create_user):
    user = create_user(email="jane.roe@autobuyers.net", password="Secret123!")
    auth_service.login_initiate(db, otp_service, user.email, "Secret123!")
    code = notifier.last_code(user.email, OtpPurpose.LOGIN)

    user.is_active = False
    db.commit()

    with pytest.raises(InvalidCredentialsException):
        auth_service.login_confirm(db, otp_service, token_issuer, user.email, code)


def test_login_code_cannot_complete_registration(db, otp_service, notifier, token_issuer, create_user):
    user = create_user(email="jane.roe@autobuyers.net", password="Secret123!")
    auth_service.login_initiate(db, otp_service, user.email, "Secret123!")
    code = notifier.last_code(user.email, OtpPurpose.LOGIN)

    with pytest.raises(InvalidOtpException):
        auth_service.register_confirm(db, otp_service, token_issuer, user.email, code)
