"""Bearer token issuing and validation"""
from datetime import timedelta

from jose import jwt

from app.models.user import UserRole
from app.services.token_service import TokenIssuer
from app.utils.timeutils import utcnow

SECRET = "test-signing-key-that-is-long-enough-for-hs256"


def test_issued_token_round_trips(token_issuer):
    token, expires_at = token_issuer.issue(7, "ann@autobuyers.net", "Ann Lee", UserRole.ADMIN)

    data = token_issuer.validate(token)
    assert data.user_id == 7
    assert data.email == "ann@autobuyers.net"
    assert data.full_name == "Ann Lee"
    assert data.role == UserRole.ADMIN

    assert expires_at.tzinfo is None
    assert abs(expires_at - (utcnow() + timedelta(hours=24))) < timedelta(minutes=1)


def test_token_carries_issuer_and_audience(token_issuer):
    token, _ = token_issuer.issue(1, "ann@autobuyers.net", "Ann Lee", UserRole.CUSTOMER)
    claims = jwt.get_unverified_claims(token)

    assert claims["sub"] == "1"
    assert claims["iss"] == "CarDealershipAPI"
    assert claims["aud"] == "CarDealershipAPI"
    assert claims["role"] == "customer"
    assert claims["exp"] > claims["iat"]


def test_token_signed_with_other_key_is_rejected(token_issuer):
    other = TokenIssuer(secret_key="a-completely-different-signing-key-value")
    token, _ = other.issue(1, "ann@autobuyers.net", "Ann Lee", UserRole.CUSTOMER)
    assert token_issuer.validate(token) is None


def test_token_for_other_audience_is_rejected(token_issuer):
    other = TokenIssuer(secret_key=SECRET, audience="SomeOtherService")
    token, _ = other.issue(1, "ann@autobuyers.net", "Ann Lee", UserRole.CUSTOMER)
    assert token_issuer.validate(token) is None


def test_expired_token_is_rejected():
    issuer = TokenIssuer(secret_key=SECRET, expire_hours=-1)
    token, _ = issuer.issue(1, "ann@autobuyers.net", "Ann Lee", UserRole.CUSTOMER)
    assert issuer.validate(token) is None


def test_garbage_and_empty_tokens_are_rejected(token_issuer):
    assert token_issuer.validate("not-a-jwt") is None
    assert token_issuer.validate("") is None
