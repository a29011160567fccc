"""One-time passcode engine"""
from datetime import timedelta

import pytest

from app.errors.exceptions import InvalidOtpException
from app.models.otp import OtpCode, OtpPurpose
from app.services import otp_service as otp_module
from app.services.otp_service import OtpService, generate_otp_code

EMAIL = "buyer@autobuyers.net"


@pytest.fixture
def clocked_service(db, notifier, clock):
    return OtpService(db, notifier=notifier, clock=clock)


def _live_codes(db, email, purpose, now):
    return (
        db.query(OtpCode)
        .filter(
            OtpCode.email == email,
            OtpCode.purpose == purpose,
            OtpCode.is_used == False,  # noqa: E712
            OtpCode.expires_at > now,
        )
        .count()
    )


def test_generated_code_is_six_digits():
    for _ in range(50):
        code = generate_otp_code()
        assert len(code) == 6
        assert code.isdigit()


def test_generated_code_keeps_leading_zeros(monkeypatch):
    monkeypatch.setattr(otp_module.secrets, "randbelow", lambda n: 42)
    assert generate_otp_code() == "000042"


def test_generate_persists_and_delivers(db, clocked_service, notifier, clock):
    code = clocked_service.generate("Buyer@AutoBuyers.net", OtpPurpose.LOGIN)

    row = db.query(OtpCode).one()
    assert row.email == EMAIL
    assert row.code == code
    assert row.is_used is False
    assert row.created_at == clock.now
    assert row.expires_at == clock.now + timedelta(minutes=10)

    assert notifier.sent[-1]["email"] == EMAIL
    assert notifier.sent[-1]["code"] == code
    assert notifier.sent[-1]["purpose"] == OtpPurpose.LOGIN


def test_new_code_supersedes_previous(db, clocked_service, clock, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(otp_module, "generate_otp_code", lambda: next(codes))

    first = clocked_service.generate(EMAIL, OtpPurpose.LOGIN)
    second = clocked_service.generate(EMAIL, OtpPurpose.LOGIN)

    assert _live_codes(db, EMAIL, OtpPurpose.LOGIN, clock.now) == 1
    assert clocked_service.validate(EMAIL, first, OtpPurpose.LOGIN) is False
    assert clocked_service.validate(EMAIL, second, OtpPurpose.LOGIN) is True


def test_codes_are_scoped_by_purpose(clocked_service):
    login_code = clocked_service.generate(EMAIL, OtpPurpose.LOGIN)
    clocked_service.generate(EMAIL, OtpPurpose.PURCHASE_REQUEST)

    assert clocked_service.validate(EMAIL, login_code, OtpPurpose.REGISTRATION) is False
    assert clocked_service.validate(EMAIL, login_code, OtpPurpose.LOGIN) is True


def test_code_validates_only_once(clocked_service):
    code = clocked_service.generate(EMAIL, OtpPurpose.REGISTRATION)

    assert clocked_service.validate(EMAIL, code, OtpPurpose.REGISTRATION) is True
    assert clocked_service.validate(EMAIL, code, OtpPurpose.REGISTRATION) is False


def test_validation_ignores_email_case_and_code_whitespace(clocked_service):
    code = clocked_service.generate(EMAIL, OtpPurpose.LOGIN)
    assert clocked_service.validate("BUYER@autobuyers.NET", f" {code} ", OtpPurpose.LOGIN) is True


def test_code_fails_at_expiry_instant(clocked_service, clock):
    code = clocked_service.generate(EMAIL, OtpPurpose.LOGIN)
    clock.advance(minutes=10)
    assert clocked_service.validate(EMAIL, code, OtpPurpose.LOGIN) is False


def test_code_passes_just_before_expiry(clocked_service, clock):
    code = clocked_service.generate(EMAIL, OtpPurpose.LOGIN)
    clock.advance(minutes=9, seconds=59)
    assert clocked_service.validate(EMAIL, code, OtpPurpose.LOGIN) is True


def test_failed_validation_changes_nothing(db, clocked_service, clock, monkeypatch):
    monkeypatch.setattr(otp_module, "generate_otp_code", lambda: "123456")
    code = clocked_service.generate(EMAIL, OtpPurpose.LOGIN)

    assert clocked_service.validate(EMAIL, "654321", OtpPurpose.LOGIN) is False
    assert _live_codes(db, EMAIL, OtpPurpose.LOGIN, clock.now) == 1
    assert clocked_service.validate(EMAIL, code, OtpPurpose.LOGIN) is True


def test_claim_loses_to_concurrent_consumer(session_factory, notifier, clock):
    first_session = session_factory()
    second_session = session_factory()
    try:
        first = OtpService(first_session, notifier=notifier, clock=clock)
        second = OtpService(second_session, notifier=notifier, clock=clock)
        code = first.generate(EMAIL, OtpPurpose.PURCHASE_REQUEST)

        assert first.verify(EMAIL, code, OtpPurpose.PURCHASE_REQUEST) is not None
        assert second.verify(EMAIL, code, OtpPurpose.PURCHASE_REQUEST) is None
    finally:
        first_session.close()
        second_session.close()


def test_invalidate_marks_all_unused_codes(db, clocked_service, clock):
    code = clocked_service.generate(EMAIL, OtpPurpose.UPDATE_VEHICLE)

    assert clocked_service.invalidate(EMAIL, OtpPurpose.UPDATE_VEHICLE) == 1
    assert _live_codes(db, EMAIL, OtpPurpose.UPDATE_VEHICLE, clock.now) == 0
    assert clocked_service.validate(EMAIL, code, OtpPurpose.UPDATE_VEHICLE) is False


def test_cleanup_removes_only_expired_rows(db, clocked_service, clock):
    used = clocked_service.generate("old-used@autobuyers.net", OtpPurpose.LOGIN)
    clocked_service.validate("old-used@autobuyers.net", used, OtpPurpose.LOGIN)
    clocked_service.generate("old-unused@autobuyers.net", OtpPurpose.LOGIN)

    clock.advance(minutes=11)
    clocked_service.generate(EMAIL, OtpPurpose.LOGIN)

    assert clocked_service.cleanup_expired() == 2
    remaining = db.query(OtpCode).all()
    assert [row.email for row in remaining] == [EMAIL]


def test_delivery_failure_does_not_fail_generation(db, clock):
    class BrokenNotifier:
        def deliver(self, *args):
            raise ConnectionError("smtp down")

    service = OtpService(db, notifier=BrokenNotifier(), clock=clock)
    code = service.generate(EMAIL, OtpPurpose.LOGIN)

    assert service.validate(EMAIL, code, OtpPurpose.LOGIN) is True


def test_run_guarded_rejects_bad_code(clocked_service):
    clocked_service.issue_challenge(EMAIL, OtpPurpose.LOGIN)
    called = []

    with pytest.raises(InvalidOtpException):
        clocked_service.run_guarded(EMAIL, "abcdef", OtpPurpose.LOGIN, called.append)
    assert called == []


def test_run_guarded_passes_claimed_row(clocked_service, notifier):
    clocked_service.issue_challenge(EMAIL, OtpPurpose.REGISTRATION, payload={"first_name": "Ann"})
    code = notifier.last_code(EMAIL, OtpPurpose.REGISTRATION)

    result = clocked_service.run_guarded(
        EMAIL, code, OtpPurpose.REGISTRATION, lambda row: row.payload["first_name"]
    )
    assert result == "Ann"


def test_code_stays_consumed_when_action_fails(clocked_service, notifier):
    clocked_service.issue_challenge(EMAIL, OtpPurpose.PURCHASE_REQUEST)
    code = notifier.last_code(EMAIL, OtpPurpose.PURCHASE_REQUEST)

    def failing_action(_row):
        raise RuntimeError("vehicle gone")

    with pytest.raises(RuntimeError):
        clocked_service.run_guarded(EMAIL, code, OtpPurpose.PURCHASE_REQUEST, failing_action)
    assert clocked_service.validate(EMAIL, code, OtpPurpose.PURCHASE_REQUEST) is False
