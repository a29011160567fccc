"""One-time passcode engine and the initiate/confirm protocol built on it."""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional, TypeVar

from sqlalchemy.orm import Session

from app.core.config import settings
from app.errors.exceptions import InvalidOtpException
from app.models.otp import OtpCode, OtpPurpose
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")

OTP_LENGTH = 6


def generate_otp_code() -> str:
    """Return a uniformly random 6-digit numeric code, leading zeros kept."""
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class OtpService:
    """
    Issues and consumes codes scoped by (email, purpose).

    At most one unused, unexpired code exists per scope: generating a new code
    marks every earlier unused one as used. Codes are single-use.
    """

    def __init__(
        self,
        db: Session,
        notifier=None,
        expire_minutes: int = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.notifier = notifier
        self.expire_minutes = expire_minutes or settings.OTP_EXPIRE_MINUTES
        self.clock = clock

    # ── engine ────────────────────────────────────────────────────────────────

    def _mark_unused_as_used(self, email: str, purpose: OtpPurpose, now: datetime) -> int:
        return (
            self.db.query(OtpCode)
            .filter(
                OtpCode.email == email,
                OtpCode.purpose == purpose,
                OtpCode.is_used == False,  # noqa: E712
            )
            .update({"is_used": True, "used_at": now}, synchronize_session=False)
        )

    def generate(self, email: str, purpose: OtpPurpose, payload: Optional[dict] = None) -> str:
        """
        Supersede any live code for the scope, persist a fresh one and hand it
        to the notifier. Returns the plain code for internal callers only.
        """
        email = normalize_email(email)
        now = self.clock()

        self._mark_unused_as_used(email, purpose, now)

        code = generate_otp_code()
        row = OtpCode(
            email=email,
            code=code,
            purpose=purpose,
            payload=payload,
            created_at=now,
            expires_at=now + timedelta(minutes=self.expire_minutes),
            is_used=False,
        )
        self.db.add(row)
        self.db.commit()
        logger.info(f"[OTP] Generated {purpose.value} code for {email}")

        self._deliver(email, purpose, code, row.expires_at)
        return code

    def _deliver(self, email: str, purpose: OtpPurpose, code: str, expires_at: datetime) -> None:
        if self.notifier is None:
            logger.warning(f"[OTP] No notifier configured; {purpose.value} code for {email} not delivered")
            return
        try:
            sent = self.notifier.deliver(email, purpose, code, expires_at)
        except Exception as exc:
            logger.warning(f"[OTP] Delivery of {purpose.value} code to {email} raised: {exc}")
            return
        if sent is False:
            logger.warning(f"[OTP] Delivery of {purpose.value} code to {email} failed")

    def verify(self, email: str, code: str, purpose: OtpPurpose) -> Optional[OtpCode]:
        """
        Claim the matching live code and return it, or None.

        The claim is a conditional UPDATE on ``is_used``, so of two concurrent
        validations of one code only one gets the row.
        """
        email = normalize_email(email)
        now = self.clock()

        row: Optional[OtpCode] = (
            self.db.query(OtpCode)
            .filter(
                OtpCode.email == email,
                OtpCode.code == (code or "").strip(),
                OtpCode.purpose == purpose,
                OtpCode.is_used == False,  # noqa: E712
                OtpCode.expires_at > now,
            )
            .order_by(OtpCode.id.desc())
            .first()
        )
        if row is None:
            logger.warning(f"[OTP] Invalid {purpose.value} code attempt for {email}")
            return None

        claimed = (
            self.db.query(OtpCode)
            .filter(OtpCode.id == row.id, OtpCode.is_used == False)  # noqa: E712
            .update({"is_used": True, "used_at": now}, synchronize_session=False)
        )
        if claimed != 1:
            self.db.rollback()
            logger.warning(f"[OTP] {purpose.value} code for {email} was consumed concurrently")
            return None

        self.db.commit()
        self.db.refresh(row)
        logger.info(f"[OTP] Validated {purpose.value} code for {email}")
        return row

    def validate(self, email: str, code: str, purpose: OtpPurpose) -> bool:
        return self.verify(email, code, purpose) is not None

    def invalidate(self, email: str, purpose: OtpPurpose) -> int:
        """Mark every unused code of the scope as used, expired or not."""
        count = self._mark_unused_as_used(normalize_email(email), purpose, self.clock())
        self.db.commit()
        return count

    def cleanup_expired(self) -> int:
        """Delete all codes whose expiry lies in the past, used or not."""
        deleted = (
            self.db.query(OtpCode)
            .filter(OtpCode.expires_at < self.clock())
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"[OTP] Cleaned up {deleted} expired codes")
        return deleted

    # ── guarded-action protocol ───────────────────────────────────────────────

    def issue_challenge(self, email: str, purpose: OtpPurpose, payload: Optional[dict] = None) -> None:
        """Initiate step: the code only travels through the notifier."""
        self.generate(email, purpose, payload=payload)

    def run_guarded(
        self,
        email: str,
        code: str,
        purpose: OtpPurpose,
        action: Callable[[OtpCode], T],
    ) -> T:
        """
        Confirm step: consume the code, then run *action* with the claimed row.

        The code stays consumed even if *action* raises.
        """
        otp_row = self.verify(email, code, purpose)
        if otp_row is None:
            raise InvalidOtpException()
        return action(otp_row)
