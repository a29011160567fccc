"""OtpCode: one-time codes guarding registration, login and sensitive mutations."""
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, JSON, String, Enum as SQLEnum

from app.db.base import Base
from app.utils.timeutils import utcnow


class OtpPurpose(str, Enum):
    REGISTRATION = "registration"
    LOGIN = "login"
    PURCHASE_REQUEST = "purchase_request"
    UPDATE_VEHICLE = "update_vehicle"


class OtpCode(Base):
    """
    Holds a 6-digit code scoped by (email, purpose).

    Lifecycle
    ---------
    1. An initiate call inserts a row (is_used=False) after marking every
       earlier unused row for the same scope as used.
    2. The matching confirm call claims the row → is_used=True, used_at set.
    3. Expired rows, used or not, are deleted by the periodic cleanup sweep.
    """

    __tablename__ = "otp_codes"
    __table_args__ = (
        Index("ix_otp_codes_email_code_purpose", "email", "code", "purpose"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(150), nullable=False, index=True)
    code = Column(String(6), nullable=False)
    purpose = Column(
        SQLEnum(
            OtpPurpose,
            name="otppurpose",
            values_callable=lambda obj: [e.value for e in obj],
        ),
        nullable=False,
    )

    # Data bound to the pending action (e.g. the registration form), so the
    # confirm step does not have to ask the client to resend it.
    payload = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)
    used_at = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<OtpCode(id={self.id}, email={self.email!r}, purpose={self.purpose}, "
            f"expires_at={self.expires_at}, is_used={self.is_used})>"
        )
