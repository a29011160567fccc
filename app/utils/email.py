"""OTP delivery: console simulation for development, SMTP (TLS) for real mail."""
from __future__ import annotations

import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.core.config import settings
from app.models.otp import OtpPurpose

logger = logging.getLogger(__name__)

_PURPOSE_LABELS = {
    OtpPurpose.REGISTRATION: "complete your registration",
    OtpPurpose.LOGIN: "sign in",
    OtpPurpose.PURCHASE_REQUEST: "confirm your purchase request",
    OtpPurpose.UPDATE_VEHICLE: "confirm the vehicle update",
}


class ConsoleNotifier:
    """Prints the code to the application log instead of sending it."""

    def deliver(self, email: str, purpose: OtpPurpose, code: str, expires_at: datetime) -> bool:
        logger.info(
            "\n==========================================\n"
            "OTP DELIVERY SIMULATION\n"
            f"To: {email}\n"
            f"Purpose: {purpose.value}\n"
            f"Code: {code}\n"
            f"Expires: {expires_at:%Y-%m-%d %H:%M:%S} UTC\n"
            "=========================================="
        )
        return True


class SmtpNotifier:
    """Sends the code by email through the configured SMTP relay."""

    def __init__(self, host: str = None, port: int = None, user: str = None,
                 password: str = None, sender: str = None):
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.user = user if user is not None else settings.SMTP_USER
        self.password = password if password is not None else settings.SMTP_PASS
        self.sender = sender or settings.EMAIL_FROM

    def _build_smtp_connection(self) -> smtplib.SMTP:
        """Open an authenticated SMTP TLS connection."""
        conn = smtplib.SMTP(self.host, self.port, timeout=15)
        conn.ehlo()
        conn.starttls()
        conn.ehlo()
        if self.user:
            conn.login(self.user, self.password)
        return conn

    def send_email(self, to: str, subject: str, html_body: str, plain_body: str = "") -> bool:
        """
        Send a transactional email. Returns True on success, False on failure.
        """
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"Car Dealership <{self.sender}>"
            msg["To"] = to

            if plain_body:
                msg.attach(MIMEText(plain_body, "plain", "utf-8"))
            msg.attach(MIMEText(html_body, "html", "utf-8"))

            with self._build_smtp_connection() as conn:
                conn.sendmail(self.sender, [to], msg.as_string())

            logger.info(f"[Email] Sent '{subject}' → {to}")
            return True

        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"[Email] Failed to send '{subject}' to {to}: {exc}")
            return False

    def deliver(self, email: str, purpose: OtpPurpose, code: str, expires_at: datetime) -> bool:
        """Send a 6-digit OTP for the given purpose."""
        action = _PURPOSE_LABELS.get(purpose, "continue")
        subject = "Your Car Dealership Verification Code"
        html_body = f"""
<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif;">
  <p>Hello,</p>
  <p>Use the verification code below to {action}.
     The code expires at <strong>{expires_at:%H:%M} UTC</strong>.</p>
  <p style="font-size: 32px; font-weight: 700; letter-spacing: 8px;">{code}</p>
  <p>If you did not request this code, please ignore this email.</p>
</body>
</html>
"""
        plain_body = (
            f"Hello,\n\nYour verification code is: {code}\n"
            f"Use it to {action}. It expires at {expires_at:%H:%M} UTC."
        )
        return self.send_email(email, subject, html_body, plain_body)


def build_notifier(mode: str = None):
    """Return the notifier selected by OTP_DELIVERY."""
    mode = (mode or settings.OTP_DELIVERY).lower()
    if mode == "smtp":
        return SmtpNotifier()
    return ConsoleNotifier()
