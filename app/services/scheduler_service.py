"""
Background purge of expired one-time passcodes.

Wraps an APScheduler AsyncIOScheduler with a single interval job. Each run
opens its own database session so it never shares state with a request.
"""
import logging
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import SessionLocal
from app.services.otp_service import OtpService

logger = logging.getLogger(__name__)

JOB_ID = "otp_cleanup"


def purge_expired_otps(session_factory: Callable[[], Session] = SessionLocal) -> int:
    """Run one cleanup pass; errors are logged and the next pass retries."""
    db = session_factory()
    try:
        return OtpService(db).cleanup_expired()
    except Exception as e:
        db.rollback()
        logger.error(f"[OTP Cleanup] Pass failed: {str(e)}")
        return 0
    finally:
        db.close()


class OtpCleanupScheduler:
    """Runs purge_expired_otps every *interval_minutes*."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        interval_minutes: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.interval_minutes = interval_minutes or settings.OTP_CLEANUP_INTERVAL_MINUTES
        self.scheduler = AsyncIOScheduler(
            job_defaults={
                'coalesce': True,
                'max_instances': 1,
                'misfire_grace_time': 300
            }
        )
        self._started = False

    @property
    def running(self) -> bool:
        return self._started

    def start(self) -> None:
        if self._started:
            logger.warning("OTP cleanup scheduler already started")
            return

        self.scheduler.add_job(
            purge_expired_otps,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=JOB_ID,
            kwargs={"session_factory": self.session_factory},
            replace_existing=True,
        )
        self.scheduler.start()
        self._started = True
        logger.info(f"OTP cleanup scheduler started (every {self.interval_minutes} min)")

    def shutdown(self) -> None:
        if not self._started:
            return
        self.scheduler.shutdown(wait=False)
        self._started = False
        logger.info("OTP cleanup scheduler stopped")
