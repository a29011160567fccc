"""Expired-code cleanup job"""
import asyncio
from datetime import timedelta

from sqlalchemy.orm import sessionmaker

from app.db.session import build_engine
from app.models.otp import OtpCode, OtpPurpose
from app.services.scheduler_service import JOB_ID, OtpCleanupScheduler, purge_expired_otps
from app.utils.timeutils import utcnow


def _add_code(db, email, expires_in_minutes):
    now = utcnow()
    db.add(OtpCode(
        email=email,
        code="123456",
        purpose=OtpPurpose.LOGIN,
        created_at=now,
        expires_at=now + timedelta(minutes=expires_in_minutes),
        is_used=False,
    ))
    db.commit()


def test_purge_deletes_expired_codes(db, session_factory):
    _add_code(db, "stale@autobuyers.net", -5)
    _add_code(db, "fresh@autobuyers.net", 5)

    assert purge_expired_otps(session_factory) == 1
    assert [row.email for row in db.query(OtpCode).all()] == ["fresh@autobuyers.net"]


def test_purge_survives_database_errors(tmp_path):
    # No tables were created in this database
    engine = build_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    try:
        assert purge_expired_otps(sessionmaker(bind=engine)) == 0
    finally:
        engine.dispose()


def test_scheduler_registers_interval_job(session_factory):
    async def run():
        cleanup = OtpCleanupScheduler(session_factory=session_factory, interval_minutes=5)
        cleanup.start()
        try:
            job = cleanup.scheduler.get_job(JOB_ID)
            assert job is not None
            assert job.trigger.interval == timedelta(minutes=5)
            assert cleanup.running
        finally:
            cleanup.shutdown()
        assert not cleanup.running

    asyncio.run(run())


def test_shutdown_without_start_is_a_no_op(session_factory):
    cleanup = OtpCleanupScheduler(session_factory=session_factory, interval_minutes=5)
    cleanup.shutdown()
    assert not cleanup.running
