"""Shared fixtures: throwaway SQLite database, recording notifier, API client"""
import os
import tempfile
from datetime import datetime, timedelta
from decimal import Decimal

# Settings are read at import time, so these must be set before importing app.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("OTP_CLEANUP_ENABLED", "false")
os.environ.setdefault("SEED_DEMO_DATA", "false")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="cardealership-logs-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{tempfile.mkdtemp(prefix='cardealership-db-')}/app.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-signing-key-that-is-long-enough-for-hs256")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.core.dependencies import get_db, get_notifier, get_token_issuer
from app.db.base import Base
from app.db.session import build_engine
from app.models.otp import OtpPurpose
from app.models.user import User, UserRole
from app.models.vehicle import Vehicle, VehicleStatus
from app.services.auth_service import get_password_hash
from app.services.otp_service import OtpService
from app.services.token_service import TokenIssuer
from app.utils.timeutils import utcnow


class RecordingNotifier:
    """Keeps every delivered code in memory instead of sending it"""

    def __init__(self):
        self.sent = []

    def deliver(self, email, purpose, code, expires_at):
        self.sent.append({"email": email, "purpose": purpose, "code": code, "expires_at": expires_at})
        return True

    def last_code(self, email: str = None, purpose: OtpPurpose = None) -> str:
        for item in reversed(self.sent):
            if email is not None and item["email"] != email.lower():
                continue
            if purpose is not None and item["purpose"] != purpose:
                continue
            return item["code"]
        raise AssertionError(f"no code delivered to {email} for {purpose}")


class FakeClock:
    def __init__(self, now: datetime = datetime(2026, 1, 1, 12, 0, 0)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def otp_service(db, notifier):
    return OtpService(db, notifier=notifier)


@pytest.fixture
def token_issuer():
    return TokenIssuer(secret_key="test-signing-key-that-is-long-enough-for-hs256")


@pytest.fixture
def create_user(db):
    def _create(email="jane.roe@autobuyers.net", password="Secret123!", role=UserRole.CUSTOMER,
                first_name="Jane", last_name="Roe", is_active=True) -> User:
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email.lower(),
            hashed_password=get_password_hash(password),
            phone="5550100",
            role=role,
            is_active=is_active,
            created_at=utcnow(),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _create


@pytest.fixture
def create_vehicle(db):
    counter = {"n": 0}

    def _create(make="Toyota", model="Camry", year=2022, price="28500.00", color="White",
                status=VehicleStatus.AVAILABLE, vin=None, **extra) -> Vehicle:
        counter["n"] += 1
        vehicle = Vehicle(
            make=make,
            model=model,
            year=year,
            color=color,
            vin=vin or f"TESTVIN{counter['n']:010d}",
            price=Decimal(price),
            mileage=extra.pop("mileage", 1000),
            fuel_type=extra.pop("fuel_type", "Gasoline"),
            transmission=extra.pop("transmission", "Automatic"),
            description=extra.pop("description", ""),
            status=status,
            created_at=utcnow(),
        )
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle
    return _create


@pytest.fixture
def client(session_factory, notifier, token_issuer):
    from app.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_token_issuer] = lambda: token_issuer

    # Not used as a context manager: startup would seed the configured database.
    test_client = TestClient(app, raise_server_exceptions=False)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login(client, notifier):
    """Run both login steps over HTTP and return the Authorization header"""
    def _login(email: str, password: str) -> dict:
        response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        code = notifier.last_code(email, OtpPurpose.LOGIN)
        response = client.post("/api/v1/auth/verify-login", json={"email": email, "otp_code": code})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}
    return _login
