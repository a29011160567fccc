"""Initialize database tables and create initial data if needed"""
import logging
from decimal import Decimal
from typing import Callable

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.base import Base
from app.db.session import engine as default_engine, SessionLocal
from app.models.user import User, UserRole
from app.models.vehicle import Vehicle, VehicleStatus
from app.services.auth_service import get_password_hash
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

# make, model, year, color, vin, price, mileage, fuel_type, transmission, description
DEMO_VEHICLES = [
    ("Toyota", "Camry", 2022, "White", "1234567890ABCDEF1", "28500.00", 15000, "Gasoline", "Automatic", "Reliable sedan with excellent fuel economy"),
    ("Honda", "Civic", 2023, "Blue", "1234567890ABCDEF2", "25000.00", 8000, "Gasoline", "Manual", "Sporty and efficient compact car"),
    ("Ford", "F-150", 2021, "Black", "1234567890ABCDEF3", "42000.00", 25000, "Gasoline", "Automatic", "Powerful pickup truck for work and play"),
    ("BMW", "X5", 2022, "Silver", "1234567890ABCDEF4", "65000.00", 18000, "Gasoline", "Automatic", "Luxury SUV with premium features"),
    ("Tesla", "Model 3", 2023, "Red", "1234567890ABCDEF5", "45000.00", 5000, "Electric", "Automatic", "Electric vehicle with autopilot features"),
    ("Audi", "A4", 2022, "White", "1234567890ABCDEF6", "38000.00", 12000, "Gasoline", "Automatic", "Luxury sedan with advanced technology"),
    ("Mercedes-Benz", "C-Class", 2021, "Black", "1234567890ABCDEF7", "45000.00", 20000, "Gasoline", "Automatic", "Premium sedan with elegant design"),
    ("Chevrolet", "Malibu", 2022, "Gray", "1234567890ABCDEF8", "26000.00", 14000, "Gasoline", "Automatic", "Mid-size sedan with modern features"),
    ("Nissan", "Altima", 2023, "Blue", "1234567890ABCDEF9", "27500.00", 6000, "Gasoline", "CVT", "Comfortable sedan with good fuel economy"),
    ("Hyundai", "Elantra", 2022, "White", "1234567890ABCDEF0", "22000.00", 16000, "Gasoline", "Automatic", "Affordable and reliable compact sedan"),
    ("Jeep", "Wrangler", 2021, "Green", "1234567890ABCDEFG", "38000.00", 22000, "Gasoline", "Manual", "Off-road capable SUV with removable top"),
    ("Subaru", "Outback", 2022, "Silver", "1234567890ABCDEFH", "32000.00", 11000, "Gasoline", "CVT", "All-wheel drive wagon perfect for adventures"),
    ("Mazda", "CX-5", 2023, "Red", "1234567890ABCDEFI", "29000.00", 7500, "Gasoline", "Automatic", "Stylish SUV with premium interior"),
    ("Volkswagen", "Jetta", 2022, "Black", "1234567890ABCDEFJ", "24500.00", 13000, "Gasoline", "Automatic", "German engineering in a compact package"),
    ("Kia", "Sorento", 2023, "Gray", "1234567890ABCDEFK", "35000.00", 4000, "Gasoline", "Automatic", "Three-row SUV with advanced safety features"),
]


def init_db(bind: Engine = None) -> None:
    """Create all database tables"""
    try:
        Base.metadata.create_all(bind=bind or default_engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}")
        raise


def _demo_vehicles() -> list:
    now = utcnow()
    return [
        Vehicle(
            make=make, model=model, year=year, color=color, vin=vin,
            price=Decimal(price), mileage=mileage, fuel_type=fuel_type,
            transmission=transmission, description=description,
            status=VehicleStatus.AVAILABLE, created_at=now,
        )
        for make, model, year, color, vin, price, mileage, fuel_type, transmission, description in DEMO_VEHICLES
    ]


def create_initial_data(session_factory: Callable[[], Session] = SessionLocal, seed_demo: bool = None) -> None:
    """
    Create the admin account from .env configuration when no users exist.

    With SEED_DEMO_DATA the demo customer and the sample inventory are added too.
    """
    seed_demo = settings.SEED_DEMO_DATA if seed_demo is None else seed_demo
    db = session_factory()
    try:
        if db.query(User).count() > 0:
            return

        now = utcnow()
        db.add(User(
            first_name="Admin",
            last_name="User",
            email=settings.SEED_ADMIN_EMAIL.lower(),
            hashed_password=get_password_hash(settings.SEED_ADMIN_PASSWORD),
            phone="1234567890",
            role=UserRole.ADMIN,
            is_active=True,
            created_at=now,
        ))

        if seed_demo:
            db.add(User(
                first_name="John",
                last_name="Doe",
                email=settings.SEED_CUSTOMER_EMAIL.lower(),
                hashed_password=get_password_hash(settings.SEED_CUSTOMER_PASSWORD),
                phone="0987654321",
                role=UserRole.CUSTOMER,
                is_active=True,
                created_at=now,
            ))
            if db.query(Vehicle).count() == 0:
                db.add_all(_demo_vehicles())

        db.commit()
        logger.info(f"Admin created: {settings.SEED_ADMIN_EMAIL}")
        logger.warning("Change default credentials in .env file!")

    except Exception as e:
        logger.error(f"Error creating initial data: {str(e)}")
        db.rollback()
    finally:
        db.close()
