"""Vehicle inventory model."""
from enum import Enum

from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.timeutils import utcnow


class VehicleStatus(str, Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    SOLD = "sold"
    MAINTENANCE = "maintenance"


class Vehicle(Base):
    """
    A car on the lot.

    Status lifecycle
    ----------------
    available → reserved   (customer confirms a purchase request)
    reserved  → sold       (admin completes the sale)
    reserved  → available  (admin cancels the sale)
    maintenance is set by an admin outside the purchase flow.
    """
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    color = Column(String(100), nullable=False, default="")
    vin = Column(String(20), unique=True, nullable=False, index=True)
    price = Column(Numeric(18, 2), nullable=False)
    mileage = Column(Integer, nullable=False, default=0)
    fuel_type = Column(String(20), nullable=False, default="")
    transmission = Column(String(20), nullable=False, default="")
    description = Column(Text, nullable=False, default="")

    status = Column(
        SQLEnum(
            VehicleStatus,
            name="vehiclestatus",
            values_callable=lambda obj: [e.value for e in obj],
        ),
        nullable=False,
        default=VehicleStatus.AVAILABLE,
        index=True,
    )

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    sales = relationship("Sale", back_populates="vehicle")

    def __repr__(self):
        return f"<Vehicle(id={self.id}, vin={self.vin!r}, status={self.status})>"

    @property
    def make_model(self) -> str:
        return f"{self.make} {self.model}"
