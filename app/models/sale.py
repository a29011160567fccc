"""Sale (purchase request) database model."""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from enum import Enum
from app.db.base import Base
from app.utils.timeutils import utcnow


class SaleStatus(str, Enum):
    REQUESTED = "requested"
    APPROVED = "approved"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Sale(Base):
    """A customer's purchase request for one vehicle. Rows are never deleted."""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="RESTRICT"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

    # Price captured when the request was confirmed
    sale_price = Column(Numeric(18, 2), nullable=False)

    status = Column(
        SQLEnum(
            SaleStatus,
            name="salestatus",
            values_callable=lambda obj: [e.value for e in obj],
        ),
        nullable=False,
        default=SaleStatus.REQUESTED,
        index=True,
    )

    requested_at = Column(DateTime, default=utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    notes = Column(String(500), nullable=False, default="")

    vehicle = relationship("Vehicle", back_populates="sales")
    customer = relationship("User", back_populates="sales")

    def __repr__(self):
        return (
            f"<Sale(id={self.id}, vehicle_id={self.vehicle_id}, "
            f"customer_id={self.customer_id}, status={self.status})>"
        )
