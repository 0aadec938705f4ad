"""Appointment model for booking system."""

from sqlalchemy import Column, String, DateTime, Date, Numeric, ForeignKey, Enum as SQLEnum, Text, Index, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
import enum
from app.core.database import Base


class AppointmentStatus(str, enum.Enum):
    BOOKED = "booked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CancelledBy(str, enum.Enum):
    USER = "user"
    PROVIDER = "provider"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_provider_date_start", "provider_id", "date", "start_time"),
        Index("ix_appointments_user_date", "user_id", "date"),
        # A provider can hold at most one live booking per start time
        Index(
            "uq_appointments_booked_slot", "provider_id", "date", "start_time", unique=True,
            postgresql_where=text("status = 'booked'"), sqlite_where=text("status = 'booked'"),
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    provider_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id"), nullable=False, index=True)

    # Appointment details
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    status = Column(
        SQLEnum(AppointmentStatus, name="appointmentstatus", values_callable=_enum_values),
        default=AppointmentStatus.BOOKED,
        nullable=False,
        index=True,
    )
    notes = Column(Text, nullable=True)
    # Service price when booked; revenue reports may use this or the live price
    price_at_booking = Column(Numeric(10, 2), nullable=True)

    cancelled_at = Column(DateTime, nullable=True)
    cancelled_by = Column(
        SQLEnum(CancelledBy, name="cancelledby", values_callable=_enum_values),
        nullable=True,
    )
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", foreign_keys=[user_id], lazy="raise")
    provider = relationship("User", foreign_keys=[provider_id], lazy="raise")
    service = relationship("Service", lazy="raise")
