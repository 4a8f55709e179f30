"""Service scheduling model definitions."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from fleet_market.database import Base


APPOINTMENT_STATUSES = ('pending', 'contact_needed', 'confirmed', 'in_progress', 'completed', 'canceled')
ACTIVE_APPOINTMENT_STATUSES = ('confirmed', 'in_progress')


class ServiceType(Base):
    """A bookable service offered by a site."""
    __tablename__ = "service_types"

    id = Column(Integer, primary_key=True)
    site_id = Column(Integer, ForeignKey("sites.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text)
    duration_minutes = Column(Integer, nullable=False, default=60)
    price_estimate = Column(Float)
    category = Column(String)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)


class ServiceAvailability(Base):
    """Weekly open hours for one weekday (0 = Sunday)."""
    __tablename__ = "service_availability"
    __table_args__ = (
        UniqueConstraint("site_id", "day_of_week", name="uq_service_availability_site_day"),
    )

    id = Column(Integer, primary_key=True)
    site_id = Column(Integer, ForeignKey("sites.id"), index=True, nullable=False)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(String, nullable=False)  # "HH:MM"
    end_time = Column(String, nullable=False)
    max_concurrent = Column(Integer, default=1, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)


class ServiceBlockedDate(Base):
    """A calendar date on which a site takes no service bookings."""
    __tablename__ = "service_blocked_dates"
    __table_args__ = (
        UniqueConstraint("site_id", "blocked_date", name="uq_service_blocked_dates_site_date"),
    )

    id = Column(Integer, primary_key=True)
    site_id = Column(Integer, ForeignKey("sites.id"), index=True, nullable=False)
    blocked_date = Column(Date, nullable=False)
    reason = Column(String)


class ServiceAppointment(Base):
    """A customer service appointment.

    ``scheduled_start``/``scheduled_end`` are naive wall-clock values in the
    dealer's local time.
    """
    __tablename__ = "service_appointments"

    id = Column(Integer, primary_key=True)
    site_id = Column(Integer, ForeignKey("sites.id"), index=True, nullable=False)

    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    customer_phone = Column(String)

    service_type_id = Column(Integer, ForeignKey("service_types.id"))
    service_type_name = Column(String)
    is_custom_request = Column(Boolean, default=False)
    custom_description = Column(Text)

    equipment_type = Column(String)
    equipment_make = Column(String)
    equipment_model = Column(String)
    equipment_serial = Column(String)

    preferred_date = Column(Date)
    preferred_time = Column(String)
    scheduled_start = Column(DateTime)
    scheduled_end = Column(DateTime)
    duration_minutes = Column(Integer)

    status = Column(String, default="pending", nullable=False)
    customer_notes = Column(Text)
    technician = Column(String)
    internal_notes = Column(Text)
    cancel_reason = Column(String)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now)
    confirmed_at = Column(DateTime)
    completed_at = Column(DateTime)
    canceled_at = Column(DateTime)
    contacted_at = Column(DateTime)
