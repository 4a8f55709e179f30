"""Rental model definitions."""

from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from fleet_market.database import Base


class RentalItem(Base):
    """A piece of equipment a site rents out."""
    __tablename__ = "rental_items"

    id = Column(Integer, primary_key=True)
    site_id = Column(Integer, ForeignKey("sites.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    daily_rate = Column(Float, default=0)
    is_active = Column(Boolean, default=True)


class RentalBooking(Base):
    """A customer's rental request."""
    __tablename__ = "rental_bookings"

    id = Column(Integer, primary_key=True)
    site_id = Column(Integer, ForeignKey("sites.id"), index=True, nullable=False)
    rental_item_id = Column(Integer, ForeignKey("rental_items.id"), nullable=False)
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    rental_period = Column(String, default="daily")
    rate_amount = Column(Float, default=0)
    total_amount = Column(Float, default=0)
    quantity = Column(Integer, default=1)
    status = Column(String, default="pending")
    pickup_time = Column(String)
    return_time = Column(String)
    delivery_required = Column(Boolean, default=False)
    delivery_address = Column(String)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.now)
