"""Site (tenant) model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from fleet_market.database import Base


class Site(Base):
    """One dealership's instance of the platform."""
    __tablename__ = "sites"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)
    site_name = Column(String, nullable=False)
    subdomain = Column(String, unique=True, index=True)
    template_id = Column(String)
    subscription_tier = Column(String, default="basic", nullable=False)
    created_at = Column(DateTime, default=datetime.now)
