"""User model definitions."""

from sqlalchemy import Column, Integer, String
from fleet_market.database import Base


class User(Base):
    """Represents a dealer account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String)
    role = Column(String, default="dealer")  # dealer/admin
