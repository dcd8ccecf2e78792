"""SQLAlchemy models for the passenger service."""
from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import TIMESTAMP, Column, Date, Integer, String, Text

from .database import Base


class VerificationStatus(str, Enum):
    """Phone and admin verification state."""

    UNVERIFIED = "Unverified"
    VERIFIED = "Verified"


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class Passenger(Base):
    """Registered passenger account."""
    __tablename__ = 'Passenger'

    passenger_id = Column(Integer, primary_key=True, autoincrement=True)
    name_with_initials = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    phone_number = Column(String(20), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    from_station = Column(String(100), nullable=False)
    to_station = Column(String(100), nullable=False)
    travel_date = Column(Date, nullable=False)
    password = Column(String(255), nullable=False)  # Argon2 hash, never plaintext
    phone_verification_status = Column(
        String(20), nullable=False, default=VerificationStatus.UNVERIFIED.value
    )
    admin_verification_status = Column(
        String(20), nullable=False, default=VerificationStatus.UNVERIFIED.value
    )
    created_at = Column(TIMESTAMP, default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<Passenger(passenger_id={self.passenger_id}, email='{self.email}')>"
