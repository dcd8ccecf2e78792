"""
Persistence gateway for the Passenger entity.

All statements are built with the SQLAlchemy expression language, so every
value reaches the database as a bound parameter. Errors from the driver
propagate unchanged; callers decide how to surface them.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.orm import sessionmaker

from .models import Passenger, VerificationStatus

logger = logging.getLogger(__name__)

MUTABLE_PROFILE_FIELDS = (
    "name_with_initials",
    "full_name",
    "address",
    "phone_number",
    "from_station",
    "to_station",
    "travel_date",
)

PHONE_VERIFIED = "phone_verified"
ADMIN_VERIFIED = "admin_verified"

# Upper bound of the INT primary key; larger ids cannot exist and cannot be bound
MAX_PASSENGER_ID = 2**31 - 1


def _valid_id(passenger_id: int) -> bool:
    return 0 < passenger_id <= MAX_PASSENGER_ID


@dataclass
class PassengerSearchFilters:
    """Admin search criteria. Empty strings mean "not filtered"."""
    email: str = ""
    phone_number: str = ""
    from_station: str = ""
    to_station: str = ""
    verification_status: str = ""

    def conditions(self) -> list:
        """Build WHERE conditions for the provided criteria."""
        conditions = []
        if self.email:
            conditions.append(Passenger.email.contains(self.email, autoescape=True))
        if self.phone_number:
            conditions.append(Passenger.phone_number.contains(self.phone_number, autoescape=True))
        if self.from_station:
            conditions.append(Passenger.from_station.contains(self.from_station, autoescape=True))
        if self.to_station:
            conditions.append(Passenger.to_station.contains(self.to_station, autoescape=True))
        if self.verification_status == PHONE_VERIFIED:
            conditions.append(Passenger.phone_verification_status == VerificationStatus.VERIFIED.value)
        elif self.verification_status == ADMIN_VERIFIED:
            conditions.append(Passenger.admin_verification_status == VerificationStatus.VERIFIED.value)
        return conditions


class PassengerRepository:
    """CRUD and query operations over the Passenger table."""

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize repository.

        Args:
            session_factory: SQLAlchemy session factory bound to the engine
        """
        self._session_factory = session_factory

    def get_by_id(self, passenger_id: int) -> Optional[Passenger]:
        if not _valid_id(passenger_id):
            return None
        with self._session_factory() as session:
            return session.get(Passenger, passenger_id)

    def get_by_email(self, email: str) -> Optional[Passenger]:
        with self._session_factory() as session:
            return session.scalars(
                select(Passenger).where(Passenger.email == email)
            ).first()

    def email_exists(self, email: str) -> bool:
        with self._session_factory() as session:
            found = session.scalar(
                select(Passenger.passenger_id).where(Passenger.email == email)
            )
            return found is not None

    def create(
        self,
        *,
        name_with_initials: str,
        full_name: str,
        address: str,
        phone_number: str,
        email: str,
        from_station: str,
        to_station: str,
        travel_date: date,
        password_hash: str,
    ) -> Passenger:
        """
        Insert a passenger.

        Raises:
            sqlalchemy.exc.IntegrityError: If the email is already registered
        """
        passenger = Passenger(
            name_with_initials=name_with_initials,
            full_name=full_name,
            address=address,
            phone_number=phone_number,
            email=email,
            from_station=from_station,
            to_station=to_station,
            travel_date=travel_date,
            password=password_hash,
        )
        with self._session_factory() as session, session.begin():
            session.add(passenger)
        return passenger

    def _update(self, passenger_id: int, values: Dict[str, Any]) -> bool:
        if not _valid_id(passenger_id):
            return False
        with self._session_factory() as session, session.begin():
            result = session.execute(
                update(Passenger)
                .where(Passenger.passenger_id == passenger_id)
                .values(**values)
            )
            return result.rowcount > 0

    def update_profile(self, passenger_id: int, fields: Dict[str, Any]) -> bool:
        """Update mutable profile fields. Returns False if no such passenger."""
        values = {key: fields[key] for key in MUTABLE_PROFILE_FIELDS if key in fields}
        if not values:
            return self.get_by_id(passenger_id) is not None
        return self._update(passenger_id, values)

    def mark_phone_verified(self, passenger_id: int) -> bool:
        return self._update(
            passenger_id, {"phone_verification_status": VerificationStatus.VERIFIED.value}
        )

    def update_password_hash(self, passenger_id: int, password_hash: str) -> bool:
        return self._update(passenger_id, {"password": password_hash})

    def list_page(self, limit: int, offset: int) -> Tuple[List[Passenger], int]:
        """Newest first. Returns (rows, total_count)."""
        with self._session_factory() as session:
            total = session.scalar(select(func.count()).select_from(Passenger))
            rows = session.scalars(
                select(Passenger)
                .order_by(Passenger.created_at.desc(), Passenger.passenger_id.desc())
                .limit(limit)
                .offset(offset)
            ).all()
            return list(rows), total or 0

    def search(
        self, filters: PassengerSearchFilters, limit: int, offset: int
    ) -> Tuple[List[Passenger], int]:
        """Filtered listing, newest first. Returns (rows, total_count)."""
        conditions = filters.conditions()
        with self._session_factory() as session:
            total = session.scalar(
                select(func.count()).select_from(Passenger).where(*conditions)
            )
            rows = session.scalars(
                select(Passenger)
                .where(*conditions)
                .order_by(Passenger.created_at.desc(), Passenger.passenger_id.desc())
                .limit(limit)
                .offset(offset)
            ).all()
            return list(rows), total or 0

    def get_many(self, passenger_ids: Sequence[int]) -> List[Passenger]:
        """Fetch passengers by id, ordered by id. Missing ids are skipped."""
        passenger_ids = [pid for pid in passenger_ids if _valid_id(pid)]
        if not passenger_ids:
            return []
        with self._session_factory() as session:
            rows = session.scalars(
                select(Passenger)
                .where(Passenger.passenger_id.in_(list(passenger_ids)))
                .order_by(Passenger.passenger_id)
            ).all()
            return list(rows)
