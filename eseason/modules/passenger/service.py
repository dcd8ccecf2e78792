"""
Passenger service.

Orchestrates registration, login, profile maintenance and admin lookups by
composing the repository, credential module and token module. Every
data-store failure is surfaced immediately as InternalError.
"""

import logging
import re
from contextlib import contextmanager
from datetime import date, datetime
from typing import List, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ...errors import Conflict, InternalError, InvalidInput, NotFound, Unauthenticated
from ..api.models import (
    ChangePasswordRequest,
    LoginData,
    LoginRequest,
    MultiplePassengersData,
    PassengerPage,
    PassengerSearchPage,
    PassengerView,
    ProfileUpdateRequest,
    RegisterData,
    RegisterRequest,
    SearchCriteria,
    VerifyPhoneRequest,
)
from ..auth.credentials import CredentialError, CredentialModule
from ..auth.tokens import TokenModule
from ..storage.repository import PassengerRepository, PassengerSearchFilters
from .pagination import MAX_LIST_LIMIT, MAX_SEARCH_LIMIT, clamp_pagination, total_pages

logger = logging.getLogger(__name__)

TRAVEL_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
REGISTRATION_NOTICE = (
    "Registration successful. Please verify your phone number and wait for admin approval."
)
LOGIN_FAILED = "Invalid email or password"


def parse_travel_date(value: str) -> date:
    """Parse a YYYY-MM-DD calendar date or raise InvalidInput."""
    message = "Invalid travel date format. Use YYYY-MM-DD"
    if not isinstance(value, str) or not TRAVEL_DATE_PATTERN.fullmatch(value):
        raise InvalidInput(message, f"cannot parse {value!r} as YYYY-MM-DD")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidInput(message, str(e))


@contextmanager
def data_store(message: str):
    """Translate driver errors into InternalError carrying the driver text."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"{message}: {e}")
        raise InternalError(message, str(e)) from e


class PassengerService:
    """Passenger registration, authentication and lookup operations."""

    def __init__(
        self,
        repository: PassengerRepository,
        credentials: CredentialModule,
        tokens: TokenModule,
    ):
        """
        Initialize passenger service.

        Args:
            repository: Persistence gateway for passengers
            credentials: Password hashing
            tokens: Identity token issuance
        """
        self.repository = repository
        self.credentials = credentials
        self.tokens = tokens

    def _hash_password(self, password: str) -> str:
        try:
            return self.credentials.hash(password)
        except CredentialError as e:
            logger.error(f"Password hashing failed: {e}")
            raise InternalError("Failed to hash password", str(e)) from e

    # Public operations

    def register(self, request: RegisterRequest) -> RegisterData:
        """
        Register a new passenger and issue a token.

        Raises:
            InvalidInput: Password confirmation mismatch or bad travel date
            Conflict: Email already registered
        """
        if request.password != request.confirm_password:
            raise InvalidInput("Passwords do not match")

        travel_date = parse_travel_date(request.travel_date)

        with data_store("Database error"):
            if self.repository.email_exists(request.email):
                raise Conflict("Email already registered")

        password_hash = self._hash_password(request.password)

        with data_store("Failed to register passenger"):
            try:
                passenger = self.repository.create(
                    name_with_initials=request.name_with_initials,
                    full_name=request.full_name,
                    address=request.address,
                    phone_number=request.phone_number,
                    email=request.email,
                    from_station=request.from_station,
                    to_station=request.to_station,
                    travel_date=travel_date,
                    password_hash=password_hash,
                )
            except IntegrityError as e:
                # The unique index on email settles concurrent registrations
                logger.warning("Registration rejected by the unique email index")
                raise Conflict("Email already registered") from e

        logger.info(f"Registered passenger {passenger.passenger_id}")
        token = self.tokens.issue(passenger.passenger_id, passenger.email)

        return RegisterData(
            passenger_id=passenger.passenger_id,
            token=token,
            message=REGISTRATION_NOTICE,
        )

    def login(self, request: LoginRequest) -> LoginData:
        """
        Verify credentials and issue a token.

        Unknown email and wrong password fail identically.
        """
        with data_store("Database error"):
            passenger = self.repository.get_by_email(request.email)

        if passenger is None:
            self.credentials.verify_dummy(request.password)
            raise Unauthenticated(LOGIN_FAILED)

        if not self.credentials.verify(request.password, passenger.password):
            logger.warning(f"Failed login for passenger {passenger.passenger_id}")
            raise Unauthenticated(LOGIN_FAILED)

        if self.credentials.needs_rehash(passenger.password):
            with data_store("Failed to update password"):
                self.repository.update_password_hash(
                    passenger.passenger_id, self._hash_password(request.password)
                )
            logger.info(f"Rehashed password for passenger {passenger.passenger_id}")

        token = self.tokens.issue(passenger.passenger_id, passenger.email)
        logger.info(f"Passenger {passenger.passenger_id} logged in")

        return LoginData(token=token, passenger=PassengerView.model_validate(passenger))

    def get_profile(self, passenger_id: int) -> PassengerView:
        with data_store("Database error occurred while retrieving passenger"):
            passenger = self.repository.get_by_id(passenger_id)
        if passenger is None:
            raise NotFound("Passenger not found with the provided ID")
        return PassengerView.model_validate(passenger)

    def update_profile(self, passenger_id: int, request: ProfileUpdateRequest) -> None:
        """Update mutable fields only; id, email and password are untouched."""
        fields = request.model_dump()
        fields["travel_date"] = parse_travel_date(request.travel_date)

        with data_store("Failed to update profile"):
            updated = self.repository.update_profile(passenger_id, fields)
        if not updated:
            raise NotFound("Passenger not found with the provided ID")

    def verify_phone(self, passenger_id: int, request: VerifyPhoneRequest) -> None:
        # TODO: check request.otp against an issued code once an SMS provider is wired in
        with data_store("Failed to verify phone"):
            updated = self.repository.mark_phone_verified(passenger_id)
        if not updated:
            raise NotFound("Passenger not found with the provided ID")
        logger.info(f"Phone verified for passenger {passenger_id}")

    def change_password(self, passenger_id: int, request: ChangePasswordRequest) -> None:
        """
        Replace the stored password hash.

        Raises:
            InvalidInput: New password and confirmation differ
            NotFound: No such passenger
            Unauthenticated: Current password is wrong (stored hash unchanged)
        """
        if request.new_password != request.confirm_password:
            raise InvalidInput("New passwords do not match")

        with data_store("Database error"):
            passenger = self.repository.get_by_id(passenger_id)
        if passenger is None:
            raise NotFound("Passenger not found with the provided ID")

        if not self.credentials.verify(request.current_password, passenger.password):
            logger.warning(f"Rejected password change for passenger {passenger_id}")
            raise Unauthenticated("Current password is incorrect")

        new_hash = self._hash_password(request.new_password)
        with data_store("Failed to update password"):
            self.repository.update_password_hash(passenger_id, new_hash)
        logger.info(f"Password changed for passenger {passenger_id}")

    # Admin operations

    def list_passengers(self, page: int, limit: int) -> PassengerPage:
        page, limit = clamp_pagination(page, limit, MAX_LIST_LIMIT)
        with data_store("Database error"):
            rows, total = self.repository.list_page(limit, (page - 1) * limit)

        return PassengerPage(
            passengers=[PassengerView.model_validate(row) for row in rows],
            total_count=total,
            current_page=page,
            limit=limit,
            total_pages=total_pages(total, limit),
        )

    def search_passengers(self, criteria: SearchCriteria, page: int, limit: int) -> PassengerSearchPage:
        """
        Filtered, paginated listing.

        Raises:
            InvalidInput: No usable search criteria
        """
        filters = PassengerSearchFilters(**criteria.model_dump())
        if not filters.conditions():
            raise InvalidInput("At least one search parameter is required")

        page, limit = clamp_pagination(page, limit, MAX_SEARCH_LIMIT)
        with data_store("Database error occurred while searching passengers"):
            rows, total = self.repository.search(filters, limit, (page - 1) * limit)

        return PassengerSearchPage(
            passengers=[PassengerView.model_validate(row) for row in rows],
            total_count=total,
            current_page=page,
            limit=limit,
            total_pages=total_pages(total, limit),
            search_criteria=criteria,
        )

    def get_multiple(self, passenger_ids: Sequence[int]) -> MultiplePassengersData:
        """
        Partition requested ids into found passengers and missing ids.

        Repeated ids count once, so total_found + len(not_found_ids)
        always equals total_requested.
        """
        passenger_ids = list(dict.fromkeys(passenger_ids))
        with data_store("Database error occurred while retrieving passengers"):
            rows = self.repository.get_many(passenger_ids)

        found_ids = {row.passenger_id for row in rows}
        not_found_ids: List[int] = [pid for pid in passenger_ids if pid not in found_ids]

        return MultiplePassengersData(
            passengers=[PassengerView.model_validate(row) for row in rows],
            total_found=len(rows),
            total_requested=len(passenger_ids),
            not_found_ids=not_found_ids,
        )
