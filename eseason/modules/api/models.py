"""
E-Season API data models.

Request models validate inbound JSON; response models define exactly what
leaves the service. No response model carries a password field.
"""

from datetime import date, datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictInt, field_validator

T = TypeVar("T")

MIN_PASSWORD_LENGTH = 6
MAX_MULTIPLE_IDS = 50


# Envelope


class Envelope(BaseModel, Generic[T]):
    """Uniform response wrapper for every endpoint."""

    success: bool
    message: str
    data: Optional[T] = None
    error: Optional[str] = None


def error_envelope(message: str, error: Optional[str] = None) -> Dict[str, Any]:
    """Serialize an error response body."""
    return Envelope[Any](success=False, message=message, error=error or None).model_dump(
        mode="json", exclude_none=True
    )


# Request Models (API Input)


class RegisterRequest(BaseModel):
    """Passenger registration."""

    name_with_initials: str = Field(..., min_length=1, max_length=255)
    full_name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1, max_length=20)
    email: EmailStr
    from_station: str = Field(..., min_length=1, max_length=100)
    to_station: str = Field(..., min_length=1, max_length=100)
    travel_date: str = Field(..., description="Travel date as YYYY-MM-DD")
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    confirm_password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Passenger login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    """Mutable profile fields. Email, id and password cannot be changed here."""

    model_config = ConfigDict(extra="ignore")

    name_with_initials: str = Field(..., min_length=1, max_length=255)
    full_name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1, max_length=20)
    from_station: str = Field(..., min_length=1, max_length=100)
    to_station: str = Field(..., min_length=1, max_length=100)
    travel_date: str = Field(..., description="Travel date as YYYY-MM-DD")


class VerifyPhoneRequest(BaseModel):
    """Phone verification payload. The OTP is accepted but not checked."""

    phone_number: str = Field(..., min_length=1)
    otp: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    """Password change."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    confirm_password: str = Field(..., min_length=1)


class MultiplePassengersRequest(BaseModel):
    """Admin lookup of several passengers at once."""

    passenger_ids: List[StrictInt] = Field(..., min_length=1)

    @field_validator("passenger_ids")
    @classmethod
    def validate_passenger_ids(cls, v):
        """Ensure every id is positive and the batch is bounded."""
        if any(passenger_id <= 0 for passenger_id in v):
            raise ValueError("All passenger IDs must be positive numbers")
        if len(v) > MAX_MULTIPLE_IDS:
            raise ValueError(f"Cannot request more than {MAX_MULTIPLE_IDS} passengers at once")
        return v


# Response Models (API Output)


class PassengerView(BaseModel):
    """Public view of a passenger record."""

    model_config = ConfigDict(from_attributes=True)

    passenger_id: int
    name_with_initials: str
    full_name: str
    address: str
    phone_number: str
    email: str
    from_station: str
    to_station: str
    travel_date: date
    phone_verification_status: str
    admin_verification_status: str
    created_at: datetime


class RegisterData(BaseModel):
    passenger_id: int
    token: str
    message: str


class LoginData(BaseModel):
    token: str
    passenger: PassengerView


class PassengerPage(BaseModel):
    """Paginated passenger listing."""

    passengers: List[PassengerView]
    total_count: int
    current_page: int
    limit: int
    total_pages: int


class SearchCriteria(BaseModel):
    email: str = ""
    phone_number: str = ""
    from_station: str = ""
    to_station: str = ""
    verification_status: str = ""


class PassengerSearchPage(PassengerPage):
    search_criteria: SearchCriteria


class MultiplePassengersData(BaseModel):
    """Found/not-found partition of a multi-id lookup."""

    passengers: List[PassengerView]
    total_found: int
    total_requested: int
    not_found_ids: List[int]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status")
    message: str
