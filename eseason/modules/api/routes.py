"""
HTTP routes for passengers and admin lookups.

Routes only orchestrate: parse path/query input, resolve the caller from
request state, and delegate to PassengerService. Errors raised by the
service are rendered by the application's exception handlers.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request

from ...errors import InvalidInput
from ..auth.interfaces import CallerIdentity
from ..middleware import get_caller_identity
from ..passenger.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, parse_int
from ..passenger.service import PassengerService
from .models import (
    ChangePasswordRequest,
    Envelope,
    LoginData,
    LoginRequest,
    MultiplePassengersData,
    MultiplePassengersRequest,
    PassengerPage,
    PassengerSearchPage,
    PassengerView,
    ProfileUpdateRequest,
    RegisterData,
    RegisterRequest,
    SearchCriteria,
    VerifyPhoneRequest,
)

logger = logging.getLogger(__name__)

passenger_router = APIRouter(prefix="/api/v1/passenger", tags=["passenger"])
admin_router = APIRouter(prefix="/api/v1/admin/passenger", tags=["admin"])


def get_passenger_service(request: Request) -> PassengerService:
    """Dependency resolving the service built by the app factory."""
    return request.app.state.passenger_service


def parse_passenger_id(raw: str) -> int:
    """Validate a path id: numeric and strictly positive."""
    try:
        passenger_id = int(raw)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid passenger ID format. Must be a valid number")
    if passenger_id <= 0:
        raise InvalidInput("Passenger ID must be a positive number")
    return passenger_id


# Public endpoints


@passenger_router.post(
    "/register",
    response_model=Envelope[RegisterData],
    response_model_exclude_none=True,
    status_code=201,
)
def register(
    payload: RegisterRequest,
    service: PassengerService = Depends(get_passenger_service),
):
    """
    Register a new passenger.

    Returns:
        201: Passenger created, token issued
        400: Invalid input
        409: Email already registered
    """
    data = service.register(payload)
    return Envelope[RegisterData](
        success=True, message="Passenger registered successfully", data=data
    )


@passenger_router.post(
    "/login", response_model=Envelope[LoginData], response_model_exclude_none=True
)
def login(
    payload: LoginRequest,
    service: PassengerService = Depends(get_passenger_service),
):
    """
    Log in with email and password.

    Returns:
        200: Token and passenger view
        401: Invalid email or password
    """
    data = service.login(payload)
    return Envelope[LoginData](success=True, message="Login successful", data=data)


# Authenticated passenger endpoints


def _get_profile(passenger_id: int, service: PassengerService) -> Envelope[PassengerView]:
    data = service.get_profile(passenger_id)
    return Envelope[PassengerView](
        success=True, message="Profile retrieved successfully", data=data
    )


@passenger_router.get(
    "/profile", response_model=Envelope[PassengerView], response_model_exclude_none=True
)
def get_own_profile(
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    """Get the authenticated passenger's profile."""
    return _get_profile(identity.passenger_id, service)


@passenger_router.get(
    "/profile/{passenger_id}",
    response_model=Envelope[PassengerView],
    response_model_exclude_none=True,
)
def get_profile(
    passenger_id: str,
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    """
    Get a passenger profile by id.

    Returns:
        200: Passenger view
        400: Bad id
        404: Passenger not found
    """
    return _get_profile(parse_passenger_id(passenger_id), service)


def _update_profile(
    passenger_id: int, payload: ProfileUpdateRequest, service: PassengerService
) -> Envelope[Any]:
    service.update_profile(passenger_id, payload)
    return Envelope[Any](success=True, message="Profile updated successfully")


@passenger_router.put(
    "/profile", response_model=Envelope[Any], response_model_exclude_none=True
)
def update_own_profile(
    payload: ProfileUpdateRequest,
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    """Update the authenticated passenger's profile."""
    return _update_profile(identity.passenger_id, payload, service)


@passenger_router.put(
    "/profile/{passenger_id}", response_model=Envelope[Any], response_model_exclude_none=True
)
def update_profile(
    passenger_id: str,
    payload: ProfileUpdateRequest,
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    """
    Update a passenger profile by id.

    Returns:
        200: Updated
        400: Invalid input
        404: Passenger not found
    """
    return _update_profile(parse_passenger_id(passenger_id), payload, service)


def _verify_phone(
    passenger_id: int, payload: VerifyPhoneRequest, service: PassengerService
) -> Envelope[Any]:
    service.verify_phone(passenger_id, payload)
    return Envelope[Any](success=True, message="Phone verified successfully")


@passenger_router.post(
    "/verify-phone", response_model=Envelope[Any], response_model_exclude_none=True
)
def verify_own_phone(
    payload: VerifyPhoneRequest,
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    return _verify_phone(identity.passenger_id, payload, service)


@passenger_router.post(
    "/verify-phone/{passenger_id}", response_model=Envelope[Any], response_model_exclude_none=True
)
def verify_phone(
    passenger_id: str,
    payload: VerifyPhoneRequest,
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    return _verify_phone(parse_passenger_id(passenger_id), payload, service)


def _change_password(
    passenger_id: int, payload: ChangePasswordRequest, service: PassengerService
) -> Envelope[Any]:
    service.change_password(passenger_id, payload)
    return Envelope[Any](success=True, message="Password changed successfully")


@passenger_router.post(
    "/change-password", response_model=Envelope[Any], response_model_exclude_none=True
)
def change_own_password(
    payload: ChangePasswordRequest,
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    return _change_password(identity.passenger_id, payload, service)


@passenger_router.post(
    "/change-password/{passenger_id}",
    response_model=Envelope[Any],
    response_model_exclude_none=True,
)
def change_password(
    passenger_id: str,
    payload: ChangePasswordRequest,
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    """
    Change a passenger's password by id.

    Returns:
        200: Password replaced
        400: New passwords do not match
        401: Current password is incorrect
        404: Passenger not found
    """
    return _change_password(parse_passenger_id(passenger_id), payload, service)


# Admin endpoints


@admin_router.get(
    "/all", response_model=Envelope[PassengerPage], response_model_exclude_none=True
)
def list_passengers(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    """
    List all passengers, newest first.

    Out-of-range pagination values are clamped, never rejected.
    """
    data = service.list_passengers(
        parse_int(page, DEFAULT_PAGE), parse_int(limit, DEFAULT_LIMIT)
    )
    return Envelope[PassengerPage](
        success=True, message="Passengers retrieved successfully", data=data
    )


@admin_router.get(
    "/search", response_model=Envelope[PassengerSearchPage], response_model_exclude_none=True
)
def search_passengers(
    email: str = Query(""),
    phone_number: str = Query(""),
    from_station: str = Query(""),
    to_station: str = Query(""),
    verification_status: str = Query(""),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    """
    Search passengers by substring filters and verification status.

    Returns:
        200: Matching page
        400: No search parameter given
    """
    criteria = SearchCriteria(
        email=email,
        phone_number=phone_number,
        from_station=from_station,
        to_station=to_station,
        verification_status=verification_status,
    )
    data = service.search_passengers(
        criteria, parse_int(page, DEFAULT_PAGE), parse_int(limit, DEFAULT_LIMIT)
    )
    return Envelope[PassengerSearchPage](
        success=True, message="Passengers search completed", data=data
    )


@admin_router.post(
    "/multiple",
    response_model=Envelope[MultiplePassengersData],
    response_model_exclude_none=True,
)
def get_multiple_passengers(
    payload: MultiplePassengersRequest,
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    """Fetch up to 50 passengers by id; missing ids are listed separately."""
    data = service.get_multiple(payload.passenger_ids)
    return Envelope[MultiplePassengersData](
        success=True, message="Passengers data retrieved", data=data
    )


@admin_router.get(
    "/{passenger_id}", response_model=Envelope[PassengerView], response_model_exclude_none=True
)
def get_passenger(
    passenger_id: str,
    identity: CallerIdentity = Depends(get_caller_identity),
    service: PassengerService = Depends(get_passenger_service),
):
    return _get_profile(parse_passenger_id(passenger_id), service)
