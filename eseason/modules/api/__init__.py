"""
API Module - Black Box Interface

Purpose: HTTP schemas and routing
Interface: Request/response models, passenger_router, admin_router
Hidden: Path parsing, envelope construction

The API module only orchestrates - it contains no business logic.
All logic is delegated to the passenger module.
"""

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
    error_envelope,
)

__all__ = [
    "ChangePasswordRequest",
    "Envelope",
    "LoginData",
    "LoginRequest",
    "MultiplePassengersData",
    "MultiplePassengersRequest",
    "PassengerPage",
    "PassengerSearchPage",
    "PassengerView",
    "ProfileUpdateRequest",
    "RegisterData",
    "RegisterRequest",
    "SearchCriteria",
    "VerifyPhoneRequest",
    "error_envelope",
]
