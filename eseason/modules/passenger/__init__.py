"""
Passenger Module - Black Box Interface

Purpose: Passenger registration, login, profile and admin lookup
Interface: PassengerService
Hidden: Credential checks, pagination rules, storage calls
"""

from .service import PassengerService, parse_travel_date

__all__ = ["PassengerService", "parse_travel_date"]
