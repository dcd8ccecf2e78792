"""
Storage Module - Black Box Interface

Purpose: Relational persistence for passengers
Interface: create_db_engine(), create_session_factory(), init_db(), PassengerRepository
Hidden: Engine tuning, SQL construction

Replaceable with any backend offering the same repository operations.
"""

from .database import Base, create_db_engine, create_session_factory, init_db
from .models import Passenger, VerificationStatus
from .repository import PassengerRepository, PassengerSearchFilters

__all__ = [
    "Base",
    "Passenger",
    "PassengerRepository",
    "PassengerSearchFilters",
    "VerificationStatus",
    "create_db_engine",
    "create_session_factory",
    "init_db",
]
