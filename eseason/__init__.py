"""
E-Season Backend - Passenger registration and lookup service

Architecture:
- Each module is self-contained with clear interfaces
- Dependencies are constructed once in the app factory and injected
- No module reaches into another module's storage

Modules:
- auth: Password hashing, signed identity tokens, request authentication
- middleware: Auth gate applied to every HTTP request
- storage: Relational persistence for the Passenger entity
- passenger: Registration, login, profile and admin operations
- api: HTTP schemas and routes
"""

__version__ = "1.0.0"
