"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

import secrets

import bcrypt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from psycopg_pool import ConnectionPool

from src.adapters.notifications.console import ConsoleConfirmationSender
from src.adapters.repository.postgres import (
    PostgresEventRepository,
    PostgresRegistrationRepository,
    PostgresVenueRepository,
)
from src.config.settings import Settings, get_settings
from src.domain.activation import ActivationService
from src.domain.admin import AdminService
from src.domain.registration import RegistrationService

# Module-level singleton - ConsoleConfirmationSender is stateless
_confirmation_sender = ConsoleConfirmationSender()

# Compared against when admin auth is attempted, so a wrong username
# costs the same bcrypt work as a wrong password
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10))


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_venue_repository(request: Request) -> PostgresVenueRepository:
    return PostgresVenueRepository(get_pool(request))


def get_event_repository(request: Request) -> PostgresEventRepository:
    return PostgresEventRepository(get_pool(request))


def get_registration_repository(request: Request) -> PostgresRegistrationRepository:
    """Create repository with connection pool from app state."""
    return PostgresRegistrationRepository(get_pool(request))


def get_confirmation_sender() -> ConsoleConfirmationSender:
    """Get console confirmation sender (singleton)."""
    return _confirmation_sender


def get_registration_service(
    request: Request, settings: Settings = Depends(get_settings)
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repositories and confirmation sender for the domain service.
    """
    return RegistrationService(
        venues=get_venue_repository(request),
        events=get_event_repository(request),
        registrations=get_registration_repository(request),
        confirmation_sender=get_confirmation_sender(),
        public_base_url=settings.public_base_url,
        max_issue_attempts=settings.max_issue_attempts,
    )


def get_activation_service(
    request: Request, settings: Settings = Depends(get_settings)
) -> ActivationService:
    return ActivationService(
        repository=get_registration_repository(request),
        venue_timezone=settings.venue_timezone,
        window_start_hour=settings.activation_window_start_hour,
        validity_hours=settings.activation_validity_hours,
    )


def get_admin_service(request: Request) -> AdminService:
    return AdminService(
        venues=get_venue_repository(request),
        registrations=get_registration_repository(request),
    )


def _checkpw(password: bytes, hashed: bytes) -> bool:
    """
    bcrypt.checkpw that reports False instead of raising.

    bcrypt rejects passwords over 72 bytes and unparseable hashes with
    ValueError; the dummy hash is still checked so the failure costs the
    same bcrypt work.
    """
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        bcrypt.checkpw(b"", _DUMMY_BCRYPT_HASH)
        return False


def check_admin_password_hash(password_hash: str) -> None:
    """
    Fail fast on an ADMIN_PASSWORD_HASH that is not a bcrypt hash.

    Raises:
        RuntimeError: If bcrypt cannot parse the hash
    """
    try:
        bcrypt.checkpw(b"", password_hash.encode())
    except ValueError as e:
        raise RuntimeError("ADMIN_PASSWORD_HASH is not a valid bcrypt hash") from e


# HTTP BASIC AUTH security scheme for OpenAPI documentation
http_basic = HTTPBasic()


def require_admin(
    credentials: HTTPBasicCredentials = Depends(http_basic),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Authenticate the admin via HTTP BASIC AUTH.

    FastAPI's HTTPBasic returns 401 for a missing or malformed header.
    Username (compare_digest) and password (bcrypt) are both always checked.

    Returns:
        The authenticated admin username

    Raises:
        HTTPException: 503 when no admin password hash is configured,
            401 on bad credentials
    """
    if not settings.admin_password_hash:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access is not configured",
        )

    username_valid = secrets.compare_digest(
        credentials.username.encode(), settings.admin_username.encode()
    )
    stored_hash = settings.admin_password_hash.encode() if username_valid else _DUMMY_BCRYPT_HASH
    password_valid = _checkpw(credentials.password.encode(), stored_hash)

    if not (username_valid and password_valid):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username
