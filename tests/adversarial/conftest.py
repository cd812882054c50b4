"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition tests. The
connection pool and cleanup come from the top-level conftest.
"""

from collections.abc import Callable
from datetime import date
from uuid import UUID

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import (
    PostgresEventRepository,
    PostgresRegistrationRepository,
    PostgresVenueRepository,
)
from src.domain.issuer import generate_qr_token, generate_voucher_code
from src.domain.models import NewRegistration, Venue, VenueInput

EVENT_DATE = date(2026, 10, 17)


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresRegistrationRepository:
    """Create repository instance for each test."""
    return PostgresRegistrationRepository(pool)


@pytest.fixture
def venue(pool: ConnectionPool, clean_database: None) -> Venue:
    return PostgresVenueRepository(pool).create_venue(
        VenueInput(name="Club Aurora", lat=41.8897, lng=-87.6287)
    )


@pytest.fixture
def create_registration(
    pool: ConnectionPool, venue: Venue
) -> Callable[..., tuple[UUID, str]]:
    """Helper to create a REGISTERED entry; returns (id, qr_token)."""

    def factory(event_date: date = EVENT_DATE) -> tuple[UUID, str]:
        event_id = PostgresEventRepository(pool).resolve_event(venue.id, event_date)
        qr_token = generate_qr_token()
        registration_id = PostgresRegistrationRepository(pool).insert_registration(
            NewRegistration(
                event_id=event_id,
                venue_id=venue.id,
                first_name="Jordan",
                last_name="Lee",
                email="jordan@example.com",
                phone="(555) 123-4567",
                voucher_code=generate_voucher_code(),
                qr_token=qr_token,
            )
        )
        return registration_id, qr_token

    return factory
