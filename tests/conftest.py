"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Domain record factories (venues, registrations joined with venue/event)
- Database connection pool, schema and cleanup for integration and
  adversarial tests (skipped when PostgreSQL is unreachable)
"""

from collections.abc import Callable, Generator
from dataclasses import replace
from datetime import date
from uuid import uuid4

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings
from src.domain.models import Registration, RegistrationDetails, Venue
from src.domain.ports import RegistrationStatus

# Chicago venue used across the suite
VENUE_LAT = 41.8897
VENUE_LNG = -87.6287
EVENT_DATE = date(2026, 10, 17)


@pytest.fixture
def make_venue() -> Callable[..., Venue]:
    """Factory for Venue records; keyword arguments override defaults."""

    def factory(**overrides) -> Venue:
        venue = Venue(
            id=uuid4(),
            name="Club Aurora",
            address="100 N State St, Chicago, IL",
            lat=VENUE_LAT,
            lng=VENUE_LNG,
            geofence_miles=0.5,
        )
        return replace(venue, **overrides)

    return factory


@pytest.fixture
def make_details(make_venue: Callable[..., Venue]) -> Callable[..., RegistrationDetails]:
    """
    Factory for RegistrationDetails.

    Accepts status, event_date, venue and any Registration field override.
    """

    def factory(
        status: RegistrationStatus = RegistrationStatus.REGISTERED,
        event_date: date | None = EVENT_DATE,
        venue: Venue | None = None,
        **overrides,
    ) -> RegistrationDetails:
        venue = venue or make_venue()
        registration = Registration(
            id=uuid4(),
            event_id=uuid4(),
            venue_id=venue.id,
            first_name="Jordan",
            last_name="Lee",
            email="jordan@example.com",
            phone="(555) 123-4567",
            voucher_code="ABC234",
            qr_token="QR-1760000000000-abcdefghijklm",
            status=status,
        )
        registration = replace(registration, **overrides)
        return RegistrationDetails(registration=registration, venue=venue, event_date=event_date)

    return factory


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """
    Session-wide connection pool with the schema migrated.

    Skips the requesting test when PostgreSQL cannot be reached.
    """
    settings = get_settings()
    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=False)
    try:
        pool.open(wait=True, timeout=5)
    except PoolTimeout:
        pool.close()
        pytest.skip(f"PostgreSQL not reachable at {settings.database_url}")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty all guest list tables before the test."""
    with pool.connection() as conn:
        conn.execute("TRUNCATE registrations, events, venues CASCADE")
        conn.commit()
    yield
