"""
Integration tests for the PostgreSQL repository adapters.

Tests repository operations against a real PostgreSQL database.
Requires PostgreSQL to be running (via docker-compose); skipped otherwise.
"""

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import (
    PostgresEventRepository,
    PostgresRegistrationRepository,
    PostgresVenueRepository,
)
from src.domain.models import ActivationUpdate, NewRegistration, RegistrationQuery, VenueInput
from src.domain.ports import RegistrationStatus

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("clean_database")]

EVENT_DATE = date(2026, 10, 17)


@pytest.fixture
def venues(pool: ConnectionPool) -> PostgresVenueRepository:
    return PostgresVenueRepository(pool)


@pytest.fixture
def events(pool: ConnectionPool) -> PostgresEventRepository:
    return PostgresEventRepository(pool)


@pytest.fixture
def registrations(pool: ConnectionPool) -> PostgresRegistrationRepository:
    return PostgresRegistrationRepository(pool)


@pytest.fixture
def venue(venues: PostgresVenueRepository):
    return venues.create_venue(
        VenueInput(name="Club Aurora", lat=41.8897, lng=-87.6287, address="100 N State St")
    )


@pytest.fixture
def event_id(events: PostgresEventRepository, venue) -> UUID:
    return events.resolve_event(venue.id, EVENT_DATE)


def new_registration(venue_id: UUID, event_id: UUID, **overrides) -> NewRegistration:
    data = NewRegistration(
        event_id=event_id,
        venue_id=venue_id,
        first_name="Jordan",
        last_name="Lee",
        email="jordan@example.com",
        phone="(555) 123-4567",
        voucher_code="ABC234",
        qr_token="QR-1760000000000-abcdefghijklm",
        men_count=2,
        total_count=2,
    )
    return replace(data, **overrides)


def activation_update() -> ActivationUpdate:
    now = datetime(2026, 10, 18, 1, 0, tzinfo=timezone.utc)
    return ActivationUpdate(
        activated_at=now,
        lat=41.89,
        lng=-87.63,
        distance_miles=0.07,
        expires_at=now + timedelta(hours=2),
        accuracy_meters=15.0,
    )


class TestVenueRepository:
    def test_create_and_get(self, venues, venue) -> None:
        fetched = venues.get_venue(venue.id)

        assert fetched == venue
        assert fetched.geofence_miles == 0.5
        assert fetched.created_at is not None

    def test_get_unknown_returns_none(self, venues) -> None:
        assert venues.get_venue(uuid4()) is None

    def test_list_ordered_by_name(self, venues, venue) -> None:
        venues.create_venue(VenueInput(name="Aardvark Lounge", lat=41.9, lng=-87.6))
        assert [v.name for v in venues.list_venues()] == ["Aardvark Lounge", "Club Aurora"]

    def test_update(self, venues, venue) -> None:
        updated = venues.update_venue(
            venue.id, VenueInput(name="Club Borealis", lat=41.9, lng=-87.6, geofence_miles=1.0)
        )
        assert updated.name == "Club Borealis"
        assert updated.geofence_miles == 1.0
        assert updated.address is None

    def test_update_unknown_returns_none(self, venues) -> None:
        assert venues.update_venue(uuid4(), VenueInput(name="x", lat=0, lng=0)) is None

    def test_delete_cascades(self, venues, registrations, venue, event_id) -> None:
        registrations.insert_registration(new_registration(venue.id, event_id))

        assert venues.delete_venue(venue.id) is True
        assert venues.delete_venue(venue.id) is False
        assert registrations.find_by_voucher_code("ABC234") is None


class TestResolveEvent:
    def test_same_venue_and_date_returns_same_event(self, events, venue, event_id) -> None:
        assert events.resolve_event(venue.id, EVENT_DATE) == event_id

    def test_different_date_creates_new_event(self, events, venue, event_id) -> None:
        assert events.resolve_event(venue.id, date(2026, 10, 18)) != event_id

    def test_single_row_per_venue_and_date(self, pool, events, venue) -> None:
        for _ in range(3):
            events.resolve_event(venue.id, EVENT_DATE)

        with pool.connection() as conn:
            count = conn.execute(
                "SELECT COUNT(*) FROM events WHERE venue_id = %s AND event_date = %s",
                (venue.id, EVENT_DATE),
            ).fetchone()[0]
        assert count == 1


class TestInsertRegistration:
    def test_insert_returns_id(self, registrations, venue, event_id) -> None:
        registration_id = registrations.insert_registration(new_registration(venue.id, event_id))

        assert isinstance(registration_id, UUID)
        details = registrations.get_registration(registration_id)
        assert details.registration.status == RegistrationStatus.REGISTERED
        assert details.registration.men_count == 2
        assert details.event_date == EVENT_DATE
        assert details.venue.name == "Club Aurora"

    def test_duplicate_voucher_code_returns_none(self, registrations, venue, event_id) -> None:
        registrations.insert_registration(new_registration(venue.id, event_id))

        result = registrations.insert_registration(
            new_registration(venue.id, event_id, qr_token="QR-1760000000001-zzzzzzzzzzzzz")
        )
        assert result is None

    def test_duplicate_qr_token_returns_none(self, registrations, venue, event_id) -> None:
        registrations.insert_registration(new_registration(venue.id, event_id))

        result = registrations.insert_registration(
            new_registration(venue.id, event_id, voucher_code="XYZ789")
        )
        assert result is None


class TestLookups:
    def test_find_by_voucher_code(self, registrations, venue, event_id) -> None:
        registrations.insert_registration(new_registration(venue.id, event_id))

        details = registrations.find_by_voucher_code("ABC234")
        assert details.registration.qr_token == "QR-1760000000000-abcdefghijklm"

    def test_find_by_qr_token(self, registrations, venue, event_id) -> None:
        registrations.insert_registration(new_registration(venue.id, event_id))

        details = registrations.find_by_qr_token("QR-1760000000000-abcdefghijklm")
        assert details.registration.voucher_code == "ABC234"

    def test_unknown_lookups_return_none(self, registrations) -> None:
        assert registrations.find_by_voucher_code("ZZZZZZ") is None
        assert registrations.find_by_qr_token("QR-0-nope") is None
        assert registrations.get_registration(uuid4()) is None


class TestActivateRegistration:
    def test_registered_row_activates(self, registrations, venue, event_id) -> None:
        registration_id = registrations.insert_registration(new_registration(venue.id, event_id))
        update = activation_update()

        assert registrations.activate_registration(registration_id, update) is True

        r = registrations.get_registration(registration_id).registration
        assert r.status == RegistrationStatus.ACTIVATED
        assert r.activated_at == update.activated_at
        assert r.activation_expires_at == update.expires_at
        assert r.activation_distance_miles == pytest.approx(0.07)
        assert r.activation_accuracy_meters == 15.0

    def test_second_activation_loses(self, registrations, venue, event_id) -> None:
        registration_id = registrations.insert_registration(new_registration(venue.id, event_id))
        registrations.activate_registration(registration_id, activation_update())

        assert registrations.activate_registration(registration_id, activation_update()) is False

    def test_expired_row_untouched(self, pool, registrations, venue, event_id) -> None:
        registration_id = registrations.insert_registration(new_registration(venue.id, event_id))
        with pool.connection() as conn:
            conn.execute(
                "UPDATE registrations SET status = 'EXPIRED' WHERE id = %s", (registration_id,)
            )

        assert registrations.activate_registration(registration_id, activation_update()) is False
        r = registrations.get_registration(registration_id).registration
        assert r.status == RegistrationStatus.EXPIRED
        assert r.activated_at is None


class TestListing:
    @pytest.fixture
    def seeded(self, registrations, venue, event_id) -> list[UUID]:
        ids = [
            registrations.insert_registration(new_registration(venue.id, event_id)),
            registrations.insert_registration(
                new_registration(
                    venue.id,
                    event_id,
                    first_name="Sam",
                    last_name="Rivera",
                    email="sam_r@example.com",
                    voucher_code="XYZ789",
                    qr_token="QR-1760000000001-zzzzzzzzzzzzz",
                )
            ),
        ]
        registrations.activate_registration(ids[1], activation_update())
        return ids

    def test_newest_first(self, registrations, seeded) -> None:
        listed = registrations.list_registrations(RegistrationQuery())
        assert [d.registration.id for d in listed] == list(reversed(seeded))

    def test_status_filter(self, registrations, seeded) -> None:
        listed = registrations.list_registrations(
            RegistrationQuery(status=RegistrationStatus.ACTIVATED)
        )
        assert [d.registration.first_name for d in listed] == ["Sam"]

    @pytest.mark.parametrize("term", ["rivera", "SAM_R@", "xyz7", "(555)"])
    def test_search(self, registrations, seeded, term: str) -> None:
        listed = registrations.list_registrations(RegistrationQuery(search=term))
        assert "Sam" in [d.registration.first_name for d in listed]

    def test_search_by_venue_name(self, registrations, seeded) -> None:
        assert len(registrations.list_registrations(RegistrationQuery(search="aurora"))) == 2

    def test_search_wildcards_are_literal(self, registrations, seeded) -> None:
        assert registrations.list_registrations(RegistrationQuery(search="%")) == []

    def test_limit_offset(self, registrations, seeded) -> None:
        page = registrations.list_registrations(RegistrationQuery(limit=1, offset=1))
        assert [d.registration.id for d in page] == [seeded[0]]

    def test_stats(self, registrations, seeded) -> None:
        stats = registrations.registration_stats()
        assert (stats.total, stats.registered, stats.activated, stats.expired) == (2, 1, 1, 0)

    def test_delete(self, registrations, seeded) -> None:
        assert registrations.delete_registration(seeded[0]) is True
        assert registrations.delete_registration(seeded[0]) is False
        assert registrations.registration_stats().total == 1
