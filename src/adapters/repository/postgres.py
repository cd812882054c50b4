"""
PostgreSQL repository adapters - Implement the domain's repository ports.

This module provides the PostgreSQL implementations of the venue, event
and registration ports using psycopg3 with raw SQL.

Concurrency Design - Single-Statement State Changes:
---------------------------------------------------
The two operations that can race across requests are each one SQL
statement, so correctness never depends on a read-then-write sequence:

1. **resolve_event()**: INSERT ... ON CONFLICT (venue_id, event_date)
   DO UPDATE ... RETURNING id. Concurrent registrations for the same
   venue and date block on the unique index and all receive the id of
   the single event row.

2. **activate_registration()**: UPDATE ... WHERE id = %s AND
   status = 'REGISTERED'. The status predicate is the compare-and-set;
   of two concurrent activations exactly one sees rowcount == 1.

3. **insert_registration()**: INSERT ... ON CONFLICT DO NOTHING RETURNING id.
   A voucher code or QR token collision yields no row, which the domain
   treats as a signal to regenerate.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any
from uuid import UUID

from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.models import (
    ActivationUpdate,
    NewRegistration,
    Registration,
    RegistrationDetails,
    RegistrationQuery,
    RegistrationStats,
    Venue,
    VenueInput,
)
from src.domain.ports import RegistrationStatus

logger = logging.getLogger(__name__)

_VENUE_COLUMNS = "id, name, address, vibe_text, lat, lng, geofence_miles, created_at"

# Registration joined with venue (v_ prefix) and event date
_DETAILS_SELECT = """
    SELECT r.id, r.event_id, r.venue_id, r.first_name, r.last_name, r.email, r.phone,
           r.men_count, r.women_count, r.total_count, r.bottle_service, r.bottle_budget,
           r.instagram, r.interest_limo, r.interest_boat, r.celebration_type,
           r.celebration_other, r.voucher_code, r.qr_token, r.status, r.activated_at,
           r.activation_lat, r.activation_lng, r.activation_distance_miles,
           r.activation_accuracy_meters, r.activation_expires_at, r.created_at,
           v.name AS v_name, v.address AS v_address, v.vibe_text AS v_vibe_text,
           v.lat AS v_lat, v.lng AS v_lng, v.geofence_miles AS v_geofence_miles,
           v.created_at AS v_created_at,
           e.event_date
    FROM registrations r
    JOIN venues v ON v.id = r.venue_id
    LEFT JOIN events e ON e.id = r.event_id
"""

_REGISTRATION_FIELDS = (
    "id",
    "event_id",
    "venue_id",
    "first_name",
    "last_name",
    "email",
    "phone",
    "men_count",
    "women_count",
    "total_count",
    "bottle_service",
    "bottle_budget",
    "instagram",
    "interest_limo",
    "interest_boat",
    "celebration_type",
    "celebration_other",
    "voucher_code",
    "qr_token",
    "activated_at",
    "activation_lat",
    "activation_lng",
    "activation_distance_miles",
    "activation_accuracy_meters",
    "activation_expires_at",
    "created_at",
)


def _venue_from_row(row: dict[str, Any]) -> Venue:
    return Venue(
        id=row["id"],
        name=row["name"],
        address=row["address"],
        vibe_text=row["vibe_text"],
        lat=row["lat"],
        lng=row["lng"],
        geofence_miles=row["geofence_miles"],
        created_at=row["created_at"],
    )


def _details_from_row(row: dict[str, Any]) -> RegistrationDetails:
    registration = Registration(
        status=RegistrationStatus(row["status"]),
        **{name: row[name] for name in _REGISTRATION_FIELDS},
    )
    venue = Venue(
        id=row["venue_id"],
        name=row["v_name"],
        address=row["v_address"],
        vibe_text=row["v_vibe_text"],
        lat=row["v_lat"],
        lng=row["v_lng"],
        geofence_miles=row["v_geofence_miles"],
        created_at=row["v_created_at"],
    )
    return RegistrationDetails(registration=registration, venue=venue, event_date=row["event_date"])


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class PostgresVenueRepository:
    """
    Implements VenueRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def list_venues(self) -> list[Venue]:
        sql = f"SELECT {_VENUE_COLUMNS} FROM venues ORDER BY name"
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql)
            return [_venue_from_row(row) for row in cursor.fetchall()]

    def get_venue(self, venue_id: UUID) -> Venue | None:
        sql = f"SELECT {_VENUE_COLUMNS} FROM venues WHERE id = %s"
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, (venue_id,))
            row = cursor.fetchone()
            return _venue_from_row(row) if row is not None else None

    def create_venue(self, data: VenueInput) -> Venue:
        sql = f"""
            INSERT INTO venues (name, address, vibe_text, lat, lng, geofence_miles)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {_VENUE_COLUMNS}
        """
        params = (data.name, data.address, data.vibe_text, data.lat, data.lng, data.geofence_miles)
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
            conn.commit()
            return _venue_from_row(row)

    def update_venue(self, venue_id: UUID, data: VenueInput) -> Venue | None:
        sql = f"""
            UPDATE venues
            SET name = %s, address = %s, vibe_text = %s, lat = %s, lng = %s, geofence_miles = %s
            WHERE id = %s
            RETURNING {_VENUE_COLUMNS}
        """
        params = (
            data.name,
            data.address,
            data.vibe_text,
            data.lat,
            data.lng,
            data.geofence_miles,
            venue_id,
        )
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
            conn.commit()
            return _venue_from_row(row) if row is not None else None

    def delete_venue(self, venue_id: UUID) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM venues WHERE id = %s", (venue_id,))
            conn.commit()
            return cursor.rowcount == 1


class PostgresEventRepository:
    """Implements EventRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def resolve_event(self, venue_id: UUID, event_date: date) -> UUID:
        """
        Return the event id for (venue, date), creating the row if absent.

        The no-op DO UPDATE makes RETURNING yield the existing row on
        conflict, which DO NOTHING would not.
        """
        sql = """
            INSERT INTO events (venue_id, event_date)
            VALUES (%s, %s)
            ON CONFLICT (venue_id, event_date) DO UPDATE
            SET event_date = EXCLUDED.event_date
            RETURNING id
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (venue_id, event_date))
            event_id = cursor.fetchone()[0]
            conn.commit()
            return event_id


class PostgresRegistrationRepository:
    """
    Implements RegistrationRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def insert_registration(self, data: NewRegistration) -> UUID | None:
        """
        Insert a REGISTERED registration.

        Returns:
            New registration id, or None if the voucher code or QR token
            already exists (UNIQUE constraint hit)
        """
        sql = """
            INSERT INTO registrations (
                event_id, venue_id, first_name, last_name, email, phone,
                men_count, women_count, total_count, bottle_service, bottle_budget,
                instagram, interest_limo, interest_boat, celebration_type,
                celebration_other, voucher_code, qr_token, status
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT DO NOTHING
            RETURNING id
        """
        params = (
            data.event_id,
            data.venue_id,
            data.first_name,
            data.last_name,
            data.email,
            data.phone,
            data.men_count,
            data.women_count,
            data.total_count,
            data.bottle_service,
            data.bottle_budget,
            data.instagram,
            data.interest_limo,
            data.interest_boat,
            data.celebration_type,
            data.celebration_other,
            data.voucher_code,
            data.qr_token,
            RegistrationStatus.REGISTERED.value,
        )
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
            conn.commit()
            return row[0] if row is not None else None

    def find_by_voucher_code(self, voucher_code: str) -> RegistrationDetails | None:
        return self._find_one("r.voucher_code = %s", voucher_code)

    def find_by_qr_token(self, qr_token: str) -> RegistrationDetails | None:
        return self._find_one("r.qr_token = %s", qr_token)

    def get_registration(self, registration_id: UUID) -> RegistrationDetails | None:
        return self._find_one("r.id = %s", registration_id)

    def list_registrations(self, query: RegistrationQuery) -> list[RegistrationDetails]:
        """
        List registrations newest first.

        Search is a case-insensitive substring match over first name,
        last name, email, phone, voucher code and venue name.
        """
        conditions = []
        params: list[Any] = []

        if query.status is not None:
            conditions.append("r.status = %s")
            params.append(RegistrationStatus(query.status).value)

        if query.search:
            pattern = _like_pattern(query.search)
            columns = ("r.first_name", "r.last_name", "r.email", "r.phone", "r.voucher_code", "v.name")
            conditions.append("(" + " OR ".join(f"{c} ILIKE %s" for c in columns) + ")")
            params.extend([pattern] * len(columns))

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        sql = f"{_DETAILS_SELECT} {where} ORDER BY r.created_at DESC LIMIT %s OFFSET %s"
        params.extend([query.limit, query.offset])

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, params)
            return [_details_from_row(row) for row in cursor.fetchall()]

    def registration_stats(self) -> RegistrationStats:
        sql = """
            SELECT COUNT(*) AS total,
                   COUNT(*) FILTER (WHERE status = 'REGISTERED') AS registered,
                   COUNT(*) FILTER (WHERE status = 'ACTIVATED') AS activated,
                   COUNT(*) FILTER (WHERE status = 'EXPIRED') AS expired
            FROM registrations
        """
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql)
            return RegistrationStats(**cursor.fetchone())

    def activate_registration(self, registration_id: UUID, update: ActivationUpdate) -> bool:
        """
        Flip REGISTERED -> ACTIVATED with activation fields in one statement.

        The status predicate in the WHERE clause is the compare-and-set:
        a row already ACTIVATED or EXPIRED is left untouched.

        Returns:
            True if this call activated the registration
        """
        sql = """
            UPDATE registrations
            SET status = %s,
                activated_at = %s,
                activation_lat = %s,
                activation_lng = %s,
                activation_distance_miles = %s,
                activation_accuracy_meters = %s,
                activation_expires_at = %s
            WHERE id = %s AND status = %s
        """
        params = (
            RegistrationStatus.ACTIVATED.value,
            update.activated_at,
            update.lat,
            update.lng,
            update.distance_miles,
            update.accuracy_meters,
            update.expires_at,
            registration_id,
            RegistrationStatus.REGISTERED.value,
        )
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            conn.commit()
            return cursor.rowcount == 1

    def delete_registration(self, registration_id: UUID) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM registrations WHERE id = %s", (registration_id,))
            conn.commit()
            return cursor.rowcount == 1

    def _find_one(self, condition: str, value: Any) -> RegistrationDetails | None:
        sql = f"{_DETAILS_SELECT} WHERE {condition}"
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, (value,))
            row = cursor.fetchone()
            return _details_from_row(row) if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
