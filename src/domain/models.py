"""
Domain records for venues, events and registrations.

Plain dataclasses shared between the domain services and the
repository adapters. Registration status lives in ports.RegistrationStatus.
"""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from .ports import RegistrationStatus

DEFAULT_GEOFENCE_MILES = 0.5


@dataclass(frozen=True)
class Venue:
    id: UUID
    name: str
    lat: float
    lng: float
    geofence_miles: float = DEFAULT_GEOFENCE_MILES
    address: str | None = None
    vibe_text: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class VenueInput:
    """Fields an admin supplies when creating or editing a venue."""

    name: str
    lat: float
    lng: float
    geofence_miles: float = DEFAULT_GEOFENCE_MILES
    address: str | None = None
    vibe_text: str | None = None


@dataclass(frozen=True)
class NewRegistration:
    """Validated attendee submission, ready to be persisted with issued codes."""

    event_id: UUID
    venue_id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str
    voucher_code: str
    qr_token: str
    men_count: int | None = None
    women_count: int | None = None
    total_count: int | None = None
    bottle_service: bool = False
    bottle_budget: str | None = None
    instagram: str | None = None
    interest_limo: bool = False
    interest_boat: bool = False
    celebration_type: str | None = None
    celebration_other: str | None = None


@dataclass(frozen=True)
class Registration:
    id: UUID
    event_id: UUID
    venue_id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str
    voucher_code: str
    qr_token: str
    status: RegistrationStatus
    men_count: int | None = None
    women_count: int | None = None
    total_count: int | None = None
    bottle_service: bool = False
    bottle_budget: str | None = None
    instagram: str | None = None
    interest_limo: bool = False
    interest_boat: bool = False
    celebration_type: str | None = None
    celebration_other: str | None = None
    activated_at: datetime | None = None
    activation_lat: float | None = None
    activation_lng: float | None = None
    activation_distance_miles: float | None = None
    activation_accuracy_meters: float | None = None
    activation_expires_at: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class RegistrationDetails:
    """A registration joined with its venue and event date."""

    registration: Registration
    venue: Venue
    event_date: date | None


@dataclass(frozen=True)
class ActivationUpdate:
    """Field set written atomically with the REGISTERED -> ACTIVATED flip."""

    activated_at: datetime
    lat: float
    lng: float
    distance_miles: float
    expires_at: datetime
    accuracy_meters: float | None = None


@dataclass(frozen=True)
class RegistrationStats:
    total: int = 0
    registered: int = 0
    activated: int = 0
    expired: int = 0


@dataclass(frozen=True)
class RegistrationQuery:
    """Admin listing filter: optional status plus free-text search."""

    status: RegistrationStatus | None = None
    search: str | None = None
    limit: int = 100
    offset: int = 0
