"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from .models import (
        ActivationUpdate,
        NewRegistration,
        RegistrationDetails,
        RegistrationQuery,
        RegistrationStats,
        Venue,
        VenueInput,
    )


class RegistrationStatus(str, Enum):
    """
    Registration lifecycle states.

    State Transitions (forward-only):
    - REGISTERED -> ACTIVATED (on-site activation inside window and geofence)
    - REGISTERED -> EXPIRED (asserted by an external process, never by this service)

    Note: REGISTERED -> ACTIVATED is enforced at the repository level
    as a conditional UPDATE keyed on id and current status.
    """

    REGISTERED = "REGISTERED"
    ACTIVATED = "ACTIVATED"
    EXPIRED = "EXPIRED"


class ActivationOutcome(Enum):
    """
    Result of an activation attempt.

    Used by ActivationService.activate() to indicate success or the
    specific reason the attempt was rejected.
    """

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ALREADY_ACTIVATED = "already_activated"
    EXPIRED = "expired"
    EVENT_DATE_MISSING = "event_date_missing"
    OUTSIDE_WINDOW = "outside_window"
    OUTSIDE_GEOFENCE = "outside_geofence"


class VenueRepository(Protocol):
    """Port interface for venue persistence."""

    def list_venues(self) -> list["Venue"]:
        """Return all venues ordered by name."""
        ...

    def get_venue(self, venue_id: UUID) -> "Venue | None":
        ...

    def create_venue(self, data: "VenueInput") -> "Venue":
        ...

    def update_venue(self, venue_id: UUID, data: "VenueInput") -> "Venue | None":
        """Return the updated venue, or None when the id is unknown."""
        ...

    def delete_venue(self, venue_id: UUID) -> bool:
        ...


class EventRepository(Protocol):
    """Port interface for event persistence."""

    def resolve_event(self, venue_id: UUID, event_date: date) -> UUID:
        """
        Return the event id for (venue, date), creating the event if absent.

        Must be a single atomic insert-if-absent so that concurrent
        registrations for the same pair resolve to one event.
        """
        ...


class RegistrationRepository(Protocol):
    """Port interface for registration persistence."""

    def insert_registration(self, data: "NewRegistration") -> UUID | None:
        """
        Insert a REGISTERED registration.

        Returns:
            New registration id, or None if the voucher code or QR token
            collided with an existing registration
        """
        ...

    def find_by_voucher_code(self, voucher_code: str) -> "RegistrationDetails | None":
        ...

    def find_by_qr_token(self, qr_token: str) -> "RegistrationDetails | None":
        ...

    def get_registration(self, registration_id: UUID) -> "RegistrationDetails | None":
        ...

    def list_registrations(self, query: "RegistrationQuery") -> list["RegistrationDetails"]:
        """Return registrations newest first, filtered by status and search text."""
        ...

    def registration_stats(self) -> "RegistrationStats":
        ...

    def activate_registration(self, registration_id: UUID, update: "ActivationUpdate") -> bool:
        """
        Flip REGISTERED -> ACTIVATED and write activation fields.

        Compare-and-set on status: succeeds only if the row is still
        REGISTERED at write time.

        Returns:
            True if this call performed the activation, False otherwise
        """
        ...

    def delete_registration(self, registration_id: UUID) -> bool:
        ...


class ConfirmationSender(Protocol):
    """Port interface for delivering the voucher to the attendee."""

    def send_confirmation(
        self, email: str, voucher_code: str, activation_url: str, confirmation_url: str
    ) -> None:
        """
        Deliver voucher code and links to the attendee.

        Args:
            email: Attendee email address
            voucher_code: 6-character voucher code
            activation_url: URL embedding the QR token
            confirmation_url: URL of the confirmation screen
        """
        ...
