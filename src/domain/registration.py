"""
Registration domain service - guest list sign-up.

This module contains the business logic that turns a completed
registration draft into a persisted REGISTERED entry:

1. walk the draft through every form step (validation),
2. confirm the venue exists,
3. resolve the (venue, date) event with a single insert-if-absent,
4. issue a voucher code and QR token, regenerating on collision,
5. send the attendee their voucher and links.

Uniqueness of voucher codes and QR tokens is enforced by the store's
UNIQUE constraints; the repository reports a collision by returning None
and the service retries with fresh values up to max_issue_attempts.
"""

import logging
from dataclasses import dataclass
from urllib.parse import quote, urlencode
from uuid import UUID

from .draft import RegistrationDraft
from .exceptions import CodeIssueFailed, RegistrationNotFound, VenueNotFound
from .issuer import generate_qr_token, generate_voucher_code
from .models import NewRegistration, RegistrationDetails, Venue
from .ports import ConfirmationSender, EventRepository, RegistrationRepository, VenueRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedRegistration:
    """Identifiers handed back to the attendee after a successful registration."""

    registration_id: UUID
    event_id: UUID
    voucher_code: str
    qr_token: str
    activation_url: str
    confirmation_url: str


def activation_url(base_url: str, qr_token: str) -> str:
    return f"{base_url.rstrip('/')}/activate/{quote(qr_token, safe='')}"


def confirmation_url(base_url: str, voucher_code: str) -> str:
    return f"{base_url.rstrip('/')}/confirmation?{urlencode({'code': voucher_code})}"


@dataclass
class RegistrationService:
    """
    Domain service for guest list registration.

    Orchestrates validation, event resolution, code issuing,
    persistence and confirmation delivery.
    """

    venues: VenueRepository
    events: EventRepository
    registrations: RegistrationRepository
    confirmation_sender: ConfirmationSender
    public_base_url: str = "http://localhost:8000"
    max_issue_attempts: int = 3

    def register(self, draft: RegistrationDraft) -> IssuedRegistration:
        """
        Register an attendee for a venue on a date.

        Args:
            draft: Registration form state, at any step

        Returns:
            IssuedRegistration with voucher code, QR token and links

        Raises:
            InvalidRegistration: If any form step fails validation
            VenueNotFound: If the selected venue does not exist
            CodeIssueFailed: If every issue attempt collided
        """
        draft = draft.complete().normalized()

        venue = self.venues.get_venue(draft.venue_id)
        if venue is None:
            raise VenueNotFound(str(draft.venue_id))

        event_id = self.events.resolve_event(venue.id, draft.event_date)

        for attempt in range(1, self.max_issue_attempts + 1):
            voucher_code = generate_voucher_code()
            qr_token = generate_qr_token()
            registration_id = self.registrations.insert_registration(
                self._new_registration(draft, event_id, voucher_code, qr_token)
            )
            if registration_id is not None:
                break
            logger.warning(
                "Voucher code or QR token collision (attempt %d/%d)",
                attempt,
                self.max_issue_attempts,
            )
        else:
            raise CodeIssueFailed(f"No unique voucher code after {self.max_issue_attempts} attempts")

        issued = IssuedRegistration(
            registration_id=registration_id,
            event_id=event_id,
            voucher_code=voucher_code,
            qr_token=qr_token,
            activation_url=activation_url(self.public_base_url, qr_token),
            confirmation_url=confirmation_url(self.public_base_url, voucher_code),
        )
        logger.info(
            "Registration %s created for %s on %s",
            registration_id,
            venue.name,
            draft.event_date.isoformat(),
        )

        self.confirmation_sender.send_confirmation(
            draft.email, voucher_code, issued.activation_url, issued.confirmation_url
        )
        return issued

    def available_venues(self) -> list[Venue]:
        """Venues offered in the first form step."""
        return self.venues.list_venues()

    def get_by_voucher_code(self, voucher_code: str) -> RegistrationDetails:
        """
        Look up a registration for the confirmation screen.

        Voucher codes are matched case-insensitively.

        Raises:
            RegistrationNotFound: If no registration has this code
        """
        details = self.registrations.find_by_voucher_code(voucher_code.strip().upper())
        if details is None:
            raise RegistrationNotFound(voucher_code)
        return details

    def get_by_qr_token(self, qr_token: str) -> RegistrationDetails:
        """Raises RegistrationNotFound for unknown tokens."""
        details = self.registrations.find_by_qr_token(qr_token)
        if details is None:
            raise RegistrationNotFound(qr_token)
        return details

    def _new_registration(
        self, draft: RegistrationDraft, event_id: UUID, voucher_code: str, qr_token: str
    ) -> NewRegistration:
        return NewRegistration(
            event_id=event_id,
            venue_id=draft.venue_id,
            first_name=draft.first_name,
            last_name=draft.last_name,
            email=draft.email,
            phone=draft.phone,
            voucher_code=voucher_code,
            qr_token=qr_token,
            men_count=draft.men_count,
            women_count=draft.women_count,
            total_count=draft.total_count,
            bottle_service=draft.bottle_service,
            bottle_budget=draft.bottle_budget,
            instagram=draft.instagram,
            interest_limo=draft.interest_limo,
            interest_boat=draft.interest_boat,
            celebration_type=draft.celebration_type,
            celebration_other=draft.celebration_other,
        )
