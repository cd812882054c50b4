"""
Admin domain service - venue management and registration review.
"""

import logging
from dataclasses import dataclass, replace
from uuid import UUID

from .exceptions import InvalidVenue, RegistrationNotFound, VenueNotFound
from .models import (
    RegistrationDetails,
    RegistrationQuery,
    RegistrationStats,
    Venue,
    VenueInput,
)
from .ports import RegistrationRepository, VenueRepository

logger = logging.getLogger(__name__)


def validate_venue(data: VenueInput) -> VenueInput:
    """
    Check and normalize admin venue input.

    Raises:
        InvalidVenue: On missing name, out-of-range coordinates or
            non-positive geofence radius
    """
    name = data.name.strip()
    if not name:
        raise InvalidVenue("Venue name is required")
    if not -90 <= data.lat <= 90:
        raise InvalidVenue("Latitude must be between -90 and 90")
    if not -180 <= data.lng <= 180:
        raise InvalidVenue("Longitude must be between -180 and 180")
    if data.geofence_miles <= 0:
        raise InvalidVenue("Geofence radius must be greater than 0 miles")
    return replace(
        data,
        name=name,
        address=(data.address or "").strip() or None,
        vibe_text=(data.vibe_text or "").strip() or None,
    )


@dataclass
class AdminService:
    """Venue CRUD and registration listing for the admin surface."""

    venues: VenueRepository
    registrations: RegistrationRepository

    def list_venues(self) -> list[Venue]:
        return self.venues.list_venues()

    def get_venue(self, venue_id: UUID) -> Venue:
        venue = self.venues.get_venue(venue_id)
        if venue is None:
            raise VenueNotFound(str(venue_id))
        return venue

    def create_venue(self, data: VenueInput) -> Venue:
        venue = self.venues.create_venue(validate_venue(data))
        logger.info("Venue %s created: %s", venue.id, venue.name)
        return venue

    def update_venue(self, venue_id: UUID, data: VenueInput) -> Venue:
        venue = self.venues.update_venue(venue_id, validate_venue(data))
        if venue is None:
            raise VenueNotFound(str(venue_id))
        logger.info("Venue %s updated", venue_id)
        return venue

    def delete_venue(self, venue_id: UUID) -> None:
        if not self.venues.delete_venue(venue_id):
            raise VenueNotFound(str(venue_id))
        logger.info("Venue %s deleted", venue_id)

    def list_registrations(self, query: RegistrationQuery) -> list[RegistrationDetails]:
        search = (query.search or "").strip() or None
        return self.registrations.list_registrations(replace(query, search=search))

    def registration_stats(self) -> RegistrationStats:
        return self.registrations.registration_stats()

    def get_registration(self, registration_id: UUID) -> RegistrationDetails:
        details = self.registrations.get_registration(registration_id)
        if details is None:
            raise RegistrationNotFound(str(registration_id))
        return details

    def delete_registration(self, registration_id: UUID) -> None:
        if not self.registrations.delete_registration(registration_id):
            raise RegistrationNotFound(str(registration_id))
        logger.info("Registration %s deleted", registration_id)
