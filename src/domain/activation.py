"""
Activation domain service - on-site guest list activation.

An attendee activates a REGISTERED entry by opening the QR link at the
venue. The attempt passes only if, checked in this order:

1. the registration is still REGISTERED (ACTIVATED / EXPIRED are rejected),
2. the event date is known,
3. the current venue-local time is between 18:00:00.000 and 23:59:59.999
   on the event date (both ends inclusive),
4. the reported location is within the venue geofence (distance <= radius).

On success the status flip and activation fields are written in one
conditional UPDATE keyed by registration id and status REGISTERED, so two
concurrent attempts can never both activate the same entry. The loser of
that race is reported as already activated.

Failures are returned as ActivationOutcome values with a user-facing
message; nothing here retries.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from .geo import distance_miles, is_within_geofence
from .models import ActivationUpdate, RegistrationDetails
from .ports import ActivationOutcome, RegistrationRepository, RegistrationStatus

logger = logging.getLogger(__name__)

WINDOW_END = time(23, 59, 59, 999000)

MESSAGES = {
    ActivationOutcome.SUCCESS: "Guest list entry activated",
    ActivationOutcome.NOT_FOUND: "Invalid QR code or registration not found",
    ActivationOutcome.ALREADY_ACTIVATED: "This guest list entry has already been activated",
    ActivationOutcome.EXPIRED: "This guest list entry has expired",
    ActivationOutcome.EVENT_DATE_MISSING: "Event date not found",
    ActivationOutcome.OUTSIDE_WINDOW: (
        "Activation is only available on the event date between 6 PM and 12 AM"
    ),
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def activation_window(
    event_date: date, tz: ZoneInfo, start_hour: int = 18
) -> tuple[datetime, datetime]:
    """Return the (start, end) of the activation window on event_date in tz."""
    start = datetime.combine(event_date, time(start_hour), tzinfo=tz)
    end = datetime.combine(event_date, WINDOW_END, tzinfo=tz)
    return start, end


def to_venue_time(now: datetime, tz: ZoneInfo) -> datetime:
    """Aware datetime in tz; naive input is taken to be venue-local already."""
    return now.replace(tzinfo=tz) if now.tzinfo is None else now.astimezone(tz)


def is_within_activation_window(
    now: datetime, event_date: date, tz: ZoneInfo, start_hour: int = 18
) -> bool:
    """
    Check whether now falls inside the activation window of event_date.

    Naive datetimes are taken to be venue-local already. The comparison
    runs at millisecond resolution, so 23:59:59.999500 still counts as
    23:59:59.999.
    """
    local_now = to_venue_time(now, tz)
    local_now = local_now.replace(microsecond=local_now.microsecond // 1000 * 1000)
    start, end = activation_window(event_date, tz, start_hour)
    return start <= local_now <= end


def _format_radius(miles: float) -> str:
    """Radius as stored, without rounding; 1.0 reads as 1."""
    text = str(float(miles))
    return text[:-2] if text.endswith(".0") else text


def geofence_message(venue_name: str, geofence_miles: float, distance: float) -> str:
    return (
        f"You must be within {_format_radius(geofence_miles)} mile(s) "
        f"of {venue_name} to activate. "
        f"You are currently {distance:.2f} miles away."
    )


@dataclass(frozen=True)
class ActivationDecision:
    """Outcome of an activation attempt plus the data the caller may show."""

    outcome: ActivationOutcome
    message: str
    distance_miles: float | None = None
    update: ActivationUpdate | None = None
    details: RegistrationDetails | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == ActivationOutcome.SUCCESS


def _reject(
    outcome: ActivationOutcome,
    details: RegistrationDetails | None = None,
    distance: float | None = None,
    message: str | None = None,
) -> ActivationDecision:
    return ActivationDecision(
        outcome=outcome,
        message=message or MESSAGES[outcome],
        distance_miles=distance,
        details=details,
    )


@dataclass
class ActivationService:
    """
    Domain service for on-site activation.

    Owns the ordered checks and delegates the atomic status flip
    to the repository.
    """

    repository: RegistrationRepository
    venue_timezone: str = "America/Chicago"
    window_start_hour: int = 18
    validity_hours: int = 2
    clock: Callable[[], datetime] = utc_now

    def evaluate(
        self,
        details: RegistrationDetails,
        lat: float,
        lng: float,
        now: datetime,
        accuracy_meters: float | None = None,
    ) -> ActivationDecision:
        """
        Run the ordered activation checks without touching storage.

        Returns:
            SUCCESS decision carrying the ActivationUpdate to apply,
            or the first failing check's rejection
        """
        registration = details.registration
        tz = ZoneInfo(self.venue_timezone)
        now = to_venue_time(now, tz)

        if registration.status == RegistrationStatus.ACTIVATED:
            return _reject(ActivationOutcome.ALREADY_ACTIVATED, details)
        if registration.status == RegistrationStatus.EXPIRED:
            return _reject(ActivationOutcome.EXPIRED, details)

        if details.event_date is None:
            return _reject(ActivationOutcome.EVENT_DATE_MISSING, details)

        if not is_within_activation_window(now, details.event_date, tz, self.window_start_hour):
            return _reject(ActivationOutcome.OUTSIDE_WINDOW, details)

        venue = details.venue
        distance = distance_miles(lat, lng, venue.lat, venue.lng)
        if not is_within_geofence(lat, lng, venue.lat, venue.lng, venue.geofence_miles):
            return _reject(
                ActivationOutcome.OUTSIDE_GEOFENCE,
                details,
                distance=distance,
                message=geofence_message(venue.name, venue.geofence_miles, distance),
            )

        update = ActivationUpdate(
            activated_at=now,
            lat=lat,
            lng=lng,
            distance_miles=distance,
            expires_at=now + timedelta(hours=self.validity_hours),
            accuracy_meters=accuracy_meters,
        )
        return ActivationDecision(
            outcome=ActivationOutcome.SUCCESS,
            message=MESSAGES[ActivationOutcome.SUCCESS],
            distance_miles=distance,
            update=update,
            details=details,
        )

    def activate(
        self,
        qr_token: str,
        lat: float,
        lng: float,
        accuracy_meters: float | None = None,
        now: datetime | None = None,
    ) -> ActivationDecision:
        """
        Activate the registration behind qr_token if every check passes.

        Args:
            qr_token: Opaque token from the activation URL
            lat: Reported latitude in degrees
            lng: Reported longitude in degrees
            accuracy_meters: Reported fix accuracy, stored as-is
            now: Current time; defaults to the service clock

        Returns:
            ActivationDecision describing the outcome
        """
        now = now or self.clock()

        details = self.repository.find_by_qr_token(qr_token)
        if details is None:
            logger.info("Activation rejected: unknown QR token")
            return _reject(ActivationOutcome.NOT_FOUND)

        decision = self.evaluate(details, lat, lng, now, accuracy_meters)
        registration_id = details.registration.id

        if not decision.succeeded:
            logger.info(
                "Activation rejected for registration %s: %s",
                registration_id,
                decision.outcome.value,
            )
            return decision

        if not self.repository.activate_registration(registration_id, decision.update):
            # Lost the compare-and-set to a concurrent attempt
            return self._conflict(qr_token, details)

        logger.info(
            "Registration %s activated at %.3f miles from %s",
            registration_id,
            decision.distance_miles,
            details.venue.name,
        )
        return decision

    def _conflict(self, qr_token: str, details: RegistrationDetails) -> ActivationDecision:
        current = self.repository.find_by_qr_token(qr_token)
        if current is not None and current.registration.status == RegistrationStatus.EXPIRED:
            outcome = ActivationOutcome.EXPIRED
        else:
            outcome = ActivationOutcome.ALREADY_ACTIVATED
        logger.warning(
            "Activation of registration %s lost conditional update: %s",
            details.registration.id,
            outcome.value,
        )
        return _reject(outcome, current or details)
