"""
Domain exceptions - Semantic error types for the guest list.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Activation failures are reported as ActivationOutcome values, not raised.
"""


class GuestListError(Exception):
    """Base class for guest list domain errors."""

    pass


class RegistrationNotFound(GuestListError):
    """No registration matches the voucher code, QR token or id."""

    pass


class VenueNotFound(GuestListError):
    """No venue matches the given id."""

    pass


class InvalidRegistration(GuestListError):
    """Registration input failed validation; message is user-facing."""

    pass


class InvalidVenue(GuestListError):
    """Venue input failed validation; message is user-facing."""

    pass


class CodeIssueFailed(GuestListError):
    """Unique voucher code / QR token could not be issued within the retry budget."""

    pass
