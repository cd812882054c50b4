"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for guest list registration
and on-site activation. It defines its own port interfaces for
infrastructure abstraction, ensuring true hexagonal architecture decoupling.
"""

from .activation import ActivationDecision, ActivationService
from .admin import AdminService
from .draft import RegistrationDraft
from .exceptions import (
    CodeIssueFailed,
    GuestListError,
    InvalidRegistration,
    InvalidVenue,
    RegistrationNotFound,
    VenueNotFound,
)
from .ports import (
    ActivationOutcome,
    ConfirmationSender,
    EventRepository,
    RegistrationRepository,
    RegistrationStatus,
    VenueRepository,
)
from .registration import IssuedRegistration, RegistrationService

__all__ = [
    "ActivationDecision",
    "ActivationOutcome",
    "ActivationService",
    "AdminService",
    "CodeIssueFailed",
    "ConfirmationSender",
    "EventRepository",
    "GuestListError",
    "InvalidRegistration",
    "InvalidVenue",
    "IssuedRegistration",
    "RegistrationDraft",
    "RegistrationNotFound",
    "RegistrationRepository",
    "RegistrationService",
    "RegistrationStatus",
    "VenueNotFound",
    "VenueRepository",
]
