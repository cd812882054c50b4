"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from src.domain.draft import RegistrationDraft
from src.domain.models import RegistrationDetails, RegistrationStats, Venue, VenueInput
from src.domain.ports import RegistrationStatus


class VenueRequest(BaseModel):
    """Request model for creating or editing a venue."""

    name: str = Field(..., min_length=1, max_length=200)
    address: str | None = None
    vibe_text: str | None = None
    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")
    geofence_miles: float = Field(0.5, gt=0, description="Activation radius in miles")

    def to_domain(self) -> VenueInput:
        return VenueInput(
            name=self.name,
            address=self.address,
            vibe_text=self.vibe_text,
            lat=self.lat,
            lng=self.lng,
            geofence_miles=self.geofence_miles,
        )


class VenueResponse(BaseModel):
    id: UUID
    name: str
    address: str | None
    vibe_text: str | None
    lat: float
    lng: float
    geofence_miles: float

    @classmethod
    def from_domain(cls, venue: Venue) -> "VenueResponse":
        return cls(
            id=venue.id,
            name=venue.name,
            address=venue.address,
            vibe_text=venue.vibe_text,
            lat=venue.lat,
            lng=venue.lng,
            geofence_miles=venue.geofence_miles,
        )


class RegisterRequest(BaseModel):
    """Request model for guest list registration."""

    venue_id: UUID
    event_date: date
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    email: EmailStr
    phone: str = Field(..., max_length=32, description="10-digit phone number, any formatting")
    men_count: int | None = Field(None, ge=0)
    women_count: int | None = Field(None, ge=0)
    bottle_service: bool = False
    bottle_budget: str | None = None
    instagram: str | None = Field(None, max_length=100)
    interest_limo: bool = False
    interest_boat: bool = False
    celebration_type: str | None = None
    celebration_other: str | None = Field(None, max_length=500)

    def to_draft(self) -> RegistrationDraft:
        return RegistrationDraft(
            venue_id=self.venue_id,
            event_date=self.event_date,
            first_name=self.first_name,
            last_name=self.last_name,
            email=str(self.email),
            phone=self.phone,
            men_count=self.men_count,
            women_count=self.women_count,
            bottle_service=self.bottle_service,
            bottle_budget=self.bottle_budget,
            instagram=self.instagram,
            interest_limo=self.interest_limo,
            interest_boat=self.interest_boat,
            celebration_type=self.celebration_type,
            celebration_other=self.celebration_other,
        )


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str
    registration_id: UUID
    voucher_code: str
    qr_token: str
    activation_url: str
    confirmation_url: str


class RegistrationResponse(BaseModel):
    """Registration joined with venue and event date."""

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str
    men_count: int | None
    women_count: int | None
    total_count: int | None
    bottle_service: bool
    bottle_budget: str | None
    instagram: str | None
    interest_limo: bool
    interest_boat: bool
    celebration_type: str | None
    celebration_other: str | None
    voucher_code: str
    qr_token: str
    status: RegistrationStatus
    event_date: date | None
    venue: VenueResponse
    activated_at: datetime | None
    activation_distance_miles: float | None
    activation_expires_at: datetime | None
    created_at: datetime | None

    @classmethod
    def from_domain(cls, details: RegistrationDetails) -> "RegistrationResponse":
        r = details.registration
        return cls(
            id=r.id,
            first_name=r.first_name,
            last_name=r.last_name,
            email=r.email,
            phone=r.phone,
            men_count=r.men_count,
            women_count=r.women_count,
            total_count=r.total_count,
            bottle_service=r.bottle_service,
            bottle_budget=r.bottle_budget,
            instagram=r.instagram,
            interest_limo=r.interest_limo,
            interest_boat=r.interest_boat,
            celebration_type=r.celebration_type,
            celebration_other=r.celebration_other,
            voucher_code=r.voucher_code,
            qr_token=r.qr_token,
            status=r.status,
            event_date=details.event_date,
            venue=VenueResponse.from_domain(details.venue),
            activated_at=r.activated_at,
            activation_distance_miles=r.activation_distance_miles,
            activation_expires_at=r.activation_expires_at,
            created_at=r.created_at,
        )


class ConfirmationResponse(BaseModel):
    """Confirmation screen: the registration plus the URL to encode as a QR code."""

    registration: RegistrationResponse
    activation_url: str


class ActivateRequest(BaseModel):
    """Request model for on-site activation."""

    lat: float = Field(..., ge=-90, le=90, description="Device latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Device longitude in degrees")
    accuracy_meters: float | None = Field(None, ge=0, description="Reported fix accuracy")


class ActivateResponse(BaseModel):
    """Response model for successful activation."""

    message: str
    status: RegistrationStatus
    venue_name: str
    first_name: str
    last_name: str
    distance_miles: float
    activated_at: datetime
    expires_at: datetime


class StatsResponse(BaseModel):
    total: int
    registered: int
    activated: int
    expired: int

    @classmethod
    def from_domain(cls, stats: RegistrationStats) -> "StatsResponse":
        return cls(
            total=stats.total,
            registered=stats.registered,
            activated=stats.activated,
            expired=stats.expired,
        )


class RegistrationListResponse(BaseModel):
    stats: StatsResponse
    registrations: list[RegistrationResponse]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
