"""
API v1 public routes.

Defines REST endpoints for attendee registration, the confirmation
screen, and on-site activation.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import get_activation_service, get_registration_service
from src.api.models import (
    ActivateRequest,
    ActivateResponse,
    ConfirmationResponse,
    ErrorResponse,
    RegisterRequest,
    RegisterResponse,
    RegistrationResponse,
    VenueResponse,
)
from src.config.settings import Settings, get_settings
from src.domain.activation import ActivationService
from src.domain.exceptions import (
    CodeIssueFailed,
    InvalidRegistration,
    RegistrationNotFound,
    VenueNotFound,
)
from src.domain.ports import ActivationOutcome, RegistrationStatus
from src.domain.registration import RegistrationService, activation_url

router = APIRouter()

# Activation outcomes that are not a success, by HTTP status
_OUTCOME_STATUS = {
    ActivationOutcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ActivationOutcome.ALREADY_ACTIVATED: status.HTTP_409_CONFLICT,
    ActivationOutcome.EXPIRED: status.HTTP_409_CONFLICT,
    ActivationOutcome.EVENT_DATE_MISSING: status.HTTP_403_FORBIDDEN,
    ActivationOutcome.OUTSIDE_WINDOW: status.HTTP_403_FORBIDDEN,
    ActivationOutcome.OUTSIDE_GEOFENCE: status.HTTP_403_FORBIDDEN,
}


@router.get(
    "/venues",
    response_model=list[VenueResponse],
    tags=["registration"],
    summary="List venues open for registration",
)
async def list_venues(
    service: RegistrationService = Depends(get_registration_service),
) -> list[VenueResponse]:
    return [VenueResponse.from_domain(venue) for venue in service.available_venues()]


@router.post(
    "/registrations",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["registration"],
    responses={
        404: {"model": ErrorResponse, "description": "Venue not found"},
        422: {"description": "Validation error"},
        503: {"model": ErrorResponse, "description": "Voucher code could not be issued"},
    },
    summary="Register for a venue's guest list",
    description="Submit attendee details for a venue and date. "
    "Returns a voucher code and the activation link to use at the venue.",
)
async def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse:
    """
    Register an attendee and issue a voucher code and QR token.

    - **venue_id** / **event_date**: where and when
    - **first_name**, **last_name**, **email**, **phone**: contact details
    - remaining fields are optional extras
    """
    try:
        issued = service.register(request_data.to_draft())
    except InvalidRegistration as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from None
    except VenueNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Venue not found"
        ) from None
    except CodeIssueFailed:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to create registration, please try again",
        ) from None

    return RegisterResponse(
        message="You're on the list",
        registration_id=issued.registration_id,
        voucher_code=issued.voucher_code,
        qr_token=issued.qr_token,
        activation_url=issued.activation_url,
        confirmation_url=issued.confirmation_url,
    )


@router.get(
    "/confirmation",
    response_model=ConfirmationResponse,
    tags=["registration"],
    responses={404: {"model": ErrorResponse, "description": "Registration not found"}},
    summary="Look up a registration by voucher code",
)
async def confirmation(
    code: str = Query(..., min_length=1, max_length=16, description="Voucher code"),
    service: RegistrationService = Depends(get_registration_service),
    settings: Settings = Depends(get_settings),
) -> ConfirmationResponse:
    try:
        details = service.get_by_voucher_code(code)
    except RegistrationNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found"
        ) from None

    return ConfirmationResponse(
        registration=RegistrationResponse.from_domain(details),
        activation_url=activation_url(settings.public_base_url, details.registration.qr_token),
    )


@router.get(
    "/activate/{qr_token}",
    response_model=RegistrationResponse,
    tags=["activation"],
    responses={404: {"model": ErrorResponse, "description": "Registration not found"}},
    summary="Show the registration behind a QR token",
)
async def activation_screen(
    qr_token: str,
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationResponse:
    try:
        details = service.get_by_qr_token(qr_token)
    except RegistrationNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid QR code or registration not found",
        ) from None
    return RegistrationResponse.from_domain(details)


@router.post(
    "/activate/{qr_token}",
    response_model=ActivateResponse,
    tags=["activation"],
    responses={
        403: {"model": ErrorResponse, "description": "Outside activation window or geofence"},
        404: {"model": ErrorResponse, "description": "Registration not found"},
        409: {"model": ErrorResponse, "description": "Already activated or expired"},
        422: {"description": "Validation error"},
    },
    summary="Activate a guest list entry on site",
    description="Submit the device location. Activation succeeds only on the event date "
    "between 6 PM and midnight and within the venue's geofence.",
)
async def activate(
    qr_token: str,
    request_data: ActivateRequest,
    service: ActivationService = Depends(get_activation_service),
) -> ActivateResponse:
    """
    Activate the registration behind a QR token.

    - **lat** / **lng**: device location in degrees
    - **accuracy_meters**: optional reported accuracy
    """
    decision = service.activate(
        qr_token,
        request_data.lat,
        request_data.lng,
        accuracy_meters=request_data.accuracy_meters,
    )

    if not decision.succeeded:
        raise HTTPException(status_code=_OUTCOME_STATUS[decision.outcome], detail=decision.message)

    registration = decision.details.registration
    return ActivateResponse(
        message=decision.message,
        status=RegistrationStatus.ACTIVATED,
        venue_name=decision.details.venue.name,
        first_name=registration.first_name,
        last_name=registration.last_name,
        distance_miles=decision.distance_miles,
        activated_at=decision.update.activated_at,
        expires_at=decision.update.expires_at,
    )
