"""
API v1 admin routes.

Venue management and registration review, behind HTTP BASIC AUTH.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.api.dependencies import get_admin_service, require_admin
from src.api.models import (
    ErrorResponse,
    RegistrationListResponse,
    RegistrationResponse,
    StatsResponse,
    VenueRequest,
    VenueResponse,
)
from src.domain.admin import AdminService
from src.domain.exceptions import InvalidVenue, RegistrationNotFound, VenueNotFound
from src.domain.models import RegistrationQuery
from src.domain.ports import RegistrationStatus

router = APIRouter(
    tags=["admin"],
    dependencies=[Depends(require_admin)],
    responses={401: {"model": ErrorResponse, "description": "Invalid admin credentials"}},
)


def _venue_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venue not found")


def _registration_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found")


@router.get("/venues", response_model=list[VenueResponse], summary="List venues")
async def list_venues(service: AdminService = Depends(get_admin_service)) -> list[VenueResponse]:
    return [VenueResponse.from_domain(venue) for venue in service.list_venues()]


@router.post(
    "/venues",
    response_model=VenueResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a venue",
)
async def create_venue(
    request_data: VenueRequest,
    service: AdminService = Depends(get_admin_service),
) -> VenueResponse:
    try:
        venue = service.create_venue(request_data.to_domain())
    except InvalidVenue as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from None
    return VenueResponse.from_domain(venue)


@router.get(
    "/venues/{venue_id}",
    response_model=VenueResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a venue",
)
async def get_venue(
    venue_id: UUID, service: AdminService = Depends(get_admin_service)
) -> VenueResponse:
    try:
        return VenueResponse.from_domain(service.get_venue(venue_id))
    except VenueNotFound:
        raise _venue_not_found() from None


@router.put(
    "/venues/{venue_id}",
    response_model=VenueResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Update a venue",
)
async def update_venue(
    venue_id: UUID,
    request_data: VenueRequest,
    service: AdminService = Depends(get_admin_service),
) -> VenueResponse:
    try:
        venue = service.update_venue(venue_id, request_data.to_domain())
    except InvalidVenue as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from None
    except VenueNotFound:
        raise _venue_not_found() from None
    return VenueResponse.from_domain(venue)


@router.delete(
    "/venues/{venue_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete a venue and its events and registrations",
)
async def delete_venue(
    venue_id: UUID, service: AdminService = Depends(get_admin_service)
) -> Response:
    try:
        service.delete_venue(venue_id)
    except VenueNotFound:
        raise _venue_not_found() from None
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/registrations",
    response_model=RegistrationListResponse,
    summary="List registrations",
    description="Newest first. Search matches name, email, phone, voucher code and venue name.",
)
async def list_registrations(
    status_filter: RegistrationStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=100),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: AdminService = Depends(get_admin_service),
) -> RegistrationListResponse:
    query = RegistrationQuery(status=status_filter, search=search, limit=limit, offset=offset)
    registrations = service.list_registrations(query)
    return RegistrationListResponse(
        stats=StatsResponse.from_domain(service.registration_stats()),
        registrations=[RegistrationResponse.from_domain(d) for d in registrations],
    )


@router.get("/registrations/stats", response_model=StatsResponse, summary="Registration counts")
async def registration_stats(service: AdminService = Depends(get_admin_service)) -> StatsResponse:
    return StatsResponse.from_domain(service.registration_stats())


@router.get(
    "/registrations/{registration_id}",
    response_model=RegistrationResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a registration",
)
async def get_registration(
    registration_id: UUID, service: AdminService = Depends(get_admin_service)
) -> RegistrationResponse:
    try:
        return RegistrationResponse.from_domain(service.get_registration(registration_id))
    except RegistrationNotFound:
        raise _registration_not_found() from None


@router.delete(
    "/registrations/{registration_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete a registration",
)
async def delete_registration(
    registration_id: UUID, service: AdminService = Depends(get_admin_service)
) -> Response:
    try:
        service.delete_registration(registration_id)
    except RegistrationNotFound:
        raise _registration_not_found() from None
    return Response(status_code=status.HTTP_204_NO_CONTENT)
