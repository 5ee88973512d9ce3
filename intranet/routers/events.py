from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.clock import SystemClock
from intranet.database import get_db
from intranet.dependencies import (
    EventsFilterParams,
    MyEventsParams,
    get_clock,
    get_event_validation_service,
    get_user_and_organization,
)
from intranet.schemas import (
    EventCreate,
    EventDetails,
    EventJoin,
    EventListItem,
    EventOptions,
    EventTypeCreate,
    EventTypeResponse,
    MyEventsOptions,
    UserAndOrganization,
)
from intranet.services import event_listing_service, event_service
from intranet.services.event_validation_service import EventValidationService

router = APIRouter(prefix="/api/v1/events", tags=["events"])


# --- Event types ---

@router.get("/types", response_model=list[EventTypeResponse])
async def list_event_types(
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    db: AsyncSession = Depends(get_db),
):
    return await event_service.get_event_types(db, user_org.organization_id)


@router.post("/types", status_code=201, response_model=EventTypeResponse)
async def create_event_type(
    data: EventTypeCreate,
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    db: AsyncSession = Depends(get_db),
):
    return await event_service.create_event_type(db, user_org.organization_id, data)


# --- Listings ---

@router.get("", response_model=list[EventListItem])
async def list_events(
    params: EventsFilterParams = Depends(),
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    clock: SystemClock = Depends(get_clock),
    db: AsyncSession = Depends(get_db),
):
    return await event_listing_service.get_events_by_type_and_office(
        db, params.to_filter(), user_org, clock.utc_now()
    )


@router.get("/mine", response_model=list[EventListItem])
async def list_my_events(
    params: MyEventsParams = Depends(),
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    db: AsyncSession = Depends(get_db),
):
    options = MyEventsOptions(
        organization_id=user_org.organization_id,
        user_id=user_org.user_id,
        search_string=params.search,
        filter=params.filter,
    )
    return await event_listing_service.get_my_events(db, options, params.page)


# --- Single event ---

@router.post("", status_code=201, response_model=EventDetails)
async def create_event(
    data: EventCreate,
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    validation: EventValidationService = Depends(get_event_validation_service),
    db: AsyncSession = Depends(get_db),
):
    return await event_service.create_event(db, data, user_org, validation)


@router.get("/{event_id}", response_model=EventDetails)
async def get_event(
    event_id: str,
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    db: AsyncSession = Depends(get_db),
):
    return await event_listing_service.get_event_details(db, event_id, user_org)


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: str,
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    db: AsyncSession = Depends(get_db),
):
    if not await event_service.delete_event(db, event_id, user_org):
        raise HTTPException(status_code=404, detail="Event not found")


@router.get("/{event_id}/options", response_model=EventOptions)
async def get_event_options(
    event_id: str,
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    db: AsyncSession = Depends(get_db),
):
    return await event_listing_service.get_event_options(db, event_id, user_org)


# --- Participation ---

@router.post("/{event_id}/participants", response_model=EventDetails)
async def join_event(
    event_id: str,
    data: EventJoin,
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    validation: EventValidationService = Depends(get_event_validation_service),
    db: AsyncSession = Depends(get_db),
):
    return await event_service.join_event(db, event_id, user_org, data, validation)


@router.delete("/{event_id}/participants/me", status_code=204)
async def leave_event(
    event_id: str,
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    db: AsyncSession = Depends(get_db),
):
    if not await event_service.leave_event(db, event_id, user_org):
        raise HTTPException(status_code=404, detail="Not participating in this event")
