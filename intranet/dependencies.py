from datetime import datetime

from fastapi import Depends, Header, Query

from intranet.clock import SystemClock, clock
from intranet.enums import MyEventsFilter
from intranet.schemas import EventsListingFilter, UserAndOrganization
from intranet.services.event_validation_service import EventValidationService


def get_user_and_organization(
    x_organization_id: int = Header(..., description="Caller's organization id."),
    x_user_id: int = Header(..., description="Caller's user id."),
) -> UserAndOrganization:
    """
    Identify the caller from the ``X-Organization-Id`` / ``X-User-Id``
    headers set by the gateway in front of the API.
    """
    return UserAndOrganization(organization_id=x_organization_id, user_id=x_user_id)


def get_clock() -> SystemClock:
    return clock


def get_event_validation_service(
    system_clock: SystemClock = Depends(get_clock),
) -> EventValidationService:
    return EventValidationService(system_clock)


class EventsFilterParams:
    """
    Reusable dependency that parses the event calendar query parameters.

    Usage in a router::

        @router.get("/events")
        async def list_events(params: EventsFilterParams = Depends()):
            ...

    Attributes
    ----------
    type_id:
        Only events of this event type.
    office_id:
        Only events held for this office (events for all offices included).
    is_only_main_events:
        Only events whose type is shown with the main events.
    start_date / end_date:
        Window on the event start date.  Without a window, events that
        already ended are left out.
    page:
        1-based page number.
    """

    def __init__(
        self,
        type_id: int | None = Query(None, description="Event type id."),
        office_id: int | None = Query(None, description="Office id."),
        is_only_main_events: bool = Query(False, description="Only main events."),
        start_date: datetime | None = Query(None, description="Earliest start date."),
        end_date: datetime | None = Query(None, description="Latest start date."),
        page: int = Query(1, ge=1, description="Page number (1-based)."),
    ) -> None:
        self.type_id = type_id
        self.office_id = office_id
        self.is_only_main_events = is_only_main_events
        self.start_date = start_date
        self.end_date = end_date
        self.page = page

    def to_filter(self) -> EventsListingFilter:
        return EventsListingFilter(
            type_id=self.type_id,
            office_id=self.office_id,
            is_only_main_events=self.is_only_main_events,
            start_date=self.start_date,
            end_date=self.end_date,
            page=self.page,
        )


class MyEventsParams:
    def __init__(
        self,
        filter: MyEventsFilter = Query(MyEventsFilter.PARTICIPANT, description="host or participant."),
        search: str | None = Query(None, max_length=100, description="Match on name or place."),
        page: int = Query(1, ge=1, description="Page number (1-based)."),
    ) -> None:
        self.filter = filter
        self.search = search
        self.page = page
