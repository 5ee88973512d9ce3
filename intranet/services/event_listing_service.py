"""
Event listing service — read-side queries for events.

Design notes
------------
- Every query is scoped to the caller's organization.
- Participants are eager-loaded with ``selectinload`` and counted in
  Python; an event rarely has more than a few hundred participants and
  the same rows also yield the caller's own attend status.
- Event option lists are static after creation and go through the
  cache-aside pattern.
"""
from datetime import datetime

from sqlalchemy import and_, asc, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from intranet import error_codes
from intranet.cache import cache
from intranet.config import settings
from intranet.enums import AttendingStatus, MyEventsFilter
from intranet.exceptions import NotFoundError
from intranet.models import Event, EventParticipant, EventType, Office
from intranet.schemas import (
    EventDetails,
    EventListItem,
    EventOptions,
    EventsListingFilter,
    MyEventsOptions,
    UserAndOrganization,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _attending_count(event: Event) -> int:
    return sum(1 for p in event.participants if p.attend_status == AttendingStatus.ATTENDING)


def _participating_status(event: Event, user_id: int) -> int:
    for participant in event.participants:
        if participant.user_id == user_id:
            return participant.attend_status
    return AttendingStatus.IDLE.value


def _event_to_list_item(event: Event, user_id: int) -> EventListItem:
    return EventListItem(
        id=event.id,
        name=event.name,
        place=event.place,
        image_name=event.image_name,
        start_date=event.start_date,
        end_date=event.end_date,
        registration_deadline=event.registration_deadline,
        type_id=event.event_type_id,
        is_pinned=event.is_pinned,
        max_participants=event.max_participants,
        participants_count=_attending_count(event),
        participating_status=_participating_status(event, user_id),
        is_creator=event.responsible_user_id == user_id,
    )


def _page_bounds(page: int) -> tuple[int, int]:
    page_size = settings.EVENTS_PAGE_SIZE
    return (max(page, 1) - 1) * page_size, page_size


def _organization_event(event_id: str, organization_id: int):
    return and_(Event.id == event_id, Event.organization_id == organization_id)


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_events_by_type_and_office(
    db: AsyncSession,
    filter_args: EventsListingFilter,
    user_org: UserAndOrganization,
    now: datetime,
) -> list[EventListItem]:
    """
    Return one page of the organization's event calendar.

    Events without offices are shown for every office.  Without an explicit
    date window only events that have not ended yet (relative to *now*)
    are returned.  Pinned events come first, then by start date.
    """
    q = select(Event).where(Event.organization_id == user_org.organization_id)

    if filter_args.type_id is not None:
        q = q.where(Event.event_type_id == filter_args.type_id)

    if filter_args.office_id is not None:
        q = q.where(
            or_(
                ~Event.offices.any(),
                Event.offices.any(Office.id == filter_args.office_id),
            )
        )

    if filter_args.is_only_main_events:
        q = q.where(Event.event_type.has(EventType.is_shown_with_main_events.is_(True)))

    if filter_args.start_date is None and filter_args.end_date is None:
        q = q.where(Event.end_date >= now)
    else:
        if filter_args.start_date is not None:
            q = q.where(Event.start_date >= filter_args.start_date)
        if filter_args.end_date is not None:
            q = q.where(Event.start_date <= filter_args.end_date)

    offset, limit = _page_bounds(filter_args.page)
    q = (
        q.options(selectinload(Event.participants))
        .order_by(desc(Event.is_pinned), asc(Event.start_date), asc(Event.id))
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(q)
    return [_event_to_list_item(e, user_org.user_id) for e in result.scalars().all()]


async def get_my_events(
    db: AsyncSession, options: MyEventsOptions, page: int = 1
) -> list[EventListItem]:
    """
    Return events the user hosts or takes part in, past ones included,
    most recent start date first.
    """
    q = select(Event).where(Event.organization_id == options.organization_id)

    if options.filter == MyEventsFilter.HOST:
        q = q.where(Event.responsible_user_id == options.user_id)
    else:
        q = q.where(Event.participants.any(EventParticipant.user_id == options.user_id))

    if options.search_string:
        pattern = f"%{options.search_string.strip()}%"
        q = q.where(or_(Event.name.ilike(pattern), Event.place.ilike(pattern)))

    offset, limit = _page_bounds(page)
    q = (
        q.options(selectinload(Event.participants))
        .order_by(desc(Event.start_date), asc(Event.id))
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(q)
    return [_event_to_list_item(e, options.user_id) for e in result.scalars().all()]


async def get_event_options(
    db: AsyncSession, event_id: str, user_org: UserAndOrganization
) -> EventOptions:
    async def load() -> dict | None:
        q = (
            select(Event)
            .where(_organization_event(event_id, user_org.organization_id))
            .options(selectinload(Event.options))
        )
        result = await db.execute(q)
        event = result.scalar_one_or_none()
        if event is None:
            return None
        return {
            "event_id": event.id,
            "max_choices": event.max_choices,
            "options": [
                {"id": o.id, "option": o.option} for o in sorted(event.options, key=lambda o: o.id)
            ],
        }

    data = await cache.get_or_load(
        cache.event_options_key(event_id, user_org.organization_id),
        load,
        ttl=settings.CACHE_TTL_EVENT_OPTIONS,
    )
    if data is None:
        raise NotFoundError(error_codes.EVENT_DOES_NOT_EXIST, f"Event {event_id} does not exist")
    return EventOptions(**data)


async def load_event_for_details(
    db: AsyncSession, event_id: str, organization_id: int, populate_existing: bool = False
) -> Event | None:
    """
    Return the event with everything ``get_event_details`` renders.

    Pass *populate_existing* after a write in the same session so
    collections already in the identity map are refreshed.
    """
    q = (
        select(Event)
        .where(_organization_event(event_id, organization_id))
        .options(
            joinedload(Event.responsible_user),
            selectinload(Event.offices),
            selectinload(Event.options),
            selectinload(Event.participants).joinedload(EventParticipant.user),
            selectinload(Event.participants).selectinload(EventParticipant.options),
        )
    )
    if populate_existing:
        q = q.execution_options(populate_existing=True)
    result = await db.execute(q)
    return result.unique().scalar_one_or_none()


async def get_event_details(
    db: AsyncSession, event_id: str, user_org: UserAndOrganization
) -> EventDetails:
    event = await load_event_for_details(db, event_id, user_org.organization_id)
    if event is None:
        raise NotFoundError(error_codes.EVENT_DOES_NOT_EXIST, f"Event {event_id} does not exist")
    return event_to_details(event, user_org.user_id)


def event_to_details(event: Event, user_id: int) -> EventDetails:
    statuses = [p.attend_status for p in event.participants]
    option_counts: dict[int, int] = {}
    for participant in event.participants:
        for option in participant.options:
            option_counts[option.id] = option_counts.get(option.id, 0) + 1

    going_count = statuses.count(AttendingStatus.ATTENDING)
    host = event.responsible_user

    return EventDetails(
        id=event.id,
        name=event.name,
        description=event.description,
        image_name=event.image_name,
        location=event.place,
        start_date=event.start_date,
        end_date=event.end_date,
        registration_deadline=event.registration_deadline,
        allow_maybe_going=event.allow_maybe_going,
        allow_not_going=event.allow_not_going,
        offices_name=sorted(o.name for o in event.offices),
        is_for_all_offices=not event.offices,
        is_pinned=event.is_pinned,
        max_participants=event.max_participants,
        max_options=event.max_choices,
        host_user_id=event.responsible_user_id,
        host_user_full_name=host.full_name if host else "",
        is_full=going_count >= event.max_participants,
        participating_status=_participating_status(event, user_id),
        wall_id=event.wall_id,
        options=[
            {"id": o.id, "option": o.option, "participants_count": option_counts.get(o.id, 0)}
            for o in sorted(event.options, key=lambda o: o.id)
        ],
        participants=[
            {
                "user_id": p.user_id,
                "full_name": p.user.full_name if p.user else "",
                "attend_status": p.attend_status,
            }
            for p in sorted(event.participants, key=lambda p: p.id)
        ],
        going_count=going_count,
        maybe_going_count=statuses.count(AttendingStatus.MAYBE_ATTENDING),
        not_going_count=statuses.count(AttendingStatus.NOT_ATTENDING),
    )
