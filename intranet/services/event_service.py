"""
Event service — event creation and participation.

Rules live in ``EventValidationService``; this module loads the state the
rules need, applies them in order and persists the result.  Reads are in
``event_listing_service``.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.cache import cache
from intranet.enums import AttendingStatus, WallType
from intranet.models import Event, EventOption, EventParticipant, EventType, Office, Wall
from intranet.schemas import (
    EventCreate,
    EventDetails,
    EventJoin,
    EventTypeCreate,
    UserAndOrganization,
)
from intranet.services.event_listing_service import event_to_details, load_event_for_details
from intranet.services.event_validation_service import EventValidationService

logger = logging.getLogger(__name__)


def _event_type_to_dict(event_type: EventType) -> dict:
    return {
        "id": event_type.id,
        "organization_id": event_type.organization_id,
        "name": event_type.name,
        "is_single_join": event_type.is_single_join,
        "is_shown_with_main_events": event_type.is_shown_with_main_events,
    }


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

async def create_event_type(db: AsyncSession, organization_id: int, data: EventTypeCreate) -> dict:
    event_type = EventType(
        organization_id=organization_id,
        name=data.name,
        is_single_join=data.is_single_join,
        is_shown_with_main_events=data.is_shown_with_main_events,
    )
    db.add(event_type)
    await db.flush()
    return _event_type_to_dict(event_type)


async def get_event_types(db: AsyncSession, organization_id: int) -> list[dict]:
    q = select(EventType).where(EventType.organization_id == organization_id).order_by(EventType.name)
    result = await db.execute(q)
    return [_event_type_to_dict(t) for t in result.scalars().all()]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

async def create_event(
    db: AsyncSession,
    data: EventCreate,
    user_org: UserAndOrganization,
    validation: EventValidationService,
) -> EventDetails:
    """
    Create an event together with its own events wall and options.

    The registration deadline defaults to the start date.  The caller is
    the host unless ``responsible_user_id`` names someone else.
    """
    registration_deadline = data.registration_deadline or data.start_date

    validation.check_if_start_date_is_greater_than_end_date(data.start_date, data.end_date)
    validation.check_if_registration_deadline_exceeds_start_date(
        registration_deadline, data.start_date
    )
    validation.check_if_registration_deadline_is_expired(registration_deadline)
    validation.check_if_max_choices_is_valid(data.max_choices, data.options)

    result = await db.execute(
        select(EventType).where(
            EventType.id == data.type_id,
            EventType.organization_id == user_org.organization_id,
        )
    )
    validation.check_if_event_type_exists(result.scalar_one_or_none())

    offices: list[Office] = []
    if data.office_ids:
        result = await db.execute(
            select(Office).where(
                Office.id.in_(data.office_ids),
                Office.organization_id == user_org.organization_id,
            )
        )
        offices = list(result.scalars().all())

    wall = Wall(organization_id=user_org.organization_id, name=data.name, type=WallType.EVENTS.value)
    db.add(wall)
    await db.flush()

    event = Event(
        organization_id=user_org.organization_id,
        event_type_id=data.type_id,
        responsible_user_id=data.responsible_user_id or user_org.user_id,
        wall_id=wall.id,
        name=data.name,
        description=data.description,
        place=data.place,
        image_name=data.image_name,
        start_date=data.start_date,
        end_date=data.end_date,
        registration_deadline=registration_deadline,
        max_participants=data.max_participants,
        max_choices=data.max_choices if data.options else 0,
        allow_maybe_going=data.allow_maybe_going,
        allow_not_going=data.allow_not_going,
        is_pinned=data.is_pinned,
    )
    event.offices = offices
    event.options = [EventOption(option=text) for text in data.options]
    db.add(event)
    await db.flush()
    logger.info("Event %s created in organization %s", event.id, user_org.organization_id)

    created = await load_event_for_details(
        db, event.id, user_org.organization_id, populate_existing=True
    )
    return event_to_details(created, user_org.user_id)


async def join_event(
    db: AsyncSession,
    event_id: str,
    user_org: UserAndOrganization,
    data: EventJoin,
    validation: EventValidationService,
) -> EventDetails:
    """
    Register the caller for an event, or change an existing registration.

    Attending needs a free place and a valid option choice; "maybe" and
    "not going" are only accepted when the event allows them.
    """
    event = await load_event_for_details(db, event_id, user_org.organization_id)
    validation.check_if_event_exists(event)
    validation.check_if_registration_deadline_is_expired(event.registration_deadline)
    validation.check_if_attend_status_is_allowed(data.attend_status, event)

    existing = next((p for p in event.participants if p.user_id == user_org.user_id), None)

    chosen_options: list[EventOption] = []
    if data.attend_status == AttendingStatus.ATTENDING:
        others_attending = sum(
            1
            for p in event.participants
            if p.attend_status == AttendingStatus.ATTENDING and p.user_id != user_org.user_id
        )
        validation.check_if_event_is_full(others_attending, event.max_participants)
        validation.check_if_options_are_valid(event, data.chosen_option_ids)
        chosen_options = [o for o in event.options if o.id in set(data.chosen_option_ids)]

    if existing is not None:
        existing.attend_status = data.attend_status.value
        existing.options = chosen_options
    else:
        participant = EventParticipant(
            event_id=event.id,
            user_id=user_org.user_id,
            attend_status=data.attend_status.value,
        )
        participant.options = chosen_options
        db.add(participant)
    await db.flush()

    updated = await load_event_for_details(
        db, event_id, user_org.organization_id, populate_existing=True
    )
    return event_to_details(updated, user_org.user_id)


async def leave_event(db: AsyncSession, event_id: str, user_org: UserAndOrganization) -> bool:
    """Drop the caller's registration; False when there was none."""
    q = (
        select(EventParticipant)
        .join(Event, Event.id == EventParticipant.event_id)
        .where(
            EventParticipant.event_id == event_id,
            EventParticipant.user_id == user_org.user_id,
            Event.organization_id == user_org.organization_id,
        )
    )
    result = await db.execute(q)
    participant = result.scalar_one_or_none()
    if participant is None:
        return False
    await db.delete(participant)
    await db.flush()
    return True


async def delete_event(db: AsyncSession, event_id: str, user_org: UserAndOrganization) -> bool:
    """
    Delete the event together with its events wall.  Options, participants
    and the wall's posts go with them through ``ON DELETE CASCADE``.
    """
    result = await db.execute(
        select(Event).where(
            Event.id == event_id, Event.organization_id == user_org.organization_id
        )
    )
    event = result.scalar_one_or_none()
    if event is None:
        return False

    wall = await db.get(Wall, event.wall_id) if event.wall_id is not None else None
    await db.delete(event)
    if wall is not None:
        await db.delete(wall)
    await db.flush()
    await cache.invalidate_event(event_id)
    logger.info("Event %s deleted with wall %s", event_id, event.wall_id)
    return True
