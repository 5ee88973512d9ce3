"""
Event validation service — guard clauses for event rules.

Every check either returns None or raises ``EventError`` whose message is
the error code.  Time-dependent checks read the injected clock so tests
can pin "now".
"""
from datetime import datetime

from intranet import error_codes
from intranet.clock import SystemClock, as_utc
from intranet.enums import AttendingStatus
from intranet.exceptions import EventError
from intranet.models import Event, EventType


class EventValidationService:
    def __init__(self, clock: SystemClock) -> None:
        self._clock = clock

    def check_if_registration_deadline_exceeds_start_date(
        self, registration_deadline: datetime, start_date: datetime
    ) -> None:
        # A deadline equal to the start date is allowed.
        if as_utc(registration_deadline) > as_utc(start_date):
            raise EventError(error_codes.EVENT_REGISTRATION_DEADLINE_GREATER_THAN_START_DATE)

    def check_if_registration_deadline_is_expired(self, registration_deadline: datetime) -> None:
        if as_utc(registration_deadline) < as_utc(self._clock.utc_now()):
            raise EventError(error_codes.EVENT_REGISTRATION_DEADLINE_IS_EXPIRED)

    def check_if_start_date_is_greater_than_end_date(
        self, start_date: datetime, end_date: datetime
    ) -> None:
        if as_utc(start_date) > as_utc(end_date):
            raise EventError(error_codes.EVENT_START_DATE_GREATER_THAN_END_DATE)

    def check_if_event_exists(self, event: Event | None) -> None:
        if event is None:
            raise EventError(error_codes.EVENT_DOES_NOT_EXIST)

    def check_if_event_type_exists(self, event_type: EventType | None) -> None:
        if event_type is None:
            raise EventError(error_codes.EVENT_TYPE_DOES_NOT_EXIST)

    def check_if_event_is_full(self, attending_count: int, max_participants: int) -> None:
        if attending_count >= max_participants:
            raise EventError(error_codes.EVENT_IS_FULL)

    def check_if_attend_status_is_allowed(self, attend_status: AttendingStatus, event: Event) -> None:
        if attend_status == AttendingStatus.IDLE:
            raise EventError(error_codes.EVENT_ATTEND_STATUS_NOT_ALLOWED)
        if attend_status == AttendingStatus.MAYBE_ATTENDING and not event.allow_maybe_going:
            raise EventError(error_codes.EVENT_ATTEND_STATUS_NOT_ALLOWED)
        if attend_status == AttendingStatus.NOT_ATTENDING and not event.allow_not_going:
            raise EventError(error_codes.EVENT_ATTEND_STATUS_NOT_ALLOWED)

    def check_if_options_are_valid(self, event: Event, chosen_option_ids: list[int]) -> None:
        """
        An attendee of an event with options must pick between one and
        ``max_choices`` of the event's own options.  *event* needs its
        ``options`` loaded.
        """
        if not event.options:
            return
        if not chosen_option_ids:
            raise EventError(error_codes.EVENT_NEEDS_OPTIONS)
        if len(set(chosen_option_ids)) > event.max_choices:
            raise EventError(error_codes.EVENT_TOO_MANY_CHOICES)
        known = {option.id for option in event.options}
        if not set(chosen_option_ids) <= known:
            raise EventError(error_codes.EVENT_OPTION_DOES_NOT_EXIST)

    def check_if_max_choices_is_valid(self, max_choices: int, options: list[str]) -> None:
        if not options:
            return
        if max_choices < 1 or max_choices > len(options):
            raise EventError(error_codes.EVENT_INVALID_MAX_CHOICES)
