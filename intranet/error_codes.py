# Machine-readable error codes returned in the ``code`` field of error
# responses.  Clients match on these, so values must stay stable.

# Generic
CONTENT_DOES_NOT_EXIST = "ContentDoesNotExist"
USER_DOES_NOT_EXIST = "UserDoesNotExist"
ORGANIZATION_DOES_NOT_EXIST = "OrganizationDoesNotExist"

# Events
EVENT_DOES_NOT_EXIST = "EventDoesNotExist"
EVENT_TYPE_DOES_NOT_EXIST = "EventTypeDoesNotExist"
EVENT_REGISTRATION_DEADLINE_GREATER_THAN_START_DATE = "EventRegistrationDeadlineGreaterThanStartDate"
EVENT_REGISTRATION_DEADLINE_IS_EXPIRED = "EventRegistrationDeadlineIsExpired"
EVENT_START_DATE_GREATER_THAN_END_DATE = "EventStartDateGreaterThanEndDate"
EVENT_IS_FULL = "EventIsFull"
EVENT_ATTEND_STATUS_NOT_ALLOWED = "EventAttendStatusNotAllowed"
EVENT_NEEDS_OPTIONS = "EventNeedsOptions"
EVENT_TOO_MANY_CHOICES = "EventTooManyChoices"
EVENT_OPTION_DOES_NOT_EXIST = "EventOptionDoesNotExist"
EVENT_INVALID_MAX_CHOICES = "EventInvalidMaxChoices"

# Lotteries
LOTTERY_END_DATE_IN_PAST = "LotteryEndDateInPast"
LOTTERY_INVALID_ENTRY_FEE = "LotteryInvalidEntryFee"
LOTTERY_INVALID_STATUS = "LotteryInvalidStatus"
LOTTERY_DESCRIPTION_TOO_LONG = "LotteryDescriptionTooLong"
LOTTERY_TITLE_REQUIRED = "LotteryTitleRequired"
