from enum import Enum, IntEnum


class WallType(str, Enum):
    MAIN = "main"
    USER_CREATED = "user_created"
    EVENTS = "events"
    PROJECT = "project"


class AttendingStatus(IntEnum):
    IDLE = 0
    ATTENDING = 1
    MAYBE_ATTENDING = 2
    NOT_ATTENDING = 3


class MyEventsFilter(str, Enum):
    HOST = "host"
    PARTICIPANT = "participant"


class LotteryStatus(IntEnum):
    DRAFTED = 1
    STARTED = 2
    DELETED = 3
    ENDED = 4
