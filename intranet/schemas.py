from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

from intranet.enums import AttendingStatus, LotteryStatus, MyEventsFilter, WallType


# --- Organization / Office ---

class OrganizationCreate(BaseModel):
    name: str = Field(max_length=150)
    short_name: str = Field(max_length=50)


class OrganizationResponse(OrganizationCreate):
    id: int
    model_config = ConfigDict(from_attributes=True)


class OfficeCreate(BaseModel):
    name: str = Field(max_length=150)


class OfficeResponse(OfficeCreate):
    id: int
    organization_id: int
    model_config = ConfigDict(from_attributes=True)


# --- User ---

class UserBase(BaseModel):
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=255)
    picture_id: str | None = None


class UserCreate(UserBase):
    organization_id: int


class UserResponse(UserBase):
    id: int
    organization_id: int
    full_name: str
    mention_email_notifications: bool
    following_posts_email_notifications: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class NotificationSettingsUpdate(BaseModel):
    mention_email_notifications: bool | None = None
    following_posts_email_notifications: bool | None = None


class UserAndOrganization(BaseModel):
    """Identity of the caller, taken from request headers."""

    organization_id: int
    user_id: int


# --- Wall / Post / Comment ---

class WallCreate(BaseModel):
    organization_id: int
    name: str = Field(max_length=150)
    type: WallType = WallType.USER_CREATED


class WallResponse(WallCreate):
    id: int
    model_config = ConfigDict(from_attributes=True)


class PostCreate(BaseModel):
    message_body: str = Field(min_length=1)
    author_id: int


class PostResponse(BaseModel):
    id: int
    wall_id: int
    author_id: int
    message_body: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    message_body: str = Field(min_length=1)
    author_id: int
    mentioned_user_ids: list[int] = []


class CommentResponse(BaseModel):
    id: int
    post_id: int
    author_id: int
    message_body: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CommentCreated(BaseModel):
    """Payload describing a freshly created comment, consumed by notifications."""

    comment_id: int
    post_id: int
    wall_id: int
    wall_type: WallType
    comment_creator: int
    mentioned_user_ids: list[int] = []


# --- Events ---

class EventTypeCreate(BaseModel):
    name: str = Field(max_length=100)
    is_single_join: bool = False
    is_shown_with_main_events: bool = True


class EventTypeResponse(EventTypeCreate):
    id: int
    organization_id: int
    model_config = ConfigDict(from_attributes=True)


class EventCreate(BaseModel):
    name: str = Field(max_length=200)
    description: str | None = None
    place: str | None = Field(None, max_length=200)
    image_name: str | None = None
    type_id: int
    start_date: datetime
    end_date: datetime
    registration_deadline: datetime | None = None
    max_participants: int = Field(ge=1)
    max_choices: int = Field(0, ge=0)
    responsible_user_id: int | None = None
    office_ids: list[int] = []
    options: list[str] = []
    allow_maybe_going: bool = True
    allow_not_going: bool = True
    is_pinned: bool = False


class EventJoin(BaseModel):
    attend_status: AttendingStatus = AttendingStatus.ATTENDING
    chosen_option_ids: list[int] = []


class EventsListingFilter(BaseModel):
    type_id: int | None = None
    office_id: int | None = None
    is_only_main_events: bool = False
    start_date: datetime | None = None
    end_date: datetime | None = None
    page: int = Field(1, ge=1)


class MyEventsOptions(BaseModel):
    organization_id: int
    user_id: int
    search_string: str | None = None
    filter: MyEventsFilter = MyEventsFilter.PARTICIPANT


class EventListItem(BaseModel):
    id: str
    name: str
    place: str | None
    image_name: str | None
    start_date: datetime
    end_date: datetime
    registration_deadline: datetime
    type_id: int
    is_pinned: bool
    max_participants: int
    participants_count: int
    participating_status: int
    is_creator: bool


class EventOptionResponse(BaseModel):
    id: int
    option: str


class EventOptions(BaseModel):
    event_id: str
    max_choices: int
    options: list[EventOptionResponse]


class EventDetailsOption(EventOptionResponse):
    participants_count: int


class EventDetailsParticipant(BaseModel):
    user_id: int
    full_name: str
    attend_status: int


class EventDetails(BaseModel):
    id: str
    name: str
    description: str | None
    image_name: str | None
    location: str | None
    start_date: datetime
    end_date: datetime
    registration_deadline: datetime
    allow_maybe_going: bool
    allow_not_going: bool
    offices_name: list[str]
    is_for_all_offices: bool
    is_pinned: bool
    max_participants: int
    max_options: int
    host_user_id: int
    host_user_full_name: str
    is_full: bool
    participating_status: int
    wall_id: int | None
    options: list[EventDetailsOption]
    participants: list[EventDetailsParticipant]
    going_count: int
    maybe_going_count: int
    not_going_count: int


# --- Lottery ---

class LotteryCreate(BaseModel):
    title: str = Field(max_length=200)
    description: str | None = None
    end_date: datetime
    entry_fee: int
    status: LotteryStatus = LotteryStatus.DRAFTED


class LotteryResponse(BaseModel):
    id: int
    organization_id: int
    title: str
    description: str | None
    end_date: datetime
    entry_fee: int
    status: int
    model_config = ConfigDict(from_attributes=True)


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_users: int
    total_posts: int
    total_comments: int
    total_events: int
    avg_comments_per_post: float
    cache_info: dict = {}
