from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from intranet.database import Base
from intranet.enums import AttendingStatus, LotteryStatus, WallType

# ---------------------------------------------------------------------------
# Association tables
# ---------------------------------------------------------------------------
event_offices = Table(
    "event_offices",
    Base.metadata,
    Column("event_id", String(36), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("office_id", Integer, ForeignKey("offices.id", ondelete="CASCADE"), primary_key=True),
)

participant_options = Table(
    "event_participant_options",
    Base.metadata,
    Column(
        "participant_id",
        Integer,
        ForeignKey("event_participants.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("option_id", Integer, ForeignKey("event_options.id", ondelete="CASCADE"), primary_key=True),
)


def _new_event_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Organization
# ---------------------------------------------------------------------------
class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    short_name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)

    offices: Mapped[List["Office"]] = relationship("Office", back_populates="organization", lazy="noload")


class Office(Base):
    __tablename__ = "offices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="offices", lazy="noload"
    )


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    picture_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Notification preferences
    mention_email_notifications: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    following_posts_email_notifications: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


# ---------------------------------------------------------------------------
# Wall / Post / Comment
# ---------------------------------------------------------------------------
class Wall(Base):
    __tablename__ = "walls"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    type: Mapped[str] = mapped_column(String(20), default=WallType.USER_CREATED.value, nullable=False)

    posts: Mapped[List["Post"]] = relationship(
        "Post", back_populates="wall", lazy="noload", passive_deletes=True
    )


class Post(Base):
    __tablename__ = "posts"

    __table_args__ = (
        # Wall feed sorted by date
        Index("ix_posts_wall_id_created_at", "wall_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    message_body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    wall_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("walls.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    wall: Mapped["Wall"] = relationship("Wall", back_populates="posts", lazy="noload")
    author: Mapped["User"] = relationship("User", lazy="noload")
    comments: Mapped[List["Comment"]] = relationship("Comment", back_populates="post", lazy="noload")
    watchers: Mapped[List["PostWatcher"]] = relationship(
        "PostWatcher", back_populates="post", lazy="noload", cascade="all, delete-orphan"
    )


class PostWatcher(Base):
    __tablename__ = "post_watchers"

    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )

    post: Mapped["Post"] = relationship("Post", back_populates="watchers", lazy="noload")
    user: Mapped["User"] = relationship("User", lazy="noload")


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    message_body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    post: Mapped["Post"] = relationship("Post", back_populates="comments", lazy="noload")
    author: Mapped["User"] = relationship("User", lazy="noload")


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------
class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    wall_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("walls.id", ondelete="CASCADE"), nullable=False, index=True
    )


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
class EventType(Base):
    __tablename__ = "event_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_single_join: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_shown_with_main_events: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Event(Base):
    __tablename__ = "events"

    __table_args__ = (
        # Organization calendar sorted by date
        Index("ix_events_organization_id_start_date", "organization_id", "start_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_event_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    place: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    image_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    registration_deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False)
    max_choices: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    allow_maybe_going: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    allow_not_going: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    event_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("event_types.id"), nullable=False, index=True
    )
    responsible_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    wall_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("walls.id", ondelete="SET NULL"), nullable=True, index=True
    )

    event_type: Mapped["EventType"] = relationship("EventType", lazy="noload")
    responsible_user: Mapped["User"] = relationship("User", lazy="noload")
    offices: Mapped[List["Office"]] = relationship("Office", secondary=event_offices, lazy="noload")
    options: Mapped[List["EventOption"]] = relationship(
        "EventOption", back_populates="event", lazy="noload", cascade="all, delete-orphan",
        passive_deletes=True,
    )
    participants: Mapped[List["EventParticipant"]] = relationship(
        "EventParticipant", back_populates="event", lazy="noload", cascade="all, delete-orphan",
        passive_deletes=True,
    )


class EventOption(Base):
    __tablename__ = "event_options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    option: Mapped[str] = mapped_column(String(200), nullable=False)
    event_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )

    event: Mapped["Event"] = relationship("Event", back_populates="options", lazy="noload")


class EventParticipant(Base):
    __tablename__ = "event_participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    attend_status: Mapped[int] = mapped_column(
        Integer, default=AttendingStatus.ATTENDING.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    event_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    event: Mapped["Event"] = relationship("Event", back_populates="participants", lazy="noload")
    user: Mapped["User"] = relationship("User", lazy="noload")
    options: Mapped[List["EventOption"]] = relationship(
        "EventOption", secondary=participant_options, lazy="noload"
    )


# ---------------------------------------------------------------------------
# Lottery
# ---------------------------------------------------------------------------
class Lottery(Base):
    __tablename__ = "lotteries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    entry_fee: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[int] = mapped_column(Integer, default=LotteryStatus.DRAFTED.value, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
