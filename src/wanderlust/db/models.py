"""ORM models for users, the follow graph and the activity log."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wanderlust.db.base import Base, BigIntPK, JSONType, UTCDateTime
from wanderlust.db.enums import ProfileVisibility, Role


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """A traveler. Created on first identity sync, never hard-deleted."""

    __tablename__ = "users"
    __table_args__ = (Index("idx_users_role", "role"),)

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    auth_subject: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True, index=True)
    display_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(String(500), nullable=True)
    home_location: Mapped[str | None] = mapped_column(String(128), nullable=True)
    travel_styles: Mapped[list[str]] = mapped_column(JSONType, default=list)
    languages: Mapped[list[str]] = mapped_column(JSONType, default=list)
    profile_visibility: Mapped[str | None] = mapped_column(
        String(16), nullable=True, default=ProfileVisibility.PUBLIC.value
    )
    role: Mapped[str | None] = mapped_column(String(16), nullable=True, default=Role.FREE.value)
    role_updated_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    @property
    def effective_role(self) -> Role:
        """Role with the `free` default applied."""
        return Role(self.role) if self.role else Role.FREE

    @property
    def visibility(self) -> ProfileVisibility:
        """Profile visibility with the `public` default applied."""
        return ProfileVisibility(self.profile_visibility) if self.profile_visibility else ProfileVisibility.PUBLIC


# ---------------------------------------------------------------------------
# Follow graph
# ---------------------------------------------------------------------------


class Follow(Base):
    """Directed edge: follower -> following."""

    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="follows_pair_key"),
        CheckConstraint("follower_id <> following_id", name="follows_no_self_follow"),
        Index("idx_follows_follower", "follower_id"),
        Index("idx_follows_following", "following_id"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    follower_id: Mapped[int] = mapped_column(BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    following_id: Mapped[int] = mapped_column(BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    follower: Mapped[User] = relationship("User", foreign_keys=[follower_id])
    following: Mapped[User] = relationship("User", foreign_keys=[following_id])


# ---------------------------------------------------------------------------
# Activity log
# ---------------------------------------------------------------------------


class ActivityRecord(Base):
    """Append-only record of a trackable user action."""

    __tablename__ = "activity_feed"
    __table_args__ = (Index("idx_activity_user_created", "user_id", "created_at"),)

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    reference_id: Mapped[str] = mapped_column(String(128), nullable=False)
    activity_metadata: Mapped[dict[str, Any]] = mapped_column("metadata", JSONType, default=dict)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    user: Mapped[User] = relationship("User")
