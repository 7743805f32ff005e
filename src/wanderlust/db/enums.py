"""String enums shared by models, services and schemas."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    FREE = "free"
    PRO = "pro"
    MODERATOR = "moderator"
    ADMIN = "admin"


class ProfileVisibility(str, Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class ActivityType(str, Enum):
    TRIP_CREATED = "trip_created"
    PLACE_VISITED = "place_visited"
    JOURNAL_POSTED = "journal_posted"
    PLACE_ADDED = "place_added"
