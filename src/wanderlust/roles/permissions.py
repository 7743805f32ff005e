"""Role -> capability table and free-tier limits.

The table is an immutable value built once from settings and handed to the
services that need it. Capability sets grow with rank:

    free  <  pro  <  moderator (+ moderate)  <  admin (+ manage_roles, admin_panel)

A missing role is treated as ``free``; unknown capability names are simply absent.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType

from wanderlust.config import Settings, get_settings
from wanderlust.db.enums import Role

BASIC = "basic"
UNLIMITED_FOLLOWS = "unlimited_follows"
UNLIMITED_SHARES = "unlimited_shares"
FULL_FEED = "full_feed"
CUSTOM_URLS = "custom_urls"
ANALYTICS = "analytics"
PRO_BADGE = "pro_badge"
HIDE_BRANDING = "hide_branding"
MODERATE = "moderate"
MANAGE_ROLES = "manage_roles"
ADMIN_PANEL = "admin_panel"

_FREE = (BASIC,)
_PRO = (*_FREE, UNLIMITED_FOLLOWS, UNLIMITED_SHARES, FULL_FEED, CUSTOM_URLS, ANALYTICS, PRO_BADGE, HIDE_BRANDING)
_MODERATOR = (*_PRO, MODERATE)
_ADMIN = (*_MODERATOR, MANAGE_ROLES, ADMIN_PANEL)

ROLE_CAPABILITIES: Mapping[Role, tuple[str, ...]] = MappingProxyType({
    Role.FREE: _FREE,
    Role.PRO: _PRO,
    Role.MODERATOR: _MODERATOR,
    Role.ADMIN: _ADMIN,
})


@dataclass(frozen=True)
class FreeLimits:
    """Caps applied to callers lacking the matching unlimited_* / full_feed capability."""

    max_follows: int = 50
    max_shared_trips: int = 3
    feed_history_days: int = 7


@dataclass(frozen=True)
class RolePermissionTable:
    """Static role -> capability mapping plus free-tier limits."""

    capabilities: Mapping[Role, frozenset[str]]
    limits: FreeLimits = field(default_factory=FreeLimits)

    @staticmethod
    def resolve_role(role: Role | str | None) -> Role:
        """Normalise a stored or requested role; absent means free."""
        if not role:
            return Role.FREE
        return Role(role)

    def capabilities_of(self, role: Role | str | None) -> frozenset[str]:
        try:
            resolved = self.resolve_role(role)
        except ValueError:
            return frozenset()
        return self.capabilities.get(resolved, frozenset())

    def has_capability(self, role: Role | str | None, capability: str) -> bool:
        return capability in self.capabilities_of(role)

    def ordered_capabilities(self, role: Role | str | None) -> list[str]:
        """Capabilities in declaration order, for the role summary read."""
        caps = self.capabilities_of(role)
        return [cap for cap in ROLE_CAPABILITIES[Role.ADMIN] if cap in caps] or [BASIC]


def build_permission_table(settings: Settings | None = None) -> RolePermissionTable:
    """Construct the table from settings (free-tier limits are configurable)."""
    settings = settings or get_settings()
    return RolePermissionTable(
        capabilities=MappingProxyType({role: frozenset(caps) for role, caps in ROLE_CAPABILITIES.items()}),
        limits=FreeLimits(
            max_follows=settings.free_max_follows,
            max_shared_trips=settings.free_max_shared_trips,
            feed_history_days=settings.free_feed_history_days,
        ),
    )


@lru_cache
def get_permission_table() -> RolePermissionTable:
    """Process-wide table, built on first use (FastAPI dependency)."""
    return build_permission_table()
