"""Unit tests for the role -> capability table."""

from __future__ import annotations

import pytest

from wanderlust.config import Settings
from wanderlust.db.enums import Role
from wanderlust.roles.permissions import (
    ADMIN_PANEL,
    BASIC,
    FULL_FEED,
    MANAGE_ROLES,
    MODERATE,
    ROLE_CAPABILITIES,
    UNLIMITED_FOLLOWS,
    build_permission_table,
)

RANKED = [Role.FREE, Role.PRO, Role.MODERATOR, Role.ADMIN]


@pytest.fixture
def table():
    return build_permission_table(Settings())


class TestRoleDefaulting:
    def test_missing_role_is_free(self, table):
        assert table.has_capability(None, BASIC)
        assert table.has_capability("", BASIC)
        assert not table.has_capability(None, FULL_FEED)

    def test_free_has_basic_only(self, table):
        assert table.has_capability("free", BASIC)
        assert not table.has_capability("free", FULL_FEED)
        assert not table.has_capability(Role.FREE, UNLIMITED_FOLLOWS)

    def test_admin_has_basic(self, table):
        assert table.has_capability("admin", BASIC)

    def test_unknown_role_has_nothing(self, table):
        assert not table.has_capability("superuser", BASIC)

    def test_unknown_capability_is_absent(self, table):
        assert not table.has_capability(Role.ADMIN, "time_travel")


class TestSuperset:
    @pytest.mark.parametrize("lower, higher", list(zip(RANKED, RANKED[1:])))
    def test_each_rank_contains_the_previous(self, table, lower, higher):
        assert table.capabilities_of(lower) <= table.capabilities_of(higher)
        assert table.capabilities_of(lower) != table.capabilities_of(higher)

    def test_staff_capabilities(self, table):
        assert MODERATE in table.capabilities_of(Role.MODERATOR)
        assert MANAGE_ROLES not in table.capabilities_of(Role.MODERATOR)
        assert {MANAGE_ROLES, ADMIN_PANEL} <= table.capabilities_of(Role.ADMIN)


class TestOrderedCapabilities:
    def test_free_summary(self, table):
        assert table.ordered_capabilities(None) == [BASIC]

    def test_admin_summary_in_declaration_order(self, table):
        assert table.ordered_capabilities(Role.ADMIN) == list(ROLE_CAPABILITIES[Role.ADMIN])


class TestLimits:
    def test_defaults(self, table):
        assert table.limits.max_follows == 50
        assert table.limits.max_shared_trips == 3
        assert table.limits.feed_history_days == 7

    def test_limits_from_settings(self):
        table = build_permission_table(Settings(free_max_follows=5, free_feed_history_days=3))
        assert table.limits.max_follows == 5
        assert table.limits.feed_history_days == 3

    def test_table_is_immutable(self, table):
        with pytest.raises(TypeError):
            table.capabilities[Role.FREE] = frozenset({FULL_FEED})  # type: ignore[index]
