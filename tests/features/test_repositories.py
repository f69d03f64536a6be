"""Tests for the asyncpg repositories against a mocked connection."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import asyncpg
import pytest

from neo_rbac.config.constants import AssignmentStatus, GroupRole
from neo_rbac.core.exceptions import (
    DatabaseError,
    DatabaseUnavailableError,
    DuplicateRoleNameError,
    GroupMemberNotFoundError,
    LastAdminViolationError,
    LastOwnerViolationError,
    NotAMemberError,
    RoleInUseError,
    RoleNotFoundError,
)
from neo_rbac.features.database import database_error_handler
from neo_rbac.features.groups import AsyncPGGroupMemberRepository
from neo_rbac.features.memberships import AsyncPGAssignmentRepository, AsyncPGMembershipRepository
from neo_rbac.features.permissions import PERMISSION_CATALOG, AsyncPGPermissionRepository
from neo_rbac.features.roles import AsyncPGRoleRepository, Role

from ..fakes import mock_database

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
TENANT_ID = uuid4()


def role_row(role_id, slug="viewer", level=50):
    return {
        "id": role_id,
        "tenant_id": TENANT_ID,
        "name": slug.title(),
        "slug": slug,
        "description": None,
        "hierarchy_level": level,
        "is_system": False,
        "is_protected": False,
        "created_by": None,
        "created_at": NOW,
        "updated_at": NOW,
    }


@pytest.fixture
def conn():
    return AsyncMock()


class TestAsyncPGRoleRepository:
    """Test role persistence."""

    @pytest.fixture
    def repository(self, conn):
        return AsyncPGRoleRepository(mock_database(conn))

    @pytest.mark.asyncio
    async def test_get_by_id_loads_permission_keys(self, repository, conn):
        role_id = uuid4()
        conn.fetchrow.return_value = role_row(role_id)
        conn.fetch.return_value = [
            {"role_id": role_id, "key": "canViewUsers"},
            {"role_id": role_id, "key": "canViewRoles"},
        ]

        role = await repository.get_by_id(str(role_id), str(TENANT_ID))

        assert role.id == str(role_id)
        assert role.tenant_id == str(TENANT_ID)
        assert role.permission_keys == {"canViewUsers", "canViewRoles"}

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, repository, conn):
        conn.fetchrow.return_value = None

        assert await repository.get_by_id(str(uuid4()), str(TENANT_ID)) is None
        conn.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_permission_keys_union(self, repository, conn):
        first, second = uuid4(), uuid4()
        conn.fetch.return_value = [
            {"role_id": first, "key": "canViewUsers"},
            {"role_id": second, "key": "canViewUsers"},
            {"role_id": second, "key": "canManageNotifications"},
        ]

        keys = await repository.get_permission_keys([str(first), str(second), str(first)], str(TENANT_ID))

        assert keys == {"canViewUsers", "canManageNotifications"}

    @pytest.mark.asyncio
    async def test_get_permission_keys_without_roles(self, repository, conn):
        assert await repository.get_permission_keys([], str(TENANT_ID)) == frozenset()
        conn.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_writes_role_and_permissions(self, repository, conn):
        role_id = uuid4()
        conn.fetchrow.return_value = role_row(role_id, slug="support", level=60)
        role = Role(id=None, tenant_id=str(TENANT_ID), name="Support", slug="support", hierarchy_level=60)

        created = await repository.create(role, frozenset({"canManageNotifications"}))

        assert created.id == str(role_id)
        assert created.permission_keys == {"canManageNotifications"}
        insert_args = conn.execute.await_args[0]
        assert "INSERT INTO role_permissions" in insert_args[0]
        assert insert_args[4] == ["canManageNotifications"]

    @pytest.mark.asyncio
    async def test_create_duplicate_slug(self, repository, conn):
        conn.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key value")
        role = Role(id=None, tenant_id=str(TENANT_ID), name="Support", slug="support")

        with pytest.raises(DuplicateRoleNameError):
            await repository.create(role, frozenset())

    @pytest.mark.asyncio
    async def test_update_replaces_permissions(self, repository, conn):
        role_id = uuid4()
        conn.fetchrow.return_value = role_row(role_id)
        role = Role(id=str(role_id), tenant_id=str(TENANT_ID), name="Viewer", slug="viewer")

        updated = await repository.update(role, frozenset({"canViewRoles"}), granted_by="u-admin")

        statements = [call.args[0] for call in conn.execute.await_args_list]
        assert "DELETE FROM role_permissions" in statements[0]
        assert "INSERT INTO role_permissions" in statements[1]
        assert updated.permission_keys == {"canViewRoles"}

    @pytest.mark.asyncio
    async def test_update_to_empty_set_only_deletes(self, repository, conn):
        conn.fetchrow.return_value = role_row(uuid4())
        role = Role(id=str(uuid4()), tenant_id=str(TENANT_ID), name="Viewer", slug="viewer")

        updated = await repository.update(role, frozenset())

        assert conn.execute.await_count == 1
        assert updated.permission_keys == frozenset()

    @pytest.mark.asyncio
    async def test_update_missing_role(self, repository, conn):
        conn.fetchrow.return_value = None
        role = Role(id=str(uuid4()), tenant_id=str(TENANT_ID), name="Viewer", slug="viewer")

        with pytest.raises(RoleNotFoundError):
            await repository.update(role)

    @pytest.mark.asyncio
    async def test_delete_returns_revoked_users(self, repository, conn):
        user_a, user_b = uuid4(), uuid4()
        conn.fetchval.return_value = 0
        conn.fetch.return_value = [{"user_id": user_b}, {"user_id": user_a}, {"user_id": user_b}]

        users = await repository.delete(str(uuid4()), str(TENANT_ID), "u-admin", NOW)

        assert users == sorted([str(user_a), str(user_b)])
        assert conn.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_delete_in_use_role_rolls_back(self, repository, conn):
        conn.fetchval.return_value = 2
        database = repository.database

        with pytest.raises(RoleInUseError) as exc_info:
            await repository.delete(str(uuid4()), str(TENANT_ID), "u-admin", NOW)

        assert exc_info.value.details["member_count"] == 2
        database.transaction.assert_called_once()
        conn.fetch.assert_not_awaited()
        conn.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_missing_role(self, repository, conn):
        conn.fetchrow.return_value = None

        with pytest.raises(RoleNotFoundError):
            await repository.delete(str(uuid4()), str(TENANT_ID), "u-admin", NOW)

        conn.fetchval.assert_not_awaited()


class TestAsyncPGMembershipRepositories:
    """Test membership and assignment persistence."""

    @pytest.mark.asyncio
    async def test_get_active_membership(self, conn):
        conn.fetchrow.return_value = {
            "id": uuid4(),
            "tenant_id": TENANT_ID,
            "user_id": "user-1",
            "primary_role_id": uuid4(),
            "is_owner": True,
            "status": "active",
            "joined_at": NOW,
        }

        membership = await AsyncPGMembershipRepository(mock_database(conn)).get_active("user-1", str(TENANT_ID))

        assert membership.is_owner is True
        assert membership.is_active is True

    @pytest.mark.asyncio
    async def test_count_active_owners(self, conn):
        conn.fetchval.return_value = 2

        assert await AsyncPGMembershipRepository(mock_database(conn)).count_active_owners(str(TENANT_ID)) == 2

    @pytest.mark.asyncio
    async def test_update_primary_role_keeps_last_owner(self, conn):
        conn.fetchrow.return_value = {"id": uuid4()}
        conn.fetch.return_value = [{"user_id": "user-1"}]
        database = mock_database(conn)

        with pytest.raises(LastOwnerViolationError):
            await AsyncPGMembershipRepository(database).update_primary_role("user-1", str(TENANT_ID), "r1", False)

        database.transaction.assert_called_once()
        assert conn.fetchrow.await_count == 1

    @pytest.mark.asyncio
    async def test_update_primary_role_with_co_owner(self, conn):
        conn.fetchrow.return_value = {"id": uuid4()}
        conn.fetch.return_value = [{"user_id": "user-1"}, {"user_id": "user-2"}]

        await AsyncPGMembershipRepository(mock_database(conn)).update_primary_role(
            "user-1", str(TENANT_ID), "r1", False
        )

        assert conn.fetchrow.await_count == 2
        assert conn.fetchrow.await_args[0][1:] == ("user-1", str(TENANT_ID), "r1", False)

    @pytest.mark.asyncio
    async def test_update_primary_role_to_owner_skips_owner_lock(self, conn):
        conn.fetchrow.return_value = {"id": uuid4()}

        await AsyncPGMembershipRepository(mock_database(conn)).update_primary_role(
            "user-1", str(TENANT_ID), "r-owner", True
        )

        conn.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_primary_role_deleted_role(self, conn):
        conn.fetchrow.return_value = None

        with pytest.raises(RoleNotFoundError):
            await AsyncPGMembershipRepository(mock_database(conn)).update_primary_role(
                "user-1", str(TENANT_ID), "r1", False
            )

        conn.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_primary_role_missing_membership(self, conn):
        conn.fetchrow.side_effect = [{"id": uuid4()}, None]
        conn.fetch.return_value = []

        with pytest.raises(NotAMemberError):
            await AsyncPGMembershipRepository(mock_database(conn)).update_primary_role(
                "user-1", str(TENANT_ID), "r1", False
            )

    @pytest.mark.asyncio
    async def test_mark_expired_returns_pairs(self, conn):
        conn.fetch.return_value = [{"user_id": "user-1", "tenant_id": TENANT_ID}]

        pairs = await AsyncPGAssignmentRepository(mock_database(conn)).mark_expired(NOW)

        assert pairs == [("user-1", str(TENANT_ID))]
        assert conn.fetch.await_args[0][1] == NOW

    @pytest.mark.asyncio
    async def test_get_assignment_builds_entity(self, conn):
        conn.fetchrow.return_value = {
            "id": uuid4(),
            "tenant_id": TENANT_ID,
            "user_id": "user-1",
            "role_id": uuid4(),
            "status": "revoked",
            "expires_at": None,
            "reason": "cover",
            "assigned_by": uuid4(),
            "revoked_by": None,
            "revoked_at": NOW,
            "created_at": NOW,
        }

        assignment = await AsyncPGAssignmentRepository(mock_database(conn)).get("user-1", str(TENANT_ID), "r1")

        assert assignment.status == AssignmentStatus.REVOKED
        assert assignment.revoked_by is None
        assert isinstance(assignment.assigned_by, str)


class TestAsyncPGGroupMemberRepository:
    """Test group member persistence."""

    @pytest.fixture
    def database(self, conn):
        return mock_database(conn)

    @pytest.fixture
    def repository(self, database):
        return AsyncPGGroupMemberRepository(database)

    @pytest.mark.asyncio
    async def test_group_exists_is_tenant_scoped(self, repository, conn):
        conn.fetchval.return_value = False

        assert await repository.group_exists("g1", "tenant-other") is False
        assert conn.fetchval.await_args[0][1:] == ("g1", "tenant-other")

    @pytest.mark.asyncio
    async def test_get_member_is_tenant_scoped(self, repository, conn):
        conn.fetchrow.return_value = None

        assert await repository.get_member("g1", str(TENANT_ID), "user-1") is None
        assert conn.fetchrow.await_args[0][1:] == ("g1", str(TENANT_ID), "user-1")

    @pytest.mark.asyncio
    async def test_remove_last_admin_is_refused(self, repository, database, conn):
        conn.fetch.return_value = [{"user_id": "user-1"}]

        with pytest.raises(LastAdminViolationError):
            await repository.remove("g1", str(TENANT_ID), "user-1", "user-2")

        database.transaction.assert_called_once()
        conn.fetchrow.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_demote_last_admin_is_refused(self, repository, conn):
        conn.fetch.return_value = [{"user_id": "user-1"}]

        with pytest.raises(LastAdminViolationError):
            await repository.update_role("g1", str(TENANT_ID), "user-1", GroupRole.MEMBER)

        conn.fetchrow.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_promotion_skips_elevated_lock(self, repository, conn):
        conn.fetchrow.return_value = {"id": uuid4()}

        await repository.update_role("g1", str(TENANT_ID), "user-1", GroupRole.ADMIN)

        conn.fetch.assert_not_awaited()
        assert conn.fetchrow.await_args[0][1:] == ("g1", str(TENANT_ID), "user-1", "admin")

    @pytest.mark.asyncio
    async def test_remove_with_other_admin(self, repository, conn):
        conn.fetch.return_value = [{"user_id": "user-1"}, {"user_id": "user-2"}]
        conn.fetchrow.return_value = {"id": uuid4()}

        await repository.remove("g1", str(TENANT_ID), "user-1", "user-2")

        assert conn.fetchrow.await_args[0][1:] == ("g1", str(TENANT_ID), "user-1", "user-2")

    @pytest.mark.asyncio
    async def test_remove_foreign_member_matches_no_row(self, repository, conn):
        conn.fetch.return_value = []
        conn.fetchrow.return_value = None

        with pytest.raises(GroupMemberNotFoundError):
            await repository.remove("g1", "tenant-other", "user-1", "user-2")


class TestAsyncPGPermissionRepository:

    @pytest.mark.asyncio
    async def test_seed_empty_table(self, conn):
        conn.fetchval.return_value = 0

        seeded = await AsyncPGPermissionRepository(mock_database(conn)).seed_permissions()

        assert seeded == len(PERMISSION_CATALOG)
        rows = conn.executemany.await_args[0][1]
        assert len(rows) == len(PERMISSION_CATALOG)

    @pytest.mark.asyncio
    async def test_seed_is_skipped_when_populated(self, conn):
        conn.fetchval.return_value = 118

        assert await AsyncPGPermissionRepository(mock_database(conn)).seed_permissions() == 0
        conn.executemany.assert_not_awaited()


class TestDatabaseErrorHandler:

    @pytest.mark.asyncio
    async def test_connection_failure_is_unavailable(self):
        @database_error_handler("load roles")
        async def failing():
            raise ConnectionRefusedError("refused")

        with pytest.raises(DatabaseUnavailableError) as exc_info:
            await failing()

        assert exc_info.value.retryable is True
        assert exc_info.value.details == {"operation": "load roles"}

    @pytest.mark.asyncio
    async def test_query_failure_is_database_error(self):
        @database_error_handler("load roles")
        async def failing():
            raise ValueError("bad row")

        with pytest.raises(DatabaseError):
            await failing()

    @pytest.mark.asyncio
    async def test_domain_errors_pass_through(self):
        @database_error_handler("load roles")
        async def failing():
            raise RoleNotFoundError("r1", "t1")

        with pytest.raises(RoleNotFoundError):
            await failing()
