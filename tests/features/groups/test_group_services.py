"""Tests for the dual-authorization gate and group membership management."""

import pytest

from neo_rbac.config.constants import GroupMemberStatus, GroupPermissions, GroupRole
from neo_rbac.core.exceptions import (
    AccessDeniedError,
    ConflictError,
    GroupMemberNotFoundError,
    LastAdminViolationError,
    NotAMemberError,
)

GROUP_ID = "group-platform"


@pytest.fixture
def group(store, tenant):
    """Group led by the viewer (a group admin without tenant-wide rights)."""
    store.add_group_member(tenant.tenant_id, GROUP_ID, tenant.viewer_id, GroupRole.ADMIN)
    return GROUP_ID


class TestDualAuthorizationGate:

    @pytest.mark.asyncio
    async def test_tenant_permission_grants_access(self, rbac, tenant, group):
        assert await rbac.can_access_group(
            tenant.admin_id, tenant.tenant_id, group, GroupPermissions.MANAGE_MEMBERS
        ) is True

    @pytest.mark.asyncio
    async def test_group_admin_grants_access(self, rbac, tenant, group):
        assert await rbac.can_access_group(
            tenant.viewer_id, tenant.tenant_id, group, GroupPermissions.MANAGE_MEMBERS
        ) is True

    @pytest.mark.asyncio
    async def test_group_admin_of_other_group_is_denied(self, rbac, tenant, group):
        assert await rbac.can_access_group(
            tenant.viewer_id, tenant.tenant_id, "group-other", GroupPermissions.MANAGE_MEMBERS
        ) is False

    @pytest.mark.asyncio
    async def test_plain_member_is_denied(self, rbac, tenant, group, store):
        store.add_member(tenant.tenant_id, "user-plain", tenant.support_role)
        store.add_group_member(tenant.tenant_id, group, "user-plain", GroupRole.MEMBER)

        assert await rbac.can_access_group(
            "user-plain", tenant.tenant_id, group, GroupPermissions.MANAGE_MEMBERS
        ) is False

    @pytest.mark.asyncio
    async def test_removed_admin_is_denied(self, rbac, tenant, store):
        store.add_group_member(
            tenant.tenant_id, GROUP_ID, tenant.viewer_id, GroupRole.OWNER, status=GroupMemberStatus.REMOVED
        )

        assert await rbac.can_access_group(
            tenant.viewer_id, tenant.tenant_id, GROUP_ID, GroupPermissions.MANAGE_MEMBERS
        ) is False

    @pytest.mark.asyncio
    async def test_tenant_check_short_circuits(self, rbac, tenant, group, monkeypatch):
        calls = []

        async def spy(user_id, tenant_id, group_id):
            calls.append(user_id)
            return False

        monkeypatch.setattr(rbac.gate, "has_scoped_elevated_role", spy)

        assert await rbac.can_access_group(
            tenant.admin_id, tenant.tenant_id, group, GroupPermissions.MANAGE_MEMBERS
        ) is True
        assert calls == []


class TestGroupMembershipService:

    @pytest.mark.asyncio
    async def test_group_admin_adds_member(self, rbac, tenant, group, audit_sink):
        store_member = await rbac.add_group_member(
            tenant.viewer_id, tenant.tenant_id, group, tenant.admin_id, GroupRole.VIEWER
        )

        assert store_member.role == GroupRole.VIEWER
        assert store_member.added_by == tenant.viewer_id
        assert audit_sink.actions() == ["group_member_added"]

    @pytest.mark.asyncio
    async def test_non_tenant_member_cannot_be_added(self, rbac, tenant, group):
        with pytest.raises(NotAMemberError):
            await rbac.add_group_member(tenant.admin_id, tenant.tenant_id, group, "stranger")

    @pytest.mark.asyncio
    async def test_actor_must_be_tenant_member(self, rbac, tenant, group, store):
        store.add_group_member("tenant-other", group, "outsider", GroupRole.OWNER)

        with pytest.raises(AccessDeniedError):
            await rbac.add_group_member("outsider", tenant.tenant_id, group, tenant.admin_id)

    @pytest.mark.asyncio
    async def test_actor_without_rights_is_denied(self, rbac, tenant, group, store):
        store.add_member(tenant.tenant_id, "user-plain", tenant.support_role)

        with pytest.raises(AccessDeniedError):
            await rbac.add_group_member("user-plain", tenant.tenant_id, group, tenant.admin_id)

    @pytest.mark.asyncio
    async def test_duplicate_member(self, rbac, tenant, group):
        with pytest.raises(ConflictError):
            await rbac.add_group_member(tenant.admin_id, tenant.tenant_id, group, tenant.viewer_id)

    @pytest.mark.asyncio
    async def test_removed_member_is_reactivated(self, rbac, tenant, group, store):
        previous = store.add_group_member(
            tenant.tenant_id, group, tenant.owner_id, GroupRole.MEMBER, status=GroupMemberStatus.REMOVED
        )

        member = await rbac.add_group_member(tenant.viewer_id, tenant.tenant_id, group, tenant.owner_id)

        assert member.id == previous.id
        assert member.is_active is True

    @pytest.mark.asyncio
    async def test_group_admin_cannot_grant_ownership(self, rbac, tenant, group):
        with pytest.raises(AccessDeniedError):
            await rbac.add_group_member(
                tenant.viewer_id, tenant.tenant_id, group, tenant.admin_id, GroupRole.OWNER
            )

    @pytest.mark.asyncio
    async def test_tenant_admin_can_grant_ownership(self, rbac, tenant, group):
        member = await rbac.add_group_member(
            tenant.admin_id, tenant.tenant_id, group, tenant.owner_id, GroupRole.OWNER
        )

        assert member.role == GroupRole.OWNER

    @pytest.mark.asyncio
    async def test_last_admin_cannot_be_demoted(self, rbac, tenant, group):
        with pytest.raises(LastAdminViolationError):
            await rbac.update_group_member_role(
                tenant.admin_id, tenant.tenant_id, group, tenant.viewer_id, GroupRole.MEMBER
            )

    @pytest.mark.asyncio
    async def test_demotion_allowed_with_second_admin(self, rbac, tenant, group, store, audit_sink):
        store.add_group_member(tenant.tenant_id, group, tenant.admin_id, GroupRole.ADMIN)

        member = await rbac.update_group_member_role(
            tenant.admin_id, tenant.tenant_id, group, tenant.viewer_id, GroupRole.MEMBER
        )

        assert member.role == GroupRole.MEMBER
        assert audit_sink.events[-1].details == {
            "group_id": group,
            "user_id": tenant.viewer_id,
            "old_role": "admin",
            "new_role": "member",
        }

    @pytest.mark.asyncio
    async def test_update_unknown_member(self, rbac, tenant, group):
        with pytest.raises(GroupMemberNotFoundError):
            await rbac.update_group_member_role(
                tenant.admin_id, tenant.tenant_id, group, tenant.owner_id, GroupRole.ADMIN
            )

    @pytest.mark.asyncio
    async def test_last_admin_cannot_be_removed(self, rbac, tenant, group):
        with pytest.raises(LastAdminViolationError):
            await rbac.remove_group_member(tenant.admin_id, tenant.tenant_id, group, tenant.viewer_id)

    @pytest.mark.asyncio
    async def test_remove_member(self, rbac, tenant, group, store):
        member = store.add_group_member(tenant.tenant_id, group, tenant.admin_id, GroupRole.MEMBER)

        await rbac.remove_group_member(tenant.viewer_id, tenant.tenant_id, group, tenant.admin_id)

        assert store.group_members[member.id].status == GroupMemberStatus.REMOVED
        assert [m.user_id for m in await rbac.group_service.list_members(group, tenant.tenant_id)] == [tenant.viewer_id]

    @pytest.mark.asyncio
    async def test_leave_group(self, rbac, tenant, group, store):
        member = store.add_group_member(tenant.tenant_id, group, tenant.owner_id, GroupRole.VIEWER)

        await rbac.leave_group(tenant.owner_id, tenant.tenant_id, group)

        assert store.group_members[member.id].status == GroupMemberStatus.REMOVED

    @pytest.mark.asyncio
    async def test_last_admin_cannot_leave(self, rbac, tenant, group):
        with pytest.raises(LastAdminViolationError):
            await rbac.leave_group(tenant.viewer_id, tenant.tenant_id, group)


class TestGroupTenantIsolation:
    """Groups of another tenant are invisible to the gate and the service."""

    FOREIGN_TENANT = "tenant-other"
    FOREIGN_GROUP = "group-foreign"

    @pytest.fixture
    def foreign_group(self, store):
        store.add_group_member(self.FOREIGN_TENANT, self.FOREIGN_GROUP, "user-foreign-admin", GroupRole.ADMIN)
        store.add_group_member(self.FOREIGN_TENANT, self.FOREIGN_GROUP, "user-foreign-member", GroupRole.MEMBER)
        return self.FOREIGN_GROUP

    @pytest.mark.asyncio
    async def test_tenant_permission_does_not_reach_foreign_group(self, rbac, tenant, foreign_group):
        assert await rbac.can_access_group(
            tenant.admin_id, tenant.tenant_id, foreign_group, GroupPermissions.MANAGE_MEMBERS
        ) is False

    @pytest.mark.asyncio
    async def test_foreign_member_cannot_be_removed(self, rbac, tenant, store, foreign_group):
        with pytest.raises(AccessDeniedError):
            await rbac.remove_group_member(
                tenant.admin_id, tenant.tenant_id, foreign_group, "user-foreign-member"
            )

        statuses = {m.user_id: m.status for m in store.group_members.values()}
        assert statuses["user-foreign-member"] == GroupMemberStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_foreign_member_role_is_unchanged(self, rbac, tenant, store, foreign_group):
        with pytest.raises(AccessDeniedError):
            await rbac.update_group_member_role(
                tenant.admin_id, tenant.tenant_id, foreign_group, "user-foreign-admin", GroupRole.MEMBER
            )

        roles = {m.user_id: m.role for m in store.group_members.values()}
        assert roles["user-foreign-admin"] == GroupRole.ADMIN

    @pytest.mark.asyncio
    async def test_foreign_admin_row_does_not_elevate(self, rbac, tenant, store, foreign_group):
        store.add_group_member(self.FOREIGN_TENANT, foreign_group, tenant.viewer_id, GroupRole.OWNER)

        assert await rbac.gate.has_scoped_elevated_role(tenant.viewer_id, tenant.tenant_id, foreign_group) is False

    @pytest.mark.asyncio
    async def test_listing_is_tenant_scoped(self, rbac, tenant, foreign_group):
        assert await rbac.group_service.list_members(foreign_group, tenant.tenant_id) == []
        members = await rbac.group_service.list_members(foreign_group, self.FOREIGN_TENANT)
        assert {m.user_id for m in members} == {"user-foreign-admin", "user-foreign-member"}

    @pytest.mark.asyncio
    async def test_leave_foreign_group(self, rbac, tenant, foreign_group):
        with pytest.raises(GroupMemberNotFoundError):
            await rbac.leave_group(tenant.viewer_id, tenant.tenant_id, foreign_group)
