"""Tests for primary and secondary role assignment."""

from datetime import timedelta

import pytest

from neo_rbac.config.constants import AssignmentStatus
from neo_rbac.core.exceptions import (
    AlreadyAssignedError,
    AssignmentNotFoundError,
    HierarchyViolationError,
    LastOwnerViolationError,
    NotAMemberError,
    RoleNotFoundError,
    ValidationError,
)


class TestAssignPrimaryRole:
    """Test primary role replacement."""

    @pytest.mark.asyncio
    async def test_assign_primary_role(self, rbac, tenant, store, cache_backend, audit_sink):
        await rbac.resolve(tenant.viewer_id, tenant.tenant_id)

        membership = await rbac.assign_primary_role(
            tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id
        )

        assert membership.primary_role_id == tenant.support_role.id
        assert store.memberships[(tenant.tenant_id, tenant.viewer_id)].primary_role_id == tenant.support_role.id
        assert list(cache_backend.deleted_keys) == ["rbac:user-viewer:tenant-acme"]
        assert await rbac.resolve(tenant.viewer_id, tenant.tenant_id) == ["canManageNotifications"]

        event = audit_sink.events[-1]
        assert event.action.value == "role_assigned"
        assert event.details["previous_role_id"] == tenant.viewer_role.id

    @pytest.mark.asyncio
    async def test_last_owner_cannot_be_demoted(self, rbac, tenant, store):
        with pytest.raises(LastOwnerViolationError):
            await rbac.assign_primary_role(
                tenant.owner_id, tenant.tenant_id, tenant.viewer_role.id, tenant.owner_id
            )

        assert store.memberships[(tenant.tenant_id, tenant.owner_id)].primary_role_id == tenant.owner_role.id

    @pytest.mark.asyncio
    async def test_owner_can_be_demoted_when_another_owner_exists(self, rbac, tenant, store):
        store.add_member(tenant.tenant_id, "user-coowner", tenant.owner_role, is_owner=True)

        membership = await rbac.assign_primary_role(
            "user-coowner", tenant.tenant_id, tenant.viewer_role.id, tenant.owner_id
        )

        assert membership.is_owner is False
        assert await rbac.memberships.count_active_owners(tenant.tenant_id) == 1

    @pytest.mark.asyncio
    async def test_admin_cannot_demote_co_owner(self, rbac, tenant, store):
        store.add_member(tenant.tenant_id, "user-coowner", tenant.owner_role, is_owner=True)

        with pytest.raises(HierarchyViolationError):
            await rbac.assign_primary_role(
                "user-coowner", tenant.tenant_id, tenant.viewer_role.id, tenant.admin_id
            )

        membership = store.memberships[(tenant.tenant_id, "user-coowner")]
        assert membership.is_owner is True
        assert membership.primary_role_id == tenant.owner_role.id

    @pytest.mark.asyncio
    async def test_caller_cannot_reassign_member_at_own_level(self, rbac, tenant, store):
        store.add_member(tenant.tenant_id, "user-admin-2", tenant.admin_role)

        with pytest.raises(HierarchyViolationError):
            await rbac.assign_primary_role(
                "user-admin-2", tenant.tenant_id, tenant.viewer_role.id, tenant.admin_id
            )

        assert store.memberships[(tenant.tenant_id, "user-admin-2")].primary_role_id == tenant.admin_role.id

    @pytest.mark.asyncio
    async def test_owner_role_is_not_assignable(self, rbac, tenant):
        with pytest.raises(HierarchyViolationError):
            await rbac.assign_primary_role(
                tenant.viewer_id, tenant.tenant_id, tenant.owner_role.id, tenant.owner_id
            )

    @pytest.mark.asyncio
    async def test_caller_cannot_assign_own_level(self, rbac, tenant):
        with pytest.raises(HierarchyViolationError):
            await rbac.assign_primary_role(
                tenant.viewer_id, tenant.tenant_id, tenant.admin_role.id, tenant.admin_id
            )

    @pytest.mark.asyncio
    async def test_unknown_role(self, rbac, tenant):
        with pytest.raises(RoleNotFoundError):
            await rbac.assign_primary_role(tenant.viewer_id, tenant.tenant_id, "missing", tenant.owner_id)

    @pytest.mark.asyncio
    async def test_target_not_a_member(self, rbac, tenant):
        with pytest.raises(NotAMemberError):
            await rbac.assign_primary_role("stranger", tenant.tenant_id, tenant.viewer_role.id, tenant.owner_id)


class TestSecondaryRoles:
    """Test secondary role grant, revoke and expiry."""

    @pytest.mark.asyncio
    async def test_viewer_scenario(self, rbac, tenant):
        assert await rbac.has_permission(tenant.viewer_id, tenant.tenant_id, "canViewUsers") is True
        assert await rbac.has_permission(tenant.viewer_id, tenant.tenant_id, "canManageUsers") is False

    @pytest.mark.asyncio
    async def test_time_bound_support_role(self, rbac, tenant, clock):
        await rbac.resolve(tenant.viewer_id, tenant.tenant_id)

        await rbac.assign_secondary_role(
            tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id,
            expires_at=clock() + timedelta(hours=1), reason="on-call cover",
        )

        assert await rbac.has_permission(tenant.viewer_id, tenant.tenant_id, "canManageNotifications") is True

        clock.advance(hours=1, seconds=1)

        assert await rbac.has_permission(tenant.viewer_id, tenant.tenant_id, "canManageNotifications") is False
        assert await rbac.has_permission(tenant.viewer_id, tenant.tenant_id, "canViewUsers") is True

    @pytest.mark.asyncio
    async def test_revocation_takes_effect_within_ttl(self, rbac, tenant, clock, audit_sink):
        await rbac.assign_secondary_role(
            tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id,
            expires_at=clock() + timedelta(hours=1),
        )
        assert "canManageNotifications" in await rbac.resolve(tenant.viewer_id, tenant.tenant_id)

        await rbac.revoke_secondary_role(tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id)

        assert await rbac.resolve(tenant.viewer_id, tenant.tenant_id) == ["canViewUsers"]
        assert audit_sink.actions() == ["secondary_role_assigned", "secondary_role_revoked"]

    @pytest.mark.asyncio
    async def test_already_assigned(self, rbac, tenant, store):
        store.add_assignment(tenant.tenant_id, tenant.viewer_id, tenant.support_role)

        with pytest.raises(AlreadyAssignedError):
            await rbac.assign_secondary_role(
                tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id
            )

    @pytest.mark.asyncio
    async def test_revoked_assignment_is_reactivated(self, rbac, tenant, store):
        previous = store.add_assignment(
            tenant.tenant_id, tenant.viewer_id, tenant.support_role, status=AssignmentStatus.REVOKED
        )

        assignment = await rbac.assign_secondary_role(
            tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id, reason="again"
        )

        assert assignment.id == previous.id
        assert assignment.status == AssignmentStatus.ACTIVE
        assert assignment.revoked_by is None
        assert assignment.reason == "again"
        assert len(store.assignments) == 1

    @pytest.mark.asyncio
    async def test_lapsed_assignment_is_reactivated(self, rbac, tenant, store, clock):
        previous = store.add_assignment(
            tenant.tenant_id, tenant.viewer_id, tenant.support_role, expires_at=clock() - timedelta(minutes=5)
        )

        assignment = await rbac.assign_secondary_role(
            tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id
        )

        assert assignment.id == previous.id
        assert assignment.expires_at is None

    @pytest.mark.asyncio
    async def test_expiry_must_be_in_future(self, rbac, tenant, clock, store):
        with pytest.raises(ValidationError):
            await rbac.assign_secondary_role(
                tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id,
                expires_at=clock(),
            )

        assert store.assignments == {}

    @pytest.mark.asyncio
    async def test_secondary_role_hierarchy(self, rbac, tenant):
        with pytest.raises(HierarchyViolationError):
            await rbac.assign_secondary_role(
                tenant.viewer_id, tenant.tenant_id, tenant.admin_role.id, tenant.viewer_id
            )

    @pytest.mark.asyncio
    async def test_revoke_without_assignment(self, rbac, tenant):
        with pytest.raises(AssignmentNotFoundError):
            await rbac.revoke_secondary_role(
                tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id
            )

    @pytest.mark.asyncio
    async def test_revoke_is_terminal(self, rbac, tenant, store):
        store.add_assignment(tenant.tenant_id, tenant.viewer_id, tenant.support_role)
        await rbac.revoke_secondary_role(tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id)

        with pytest.raises(AssignmentNotFoundError):
            await rbac.revoke_secondary_role(
                tenant.viewer_id, tenant.tenant_id, tenant.support_role.id, tenant.admin_id
            )

    @pytest.mark.asyncio
    async def test_list_secondary_roles(self, rbac, tenant, store, clock):
        store.add_assignment(tenant.tenant_id, tenant.viewer_id, tenant.support_role)
        store.add_assignment(
            tenant.tenant_id, tenant.viewer_id, tenant.admin_role, expires_at=clock() - timedelta(days=1)
        )

        active = await rbac.assignment_service.list_secondary_roles(tenant.viewer_id, tenant.tenant_id)
        everything = await rbac.assignment_service.list_secondary_roles(
            tenant.viewer_id, tenant.tenant_id, include_inactive=True
        )

        assert [a.role_id for a in active] == [tenant.support_role.id]
        assert len(everything) == 2


class TestExpireSecondaryRoles:
    """Test the expiry sweep."""

    @pytest.mark.asyncio
    async def test_sweep_marks_and_invalidates_exact_pairs(self, rbac, tenant, store, clock, cache_backend, audit_sink):
        lapsed = store.add_assignment(
            tenant.tenant_id, tenant.viewer_id, tenant.support_role, expires_at=clock() - timedelta(minutes=1)
        )
        current = store.add_assignment(
            tenant.tenant_id, tenant.admin_id, tenant.support_role, expires_at=clock() + timedelta(days=1)
        )

        expired = await rbac.expire_secondary_roles()

        assert expired == 1
        assert store.assignments[lapsed.id].status == AssignmentStatus.EXPIRED
        assert store.assignments[current.id].status == AssignmentStatus.ACTIVE
        assert list(cache_backend.deleted_keys) == ["rbac:user-viewer:tenant-acme"]
        assert audit_sink.actions() == ["secondary_role_expired"]

    @pytest.mark.asyncio
    async def test_sweep_with_nothing_to_expire(self, rbac, tenant, cache_backend, audit_sink):
        assert await rbac.expire_secondary_roles() == 0
        assert list(cache_backend.deleted_keys) == []
        assert audit_sink.events == []
