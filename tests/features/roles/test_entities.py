"""Tests for the Role entity and name helpers."""

import pytest

from neo_rbac.features.roles.entities import Role, is_reserved_role_name, slugify


class TestSlugify:

    @pytest.mark.parametrize("name,expected", [
        ("Viewer", "viewer"),
        ("Support Engineer", "support-engineer"),
        ("  Support Engineer (L2) ", "support-engineer-l2"),
        ("billing_admin", "billing-admin"),
        ("Ops -- On Call", "ops-on-call"),
    ])
    def test_slugify(self, name, expected):
        assert slugify(name) == expected

    def test_slugify_without_word_characters(self):
        assert slugify("!!!") == ""


class TestReservedNames:

    @pytest.mark.parametrize("name", ["owner", "Owner", " ADMIN ", "System"])
    def test_reserved(self, name):
        assert is_reserved_role_name(name) is True

    def test_not_reserved(self):
        assert is_reserved_role_name("Administrator") is False


class TestRole:

    def test_owner_role_detection(self):
        owner = Role(id="r1", tenant_id="t1", name="Owner", slug="owner", hierarchy_level=1)
        imposter = Role(id="r2", tenant_id="t1", name="Owner-ish", slug="owner", hierarchy_level=5)

        assert owner.is_owner_role is True
        assert imposter.is_owner_role is False

    def test_with_permissions_returns_copy(self):
        role = Role(id="r1", tenant_id="t1", name="Viewer", slug="viewer")

        updated = role.with_permissions({"canViewUsers"})

        assert updated.permission_keys == frozenset({"canViewUsers"})
        assert role.permission_keys == frozenset()
        assert updated.hierarchy_level == 50
