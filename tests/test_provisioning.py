# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for external user provisioning."""

import pytest

from gopad_authn.config import AuthAdmins
from gopad_authn.exceptions import ProvisioningError
from gopad_authn.models import User
from gopad_authn.provisioning import InMemoryUserStore, resolve_admin


class TestResolveAdmin:
    """Tests for admin inference from allowlists."""

    def test_login_allowlist(self):
        """Test that an allowlisted login grants admin rights."""
        admins = AuthAdmins(users=["octocat"])

        assert resolve_admin(admins, User(login="octocat")) is True
        assert resolve_admin(admins, User(login="hubot")) is False

    def test_email_allowlist(self):
        """Test that an allowlisted email grants admin rights."""
        admins = AuthAdmins(emails=["boss@example.com"])

        assert resolve_admin(admins, User(email="boss@example.com")) is True

    def test_role_allowlist(self):
        """Test that any allowlisted role grants admin rights."""
        admins = AuthAdmins(roles=["gopad-admins"])

        assert resolve_admin(admins, User(roles=["users", "gopad-admins"])) is True
        assert resolve_admin(admins, User(roles=None)) is False

    def test_empty_values_never_match(self):
        """Test that empty fields do not match empty allowlist entries."""
        admins = AuthAdmins(users=[""], emails=[""])

        assert resolve_admin(admins, User()) is False


class TestInMemoryUserStore:
    """Tests for InMemoryUserStore."""

    def test_creates_account(self):
        """Test that a first login creates a slugified account."""
        store = InMemoryUserStore()

        user = store.upsert_external("github", "12345", "The Octocat", "o@x.com", "The Octocat", False)

        assert user.username == "the-octocat"
        assert user.email == "o@x.com"
        assert user.active is True
        assert user.auths[0].provider == "github"
        assert user.auths[0].ref == "12345"
        assert store.find_external("github", "12345") is user
        assert len(store) == 1

    def test_repeated_login_updates_account(self):
        """Test that a second login refreshes fields but keeps the username."""
        store = InMemoryUserStore()
        first = store.upsert_external("github", "12345", "octocat", "old@x.com", "Octo", False)

        second = store.upsert_external("github", "12345", "renamed", "new@x.com", "Octo Cat", True)

        assert second.id == first.id
        assert second.username == "octocat"
        assert second.email == "new@x.com"
        assert second.fullname == "Octo Cat"
        assert second.admin is True
        assert second.auths[0].login == "renamed"
        assert len(store) == 1

    def test_username_collision_gets_suffix(self):
        """Test that a taken username receives a random suffix."""
        store = InMemoryUserStore(reserved=["admin"])

        user = store.upsert_external("gitlab", "1", "admin", "", "", False)
        other = store.upsert_external("gitea", "1", "admin", "", "", False)

        assert user.username.startswith("admin-")
        assert len(user.username) == len("admin-") + 6
        assert other.username.startswith("admin-")
        assert other.username != user.username

    def test_same_ref_on_other_provider_is_another_account(self):
        """Test that accounts are keyed by provider and ref."""
        store = InMemoryUserStore()

        first = store.upsert_external("github", "1", "alice", "", "", False)
        second = store.upsert_external("gitlab", "1", "alice", "", "", False)

        assert first.id != second.id

    def test_empty_username(self):
        """Test that an empty username cannot be provisioned."""
        store = InMemoryUserStore()

        with pytest.raises(ProvisioningError):
            store.upsert_external("github", "12345", "", "o@x.com", "", False)

    def test_empty_ref(self):
        """Test that an identity without ref cannot be provisioned."""
        store = InMemoryUserStore()

        with pytest.raises(ProvisioningError):
            store.upsert_external("github", "", "octocat", "", "", False)

    def test_to_dict(self):
        """Test the serialized account."""
        store = InMemoryUserStore()
        user = store.upsert_external("github", "7", "octocat", "o@x.com", "Octo", True)

        assert user.to_dict() == {
            "id": user.id,
            "username": "octocat",
            "email": "o@x.com",
            "fullname": "Octo",
            "admin": True,
            "active": True,
            "auths": [{"provider": "github", "ref": "7", "login": "octocat"}],
        }
