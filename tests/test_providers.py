# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for the OAuth2 profile-based providers."""

import re
from unittest.mock import patch

import httpx
import pytest
from conftest import make_config, make_response

from gopad_authn.claims import Diagnostics
from gopad_authn.entraid_provider import EntraIDProvider
from gopad_authn.exceptions import AuthenticationError, ProviderError
from gopad_authn.gitea_provider import GiteaProvider
from gopad_authn.github_provider import GitHubProvider
from gopad_authn.gitlab_provider import GitLabProvider
from gopad_authn.google_provider import GoogleProvider
from gopad_authn.oauth2 import OAuth2Token

TOKEN = OAuth2Token(access_token="gho_token")

GITHUB_EMAILS = [
    {"email": "a@x.com", "primary": False, "verified": True},
    {"email": "b@x.com", "primary": True, "verified": True},
    {"email": "c@x.com", "primary": True, "verified": False},
]


@pytest.fixture
def github(resolver, silent_logger):
    return GitHubProvider(make_config("github"), resolver=resolver, logger=silent_logger)


def routed_get(routes):
    """Build a fake httpx.get answering from a url -> response map."""
    def _get(url, **kwargs):
        if url not in routes:
            raise AssertionError(f"unexpected GET {url}")
        return routes[url]

    return _get


class TestProfileFetch:
    """Tests for the shared profile request."""

    def test_sends_bearer_token(self, github):
        """Test that the profile request carries the access token."""
        profile = {"id": 1, "login": "octocat", "name": "Octo", "email": "o@x.com"}

        with patch("httpx.get", return_value=make_response(200, json=profile)) as mock_get:
            github.claims(TOKEN)

        headers = mock_get.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer gho_token"
        assert mock_get.call_args.kwargs["timeout"] == 10.0

    def test_explicit_timeout(self, github):
        """Test that a caller-supplied timeout is used."""
        profile = {"id": 1, "login": "octocat", "name": "Octo", "email": "o@x.com"}

        with patch("httpx.get", return_value=make_response(200, json=profile)) as mock_get:
            github.claims(TOKEN, timeout=3.0)

        assert mock_get.call_args.kwargs["timeout"] == 3.0

    def test_transport_error(self, github):
        """Test that a transport failure is a provider error."""
        with patch("httpx.get", side_effect=httpx.ConnectError("connection refused")):
            with pytest.raises(ProviderError, match="failed to fetch userinfo"):
                github.claims(TOKEN)

    def test_bad_status(self, github):
        """Test that a non-200 profile response is an authentication error."""
        with patch("httpx.get", return_value=make_response(401, json={"message": "Bad credentials"})):
            with pytest.raises(AuthenticationError, match="bad status code returned: 401"):
                github.claims(TOKEN)

    def test_bad_json(self, github):
        """Test that an undecodable body is a provider error."""
        response = httpx.Response(200, content=b"<html>", request=httpx.Request("GET", "https://api.github.com/user"))

        with patch("httpx.get", return_value=response):
            with pytest.raises(ProviderError, match="failed to decode userinfo"):
                github.claims(TOKEN)

    def test_non_object_json(self, github):
        """Test that a JSON array body is a provider error."""
        with patch("httpx.get", return_value=make_response(200, json=["not", "an", "object"])):
            with pytest.raises(ProviderError, match="failed to decode userinfo"):
                github.claims(TOKEN)


class TestGitHubProvider:
    """Tests for GitHub claim extraction and email backfill."""

    def test_float_id_and_null_email(self, github):
        """Test a profile with a float id and a private email."""
        profile = {"id": 12345.0, "login": "octocat", "name": "The Octocat", "email": None}
        diagnostics = Diagnostics()

        user = github.extract_user(profile, diagnostics)

        assert user.ident == "12345"
        assert user.login == "octocat"
        assert user.name == "The Octocat"
        assert user.email == ""
        assert user.raw == profile
        assert not diagnostics

    def test_email_backfill_picks_primary_verified(self, github):
        """Test that the primary verified address fills a missing email."""
        routes = {
            "https://api.github.com/user": make_response(
                200, json={"id": 1, "login": "octocat", "name": "Octo", "email": None}
            ),
            "https://api.github.com/user/emails": make_response(200, json=GITHUB_EMAILS),
        }

        with patch("httpx.get", side_effect=routed_get(routes)):
            user = github.claims(TOKEN)

        assert user.email == "b@x.com"

    def test_email_backfill_without_match(self, github):
        """Test that no primary verified address leaves the email empty."""
        routes = {
            "https://api.github.com/user": make_response(200, json={"id": 1, "login": "octocat", "name": "Octo"}),
            "https://api.github.com/user/emails": make_response(200, json=GITHUB_EMAILS[:1] + GITHUB_EMAILS[2:]),
        }

        with patch("httpx.get", side_effect=routed_get(routes)):
            user = github.claims(TOKEN)

        assert user.email == ""

    def test_email_backfill_takes_first_match(self, github):
        """Test that the first primary verified entry wins."""
        emails = [
            {"email": "first@x.com", "primary": True, "verified": True},
            {"email": "second@x.com", "primary": True, "verified": True},
        ]
        routes = {
            "https://api.github.com/user": make_response(200, json={"id": 1, "login": "o", "name": "O"}),
            "https://api.github.com/user/emails": make_response(200, json=emails),
        }

        with patch("httpx.get", side_effect=routed_get(routes)):
            user = github.claims(TOKEN)

        assert user.email == "first@x.com"

    def test_public_email_skips_backfill(self, github):
        """Test that a public email does not trigger the email request."""
        routes = {
            "https://api.github.com/user": make_response(
                200, json={"id": 1, "login": "octocat", "name": "Octo", "email": "public@x.com"}
            ),
        }

        with patch("httpx.get", side_effect=routed_get(routes)) as mock_get:
            user = github.claims(TOKEN)

        assert user.email == "public@x.com"
        assert mock_get.call_count == 1

    def test_email_backfill_failures_are_fatal(self, github):
        """Test that email endpoint failures abort the login."""
        profile = make_response(200, json={"id": 1, "login": "octocat", "name": "Octo", "email": None})

        with patch("httpx.get", side_effect=[profile, make_response(403, json={})]):
            with pytest.raises(AuthenticationError, match="bad status code returned: 403"):
                github.claims(TOKEN)

        with patch("httpx.get", side_effect=[profile, make_response(200, json={"email": "x"})]):
            with pytest.raises(ProviderError, match="failed to decode emails"):
                github.claims(TOKEN)

        with patch("httpx.get", side_effect=[profile, httpx.ReadTimeout("slow")]):
            with pytest.raises(ProviderError, match="failed to fetch emails"):
                github.claims(TOKEN)

    def test_string_id_is_a_type_mismatch(self, github):
        """Test that a string id is reported and left empty."""
        diagnostics = Diagnostics()

        user = github.extract_user({"id": "12345", "login": "octocat", "name": "Octo"}, diagnostics)

        assert user.ident == ""
        assert diagnostics.for_attr("ident")[0].type == "string"


class TestGitLabProvider:
    """Tests for GitLab claim extraction."""

    def test_extract_user(self, resolver, silent_logger):
        """Test mapping a GitLab /user document."""
        provider = GitLabProvider(make_config("gitlab"), resolver=resolver, logger=silent_logger)
        diagnostics = Diagnostics()

        user = provider.extract_user(
            {"id": 4242, "username": "jdoe", "name": "John Doe", "email": "jdoe@x.com"},
            diagnostics,
        )

        assert (user.ident, user.login, user.name, user.email) == ("4242", "jdoe", "John Doe", "jdoe@x.com")
        assert user.roles is None
        assert not diagnostics


class TestGiteaProvider:
    """Tests for Gitea claim extraction."""

    def test_extract_user(self, resolver, silent_logger):
        """Test mapping a Gitea userinfo document."""
        provider = GiteaProvider(make_config("gitea"), resolver=resolver, logger=silent_logger)
        diagnostics = Diagnostics()

        user = provider.extract_user(
            {"sub": "17", "preferred_username": "gitea-user", "name": "Gitea User"},
            diagnostics,
        )

        assert user.ident == "17"
        assert user.login == "gitea-user"
        assert user.email == ""
        assert [d.to_dict() for d in diagnostics] == [
            {"attr": "email", "mapping": "email", "reason": "missing"}
        ]


class TestGoogleProvider:
    """Tests for Google claim extraction."""

    def test_extract_user_slugifies_name(self, resolver, silent_logger):
        """Test that the login is slugified from the display name."""
        provider = GoogleProvider(make_config("google"), resolver=resolver, logger=silent_logger)
        diagnostics = Diagnostics()

        user = provider.extract_user(
            {"id": "1180", "name": "María José", "email": "mj@gmail.com"},
            diagnostics,
        )

        assert user.ident == "1180"
        assert user.login == "maria-jose"
        assert user.name == "María José"
        assert not diagnostics


class TestEntraIDProvider:
    """Tests for EntraID claim extraction."""

    @pytest.fixture
    def entraid(self, resolver, silent_logger):
        return EntraIDProvider(make_config("entraid"), resolver=resolver, logger=silent_logger)

    def test_display_name_slug(self, entraid):
        """Test that the login is a URL-safe slug of displayName."""
        diagnostics = Diagnostics()

        user = entraid.extract_user(
            {"id": "b7c1", "displayName": "Jane Q. Public", "mail": "jane@contoso.com"},
            diagnostics,
        )

        assert user.login == "jane-q-public"
        assert re.fullmatch(r"[a-z0-9]+(-[a-z0-9]+)*", user.login)
        assert user.name == "Jane Q. Public"
        assert user.email == "jane@contoso.com"

    def test_missing_display_name(self, entraid):
        """Test that a missing displayName is reported for login and name."""
        diagnostics = Diagnostics()

        user = entraid.extract_user({"id": "b7c1", "mail": "jane@contoso.com"}, diagnostics)

        assert user.login == ""
        assert user.name == ""
        assert [d.attr for d in diagnostics] == ["login", "name"]
