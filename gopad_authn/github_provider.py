# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""GitHub OAuth identity provider.

This module provides authentication via GitHub OAuth, allowing users to
authenticate using their GitHub accounts. Endpoints can be overridden to
target a GitHub Enterprise installation.
"""

from typing import Any, Dict, List, Optional

import httpx

from .claims import Diagnostics, expect_numeric_id, expect_string
from .drivers import Driver
from .exceptions import AuthenticationError, ProviderError
from .models import User
from .oauth2 import OAuth2Token
from .provider import IdentityProvider


class GitHubProvider(IdentityProvider):
    """GitHub OAuth identity provider.

    Users who keep their email private expose ``email: null`` on the
    profile; the primary verified address is then fetched from the email
    endpoint.
    """

    driver = Driver.GITHUB
    default_scopes = ("read:user", "user:email")
    default_endpoints = {
        "auth": "https://github.com/login/oauth/authorize",
        "token": "https://github.com/login/oauth/access_token",
        "profile": "https://api.github.com/user",
        "email": "https://api.github.com/user/emails",
    }

    def extract_user(self, attrs: Dict[str, Any], diagnostics: Diagnostics) -> User:
        user = User(raw=attrs)

        user.ident = expect_numeric_id(attrs, "id", "ident", diagnostics) or ""
        user.login = expect_string(attrs, "login", "login", diagnostics) or ""
        user.name = expect_string(attrs, "name", "name", diagnostics) or ""
        user.email = expect_string(attrs, "email", "email", diagnostics, optional=True) or ""

        return user

    def complete_user(self, user: User, token: OAuth2Token, timeout: Optional[float] = None) -> User:
        if not user.email:
            user.email = self.primary_email(token, timeout=timeout) or ""
        return user

    def primary_email(self, token: OAuth2Token, timeout: Optional[float] = None) -> Optional[str]:
        """Fetch the user's primary verified email address.

        Args:
            token: OAuth access token
            timeout: Request timeout in seconds

        Returns:
            The first address flagged both primary and verified, or None

        Raises:
            AuthenticationError: If the email endpoint rejects the token
            ProviderError: If the email endpoint is unavailable or returns garbage
        """
        try:
            response = self.oauth2.get(self.endpoints.email, token, timeout=timeout)
        except httpx.HTTPError as e:
            raise ProviderError(f"failed to fetch emails: {e}") from e

        if response.status_code != 200:
            raise AuthenticationError(f"bad status code returned: {response.status_code}")

        try:
            entries = response.json()
        except ValueError as e:
            raise ProviderError(f"failed to decode emails: {e}") from e

        if not isinstance(entries, list):
            raise ProviderError("failed to decode emails: expected an array")

        return _select_primary(entries)


def _select_primary(entries: List[Any]) -> Optional[str]:
    for entry in entries:
        if not isinstance(entry, dict):
            continue

        email = entry.get("email")
        if entry.get("primary") is True and entry.get("verified") is True and isinstance(email, str) and email:
            return email

    return None
