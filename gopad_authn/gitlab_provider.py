# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""GitLab OAuth identity provider."""

from typing import Any, Dict

from .claims import Diagnostics, expect_numeric_id, expect_string
from .drivers import Driver
from .models import User
from .provider import IdentityProvider

GITLAB_BASE_URL = "https://gitlab.com"


class GitLabProvider(IdentityProvider):
    """GitLab OAuth identity provider.

    Defaults target gitlab.com; self-managed instances override the endpoints.
    """

    driver = Driver.GITLAB
    default_scopes = ("openid", "profile", "email", "read_user")
    default_endpoints = {
        "auth": f"{GITLAB_BASE_URL}/oauth/authorize",
        "token": f"{GITLAB_BASE_URL}/oauth/token",
        "profile": f"{GITLAB_BASE_URL}/api/v3/user",
    }

    def extract_user(self, attrs: Dict[str, Any], diagnostics: Diagnostics) -> User:
        user = User(raw=attrs)

        user.ident = expect_numeric_id(attrs, "id", "ident", diagnostics) or ""
        user.login = expect_string(attrs, "username", "login", diagnostics) or ""
        user.name = expect_string(attrs, "name", "name", diagnostics) or ""
        user.email = expect_string(attrs, "email", "email", diagnostics) or ""

        return user
