# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Gitea OAuth identity provider."""

from typing import Any, Dict

from .claims import Diagnostics, expect_string
from .drivers import Driver
from .models import User
from .provider import IdentityProvider

GITEA_BASE_URL = "https://gitea.com"


class GiteaProvider(IdentityProvider):
    """Gitea OAuth identity provider.

    Defaults target gitea.com; self-hosted instances override the endpoints.
    """

    driver = Driver.GITEA
    default_scopes = ("read:user",)
    default_endpoints = {
        "auth": f"{GITEA_BASE_URL}/login/oauth/authorize",
        "token": f"{GITEA_BASE_URL}/login/oauth/access_token",
        "profile": f"{GITEA_BASE_URL}/login/oauth/userinfo",
    }

    def extract_user(self, attrs: Dict[str, Any], diagnostics: Diagnostics) -> User:
        user = User(raw=attrs)

        user.ident = expect_string(attrs, "sub", "ident", diagnostics) or ""
        user.login = expect_string(attrs, "preferred_username", "login", diagnostics) or ""
        user.name = expect_string(attrs, "name", "name", diagnostics) or ""
        user.email = expect_string(attrs, "email", "email", diagnostics) or ""

        return user
