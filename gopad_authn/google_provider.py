# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Google OAuth identity provider."""

from typing import Any, Dict

from slugify import slugify

from .claims import Diagnostics, expect_string
from .drivers import Driver
from .models import User
from .provider import IdentityProvider


class GoogleProvider(IdentityProvider):
    """Google OAuth identity provider.

    Uses the v2 userinfo endpoint. Endpoint overrides from the
    configuration are ignored for this driver.
    """

    driver = Driver.GOOGLE
    default_scopes = (
        "https://www.googleapis.com/auth/userinfo.profile",
        "https://www.googleapis.com/auth/userinfo.email",
    )
    fixed_endpoints = {
        "auth": "https://accounts.google.com/o/oauth2/auth",
        "token": "https://oauth2.googleapis.com/token",
        "profile": "https://www.googleapis.com/oauth2/v2/userinfo",
    }

    def extract_user(self, attrs: Dict[str, Any], diagnostics: Diagnostics) -> User:
        user = User(raw=attrs)

        user.ident = expect_string(attrs, "id", "ident", diagnostics) or ""

        name = expect_string(attrs, "name", "login", diagnostics)
        if name:
            user.login = slugify(name)

        user.name = expect_string(attrs, "name", "name", diagnostics) or ""
        user.email = expect_string(attrs, "email", "email", diagnostics) or ""

        return user
