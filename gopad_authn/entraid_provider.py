# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Microsoft Entra ID identity provider.

This module provides authentication via Microsoft Entra ID OAuth, reading
the profile from Microsoft Graph.
"""

from typing import Any, Dict

from slugify import slugify

from .claims import Diagnostics, expect_string
from .config import AuthProviderConfig
from .drivers import Driver
from .models import User
from .provider import IdentityProvider

DEFAULT_TENANT = "common"
LOGIN_BASE_URL = "https://login.microsoftonline.com"
GRAPH_PROFILE_URL = "https://graph.microsoft.com/v1.0/me"


class EntraIDProvider(IdentityProvider):
    """Microsoft Entra ID identity provider.

    Authorization and token endpoints are derived from the tenant
    ("common" for multi-tenant applications). Endpoint overrides from the
    configuration are ignored for this driver.
    """

    driver = Driver.ENTRAID
    default_scopes = ("openid", "profile", "email", "User.Read")
    fixed_endpoints = {"profile": GRAPH_PROFILE_URL}

    def prepare(self, config: AuthProviderConfig) -> Dict[str, Any]:
        tenant = config.tenant or DEFAULT_TENANT
        base = f"{LOGIN_BASE_URL}/{tenant}/oauth2/v2.0"

        updates = super().prepare(config)
        updates["endpoints"] = updates["endpoints"].model_copy(
            update={"auth": f"{base}/authorize", "token": f"{base}/token"}
        )
        updates["tenant"] = tenant

        return updates

    def extract_user(self, attrs: Dict[str, Any], diagnostics: Diagnostics) -> User:
        """Map a Graph ``/me`` document to a User.

        Graph has no handle, so the login is slugified from ``displayName``.
        """
        user = User(raw=attrs)

        user.ident = expect_string(attrs, "id", "ident", diagnostics) or ""

        display_name = expect_string(attrs, "displayName", "login", diagnostics)
        if display_name:
            user.login = slugify(display_name)

        user.name = expect_string(attrs, "displayName", "name", diagnostics) or ""
        user.email = expect_string(attrs, "mail", "email", diagnostics) or ""

        return user
