# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""gopad external identity federation.

Registers the configured identity providers (generic OIDC, Microsoft
Entra ID, Google, GitHub, Gitea and GitLab), runs the authorization-code
flow against them, and normalizes the returned claims into a canonical
user with diagnostics for every claim that could not be mapped.
"""

__version__ = "0.1.0"

from .app import create_app
from .claims import Diagnostic, Diagnostics, expect_numeric_id, expect_string, expect_string_list
from .config import AuthAdmins, AuthConfig, AuthEndpoints, AuthMappings, AuthProviderConfig, load_auth_config
from .drivers import Driver
from .entraid_provider import EntraIDProvider
from .exceptions import (
    AuthenticationError,
    AuthnError,
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    InvalidStateError,
    MissingIssuerEndpointError,
    MissingTokenError,
    ProviderError,
    ProviderNotFoundError,
    ProviderRegistrationError,
    ProvisioningError,
    UnknownDriverError,
    UnsupportedConfigError,
)
from .factory import create_identity_provider
from .gitea_provider import GiteaProvider
from .github_provider import GitHubProvider
from .gitlab_provider import GitLabProvider
from .google_provider import GoogleProvider
from .models import User
from .oauth2 import OAuth2Config, OAuth2Token
from .oidc_provider import OIDCProvider
from .provider import IdentityProvider
from .provisioning import ExternalUserStore, InMemoryUserStore, ProvisionedUser, resolve_admin
from .registry import ProviderRegistry, register
from .routes import create_auth_router
from .service import LoginResult, LoginService

__all__ = [
    # Version
    "__version__",
    # Models
    "User",
    "ProvisionedUser",
    "LoginResult",
    # Configuration
    "AuthConfig",
    "AuthProviderConfig",
    "AuthEndpoints",
    "AuthMappings",
    "AuthAdmins",
    "load_auth_config",
    # Providers
    "Driver",
    "IdentityProvider",
    "OIDCProvider",
    "EntraIDProvider",
    "GoogleProvider",
    "GitHubProvider",
    "GiteaProvider",
    "GitLabProvider",
    "OAuth2Config",
    "OAuth2Token",
    # Registry and factory
    "ProviderRegistry",
    "register",
    "create_identity_provider",
    # Claims
    "Diagnostic",
    "Diagnostics",
    "expect_string",
    "expect_string_list",
    "expect_numeric_id",
    # Login flow
    "ExternalUserStore",
    "InMemoryUserStore",
    "resolve_admin",
    "LoginService",
    "create_auth_router",
    "create_app",
    # Exceptions
    "AuthnError",
    "ConfigError",
    "ConfigNotFoundError",
    "UnsupportedConfigError",
    "ConfigParseError",
    "UnknownDriverError",
    "MissingIssuerEndpointError",
    "ProviderRegistrationError",
    "ProviderNotFoundError",
    "AuthenticationError",
    "MissingTokenError",
    "InvalidStateError",
    "ProviderError",
    "ProvisioningError",
]
