# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Factory for creating identity providers from configuration entries.

Every :class:`Driver` member maps to exactly one provider class, so adding a
driver without a builder is caught by the test suite rather than at login.
"""

from typing import Dict, Optional, Type

from gopad_logging import Logger
from gopad_secrets import SecretResolver

from .config import AuthProviderConfig
from .drivers import Driver
from .entraid_provider import EntraIDProvider
from .gitea_provider import GiteaProvider
from .github_provider import GitHubProvider
from .gitlab_provider import GitLabProvider
from .google_provider import GoogleProvider
from .oidc_provider import OIDCProvider
from .provider import IdentityProvider

PROVIDER_CLASSES: Dict[Driver, Type[IdentityProvider]] = {
    Driver.ENTRAID: EntraIDProvider,
    Driver.GOOGLE: GoogleProvider,
    Driver.GITHUB: GitHubProvider,
    Driver.GITEA: GiteaProvider,
    Driver.GITLAB: GitLabProvider,
    Driver.OIDC: OIDCProvider,
}


def create_identity_provider(
    config: AuthProviderConfig,
    resolver: Optional[SecretResolver] = None,
    logger: Optional[Logger] = None,
) -> IdentityProvider:
    """Create an identity provider for a configuration entry.

    Args:
        config: Provider entry of the configuration file
        resolver: Secret resolver for client credentials and verifier
        logger: Logger override passed to the provider

    Returns:
        IdentityProvider instance for the entry's driver

    Raises:
        UnknownDriverError: If the driver is not supported
        MissingIssuerEndpointError: If an OIDC entry has no issuer
        ProviderRegistrationError: If secrets or discovery fail

    Examples:
        >>> provider = create_identity_provider(
        ...     AuthProviderConfig(
        ...         driver="github",
        ...         name="github",
        ...         client_id="env://GITHUB_CLIENT_ID",
        ...         client_secret="file:///run/secrets/github",
        ...     )
        ... )
    """
    driver = Driver.parse(config.driver)
    provider_class = PROVIDER_CLASSES[driver]

    return provider_class(config, resolver=resolver, logger=logger)
