# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Name-keyed registry of configured identity providers."""

import os
from typing import Dict, Iterator, List, Optional

from gopad_logging import Logger, create_logger
from gopad_secrets import SecretResolver, create_secret_resolver

from .config import AuthConfig, load_auth_config
from .drivers import Driver
from .exceptions import ProviderNotFoundError
from .factory import create_identity_provider
from .provider import IdentityProvider

logger = create_logger(name="gopad_authn.registry")

CONFIG_ENV_VAR = "GOPAD_AUTH_CONFIG"


class ProviderRegistry:
    """Read-only mapping from provider name to provider.

    Populated once at startup by :func:`register`; lookups afterwards are
    safe from any number of concurrent requests.
    """

    def __init__(self, providers: Optional[Dict[str, IdentityProvider]] = None):
        self._providers: Dict[str, IdentityProvider] = dict(providers or {})

    def get(self, name: str) -> IdentityProvider:
        """Look up a provider by name.

        Raises:
            ProviderNotFoundError: If no provider is registered under the name
        """
        try:
            return self._providers[name]
        except KeyError:
            raise ProviderNotFoundError(f"unknown auth provider: {name}") from None

    def names(self) -> List[str]:
        return list(self._providers)

    def listing(self) -> List[Dict[str, str]]:
        """Return the metadata of every provider for the login page."""
        return [provider.describe() for provider in self._providers.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def __iter__(self) -> Iterator[IdentityProvider]:
        return iter(list(self._providers.values()))


def register(
    config_path: Optional[str] = None,
    resolver: Optional[SecretResolver] = None,
    provider_logger: Optional[Logger] = None,
) -> ProviderRegistry:
    """Build the provider registry from the configuration file.

    Entries are processed in file order. Every driver is validated before
    any provider is built, and the first failing entry aborts the whole
    registration.

    Args:
        config_path: Path to the provider file. None falls back to the
            GOPAD_AUTH_CONFIG environment variable; an empty path yields an
            empty registry.
        resolver: Secret resolver passed to every provider; built from the
            SECRET_PROVIDER_TYPE and SECRETS_BASE_PATH environment when omitted
        provider_logger: Logger override passed to every provider

    Returns:
        Populated ProviderRegistry

    Raises:
        ConfigNotFoundError: If the file does not exist
        UnsupportedConfigError: If the file format is not supported
        ConfigParseError: If the file is malformed
        UnknownDriverError: If an entry names an unsupported driver
        MissingIssuerEndpointError: If an OIDC entry has no issuer
        ProviderRegistrationError: If secrets or discovery fail
        SecretProviderError: If the configured secret backend is unusable
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR, "")

    if not config_path:
        logger.info("No auth config defined, external providers disabled")
        return ProviderRegistry()

    config: AuthConfig = load_auth_config(config_path)

    if resolver is None:
        resolver = create_secret_resolver()

    for entry in config.providers:
        Driver.parse(entry.driver)

    providers: Dict[str, IdentityProvider] = {}

    for entry in config.providers:
        if entry.name in providers:
            logger.warning(
                "Duplicate auth provider name, replacing earlier entry",
                name=entry.name,
                driver=entry.driver,
            )

        providers[entry.name] = create_identity_provider(
            entry,
            resolver=resolver,
            logger=provider_logger,
        )

    logger.info("Registered auth providers", count=len(providers), names=list(providers))
    return ProviderRegistry(providers)
