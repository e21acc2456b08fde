# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Factory for creating secret providers."""

import os
from typing import Any, Dict, Optional, cast

from .env_provider import EnvSecretProvider
from .exceptions import SecretProviderError
from .local_provider import LocalFileSecretProvider
from .provider import SecretProvider
from .resolver import SecretResolver

DEFAULT_SECRETS_BASE_PATH = "/run/secrets"


def create_secret_provider(provider_type: str, **kwargs: Any) -> SecretProvider:
    """Factory function to create secret providers.

    Args:
        provider_type: Type of provider to create ("local" or "env")
        **kwargs: Provider-specific configuration

    Returns:
        SecretProvider instance

    Raises:
        SecretProviderError: If provider_type is unknown

    Example:
        >>> provider = create_secret_provider("local", base_path="/run/secrets")
        >>> provider = create_secret_provider("env", prefix="AUTH_")
    """
    providers: dict[str, type] = {
        "local": LocalFileSecretProvider,
        "env": EnvSecretProvider,
    }

    if provider_type not in providers:
        raise SecretProviderError(
            f"Unknown provider type: {provider_type}. "
            f"Available: {', '.join(providers.keys())}"
        )

    provider_class = providers[provider_type]
    return cast(SecretProvider, provider_class(**kwargs))


def create_secret_resolver(environ: Optional[Dict[str, str]] = None) -> SecretResolver:
    """Create a resolver whose ``secret://`` backend is configured from environment.

    ``SECRET_PROVIDER_TYPE`` selects the backend ("local" when only
    ``SECRETS_BASE_PATH`` is set). The local backend reads
    ``SECRETS_BASE_PATH`` (default /run/secrets), the env backend reads
    ``SECRETS_ENV_PREFIX``. With neither variable set, ``secret://``
    references are not available.

    Args:
        environ: Environment mapping, defaults to os.environ

    Returns:
        SecretResolver instance

    Raises:
        SecretProviderError: If the configured backend cannot be created
    """
    environ = environ if environ is not None else os.environ

    provider_type = environ.get("SECRET_PROVIDER_TYPE", "")
    base_path = environ.get("SECRETS_BASE_PATH", "")

    if not provider_type and not base_path:
        return SecretResolver(environ=environ)

    provider_type = provider_type or "local"

    if provider_type == "local":
        provider = create_secret_provider("local", base_path=base_path or DEFAULT_SECRETS_BASE_PATH)
    elif provider_type == "env":
        prefix = environ.get("SECRETS_ENV_PREFIX")
        kwargs: Dict[str, Any] = {"environ": environ}
        if prefix:
            kwargs["prefix"] = prefix
        provider = create_secret_provider("env", **kwargs)
    else:
        provider = create_secret_provider(provider_type)

    return SecretResolver(provider, environ=environ)
