# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Secret management adapter for provider credentials.

Resolves configuration values that may be literals or references to
environment variables, files, base64 payloads, or a secret store.

Example:
    >>> from gopad_secrets import SecretResolver, create_secret_provider
    >>> resolver = SecretResolver(create_secret_provider("local", base_path="/run/secrets"))
    >>> client_secret = resolver.resolve("secret://github_client_secret")
"""

from .exceptions import SecretError, SecretNotFoundError, SecretProviderError, SecretResolutionError
from .provider import SecretProvider
from .local_provider import LocalFileSecretProvider
from .env_provider import EnvSecretProvider
from .factory import create_secret_provider, create_secret_resolver
from .resolver import SecretResolver

__all__ = [
    "SecretProvider",
    "LocalFileSecretProvider",
    "EnvSecretProvider",
    "SecretResolver",
    "create_secret_provider",
    "create_secret_resolver",
    "SecretError",
    "SecretNotFoundError",
    "SecretProviderError",
    "SecretResolutionError",
]

__version__ = "0.1.0"
