# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Errors raised while looking up provider credentials.

Provider lookups raise ``SecretNotFoundError`` or ``SecretProviderError``;
the resolver wraps both in ``SecretResolutionError`` so callers handling
configuration values only need to catch one type.
"""


class SecretError(Exception):
    """Base exception for secret management errors."""


class SecretNotFoundError(SecretError):
    """A secret backend has no value for the requested name.

    Attributes:
        key_name: Name that was looked up
    """

    def __init__(self, key_name: str):
        super().__init__(f"Secret not found: {key_name}")
        self.key_name = key_name


class SecretProviderError(SecretError):
    """The backend is misconfigured or failed to read a secret."""


class SecretResolutionError(SecretError):
    """A ``file://``, ``env://``, ``base64://`` or ``secret://`` value could not be resolved."""
