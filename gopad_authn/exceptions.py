# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Exceptions raised by the identity federation layer."""


class AuthnError(Exception):
    """Base exception for identity federation errors."""
    pass


class ConfigError(AuthnError):
    """Raised when the provider configuration cannot be used."""
    pass


class ConfigNotFoundError(ConfigError):
    """Raised when the provider configuration file does not exist."""
    pass


class UnsupportedConfigError(ConfigError):
    """Raised when the provider configuration file has an unsupported format."""
    pass


class ConfigParseError(ConfigError):
    """Raised when the provider configuration file cannot be parsed."""
    pass


class UnknownDriverError(ConfigError):
    """Raised when a provider entry names a driver that is not supported."""
    pass


class MissingIssuerEndpointError(ConfigError):
    """Raised when an OIDC provider is configured without an issuer."""
    pass


class ProviderRegistrationError(ConfigError):
    """Raised when a provider cannot be constructed from its configuration."""
    pass


class ProviderNotFoundError(AuthnError):
    """Raised when no provider is registered under the requested name."""
    pass


class AuthenticationError(AuthnError):
    """Raised when authentication fails due to invalid credentials or tokens."""
    pass


class MissingTokenError(AuthenticationError):
    """Raised when the token response carries no ID token."""
    pass


class InvalidStateError(AuthenticationError):
    """Raised when the OAuth2 state parameter is missing, forged or expired."""
    pass


class ProviderError(AuthnError):
    """Raised when the identity provider is unavailable or returns garbage."""
    pass


class ProvisioningError(AuthnError):
    """Raised when a local account cannot be created from an external identity."""
    pass
