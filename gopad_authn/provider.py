# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Abstract identity provider interface for external authentication.

This module defines the contract every provider family implements and the
construction rules they share: secret resolution, verifier generation,
default scopes and endpoints, and the claims pipeline that turns a token
into a normalized User.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Optional, Tuple

import httpx

from gopad_logging import Logger, create_logger
from gopad_secrets import SecretResolutionError, SecretResolver

from . import secret, state
from .claims import Diagnostics
from .config import AuthEndpoints, AuthProviderConfig
from .drivers import Driver
from .exceptions import AuthenticationError, ProviderError, ProviderRegistrationError
from .models import User
from .oauth2 import OAuth2Config, OAuth2Token

default_logger = create_logger(name="gopad_authn.provider")

VERIFIER_LENGTH = 32


def decode_json_object(response: httpx.Response, what: str) -> Dict[str, Any]:
    """Decode a JSON object body.

    Raises:
        ProviderError: If the body is not valid JSON or not an object
    """
    try:
        data = response.json()
    except ValueError as e:
        raise ProviderError(f"failed to decode {what}: {e}") from e

    if not isinstance(data, dict):
        raise ProviderError(f"failed to decode {what}: expected an object")

    return data


class IdentityProvider(ABC):
    """Abstract base class for identity providers.

    Subclasses declare their driver, default scopes and endpoints, and
    implement ``extract_user`` to map the provider's claim schema onto
    :class:`User`. Instances are built once at startup and not mutated
    afterwards, so they can be shared across concurrent logins.

    Attributes:
        config: Resolved provider configuration (secrets resolved, defaults applied)
        oauth2: OAuth2 client configuration
        logger: Logger receiving registration and diagnostic records
        log_context: Fields attached to every record of this provider
    """

    driver: ClassVar[Driver]
    default_scopes: ClassVar[Tuple[str, ...]] = ()
    # Applied only where the configuration leaves the endpoint empty
    default_endpoints: ClassVar[Dict[str, str]] = {}
    # Always applied, configuration cannot override them
    fixed_endpoints: ClassVar[Dict[str, str]] = {}
    # OIDC providers bind a nonce into the ID token
    uses_nonce: ClassVar[bool] = False

    def __init__(
        self,
        config: AuthProviderConfig,
        resolver: Optional[SecretResolver] = None,
        logger: Optional[Logger] = None,
    ):
        """Build the provider from its configuration entry.

        Args:
            config: Provider entry of the configuration file
            resolver: Resolver for client_id, client_secret and verifier
            logger: Logger override, mostly for tests

        Raises:
            ProviderRegistrationError: If a secret cannot be resolved
            MissingIssuerEndpointError: If a required endpoint is missing
        """
        self.logger = logger or default_logger
        self.log_context = {
            "service": "provider",
            "provider": self.driver.value,
            "name": config.name,
        }

        self.logger.info("Registering auth provider", **self.log_context)

        resolver = resolver or SecretResolver()
        updates = self.prepare(config)

        updates["scopes"] = list(config.scopes) if config.scopes else list(self.default_scopes)
        updates["client_id"] = self._resolve(resolver, config, "client_id")
        updates["client_secret"] = self._resolve(resolver, config, "client_secret")
        updates["verifier"] = self._resolve(resolver, config, "verifier") or secret.generate(VERIFIER_LENGTH)

        self.config: AuthProviderConfig = config.model_copy(update=updates)
        self.oauth2: OAuth2Config = self.build_oauth2()

    def prepare(self, config: AuthProviderConfig) -> Dict[str, Any]:
        """Validate the entry and compute configuration updates before secrets are resolved.

        Returns:
            Field updates for the resolved configuration
        """
        values = config.endpoints.model_dump()

        for key, default in self.default_endpoints.items():
            if not values.get(key):
                values[key] = default

        values.update(self.fixed_endpoints)

        return {"endpoints": AuthEndpoints(**values)}

    def build_oauth2(self) -> OAuth2Config:
        """Build the OAuth2 client configuration from the resolved config."""
        return OAuth2Config(
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            auth_url=self.config.endpoints.auth,
            token_url=self.config.endpoints.token,
            redirect_url=self.config.callback,
            scopes=list(self.config.scopes),
        )

    def _resolve(self, resolver: SecretResolver, config: AuthProviderConfig, field_name: str) -> str:
        try:
            return resolver.resolve(getattr(config, field_name))
        except SecretResolutionError as e:
            raise ProviderRegistrationError(
                f"failed to resolve {field_name} for provider {config.name}: {e}"
            ) from e

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def display(self) -> str:
        return self.config.display or self.config.name

    @property
    def icon(self) -> str:
        return self.config.icon or self.driver.value

    @property
    def scopes(self) -> list[str]:
        return list(self.config.scopes)

    @property
    def endpoints(self) -> AuthEndpoints:
        return self.config.endpoints

    @property
    def verifier(self) -> str:
        return self.config.verifier

    def describe(self) -> Dict[str, str]:
        """Return the metadata rendered on the login page."""
        return {
            "name": self.name,
            "display": self.display,
            "icon": self.icon,
            "driver": self.driver.value,
        }

    def new_state(self) -> str:
        """Create a signed state for a new login attempt."""
        return state.new_state(self.verifier)

    def verify_state(self, value: Optional[str]) -> None:
        """Validate a state returned on the callback.

        Raises:
            InvalidStateError: If the state is missing, forged or expired
        """
        state.verify_state(self.verifier, value)

    def nonce_for(self, value: str) -> Optional[str]:
        """Return the nonce bound to a state, for providers issuing ID tokens."""
        if not self.uses_nonce:
            return None
        return state.derive_nonce(self.verifier, value)

    def authorization_url(self, value: str, prompt: Optional[str] = None) -> str:
        """Build the redirect URL that starts a login for the given state."""
        return self.oauth2.authorization_url(
            state=value,
            nonce=self.nonce_for(value),
            code_verifier=state.derive_code_verifier(self.verifier, value),
            prompt=prompt,
        )

    def exchange(self, code: str, value: str, timeout: Optional[float] = None) -> OAuth2Token:
        """Exchange the callback's authorization code for tokens.

        Raises:
            AuthenticationError: If the provider rejects the code
            ProviderError: If the token endpoint is unavailable
        """
        return self.oauth2.exchange(
            code,
            code_verifier=state.derive_code_verifier(self.verifier, value),
            timeout=timeout,
        )

    def claims(
        self,
        token: OAuth2Token,
        nonce: Optional[str] = None,
        diagnostics: Optional[Diagnostics] = None,
        timeout: Optional[float] = None,
    ) -> User:
        """Fetch the user's claims and normalize them.

        Args:
            token: Token obtained from the authorization-code exchange
            nonce: Expected ID-token nonce (OIDC only)
            diagnostics: Collector for normalization anomalies; when omitted
                every anomaly is logged as a warning instead
            timeout: Timeout in seconds for each network call

        Returns:
            Normalized user

        Raises:
            AuthenticationError: If the token is rejected or invalid
            ProviderError: If the provider is unavailable or returns garbage
        """
        attrs = self.fetch_attributes(token, nonce=nonce, timeout=timeout)

        collector = diagnostics if diagnostics is not None else Diagnostics()
        user = self.extract_user(attrs, collector)
        user = self.complete_user(user, token, timeout=timeout)

        if diagnostics is None:
            self.report(collector)

        return user

    def fetch_attributes(
        self,
        token: OAuth2Token,
        nonce: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Retrieve the raw claims from the provider's profile endpoint."""
        try:
            response = self.oauth2.get(self.endpoints.profile, token, timeout=timeout)
        except httpx.HTTPError as e:
            raise ProviderError(f"failed to fetch userinfo: {e}") from e

        if response.status_code != 200:
            raise AuthenticationError(f"bad status code returned: {response.status_code}")

        return decode_json_object(response, "userinfo")

    @abstractmethod
    def extract_user(self, attrs: Dict[str, Any], diagnostics: Diagnostics) -> User:
        """Map provider-specific claims to a User.

        Never raises for missing or mistyped claims; those leave the field
        empty and are recorded in ``diagnostics``.

        Args:
            attrs: Raw claims
            diagnostics: Collector for anomalies

        Returns:
            Normalized user carrying ``attrs`` as raw claims
        """
        pass

    def complete_user(self, user: User, token: OAuth2Token, timeout: Optional[float] = None) -> User:
        """Fill fields that need additional provider requests. No-op by default."""
        return user

    def report(self, diagnostics: Diagnostics) -> None:
        """Log every diagnostic as a structured warning."""
        for entry in diagnostics:
            self.logger.warning(entry.message, **self.log_context, **entry.to_dict())
