# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Generic OpenID Connect identity provider.

Endpoints are discovered from ``{issuer}/.well-known/openid-configuration``
at registration time. Claims are taken from the verified ID token and mapped
onto the user through the configurable ``mappings`` block.
"""

import threading
from typing import Any, Dict, List, Optional

import httpx
import jwt

from .claims import Diagnostics, expect_string, expect_string_list
from .config import AuthProviderConfig
from .drivers import Driver
from .exceptions import (
    AuthenticationError,
    MissingIssuerEndpointError,
    MissingTokenError,
    ProviderError,
    ProviderRegistrationError,
)
from .models import User
from .oauth2 import OAuth2Config, OAuth2Token
from .provider import IdentityProvider

DISCOVERY_PATH = "/.well-known/openid-configuration"
REQUIRED_DISCOVERY_FIELDS = ("authorization_endpoint", "token_endpoint", "jwks_uri")
DEFAULT_SIGNING_ALGORITHMS = ["RS256"]

# Clock skew tolerance for exp/iat/nbf
LEEWAY_SECONDS = 60


def discovery_url(issuer: str) -> str:
    return issuer.rstrip("/") + DISCOVERY_PATH


class OIDCProvider(IdentityProvider):
    """Identity provider for any standards-compliant OIDC issuer.

    Attributes:
        discovery: Discovery document fetched at registration
        algorithms: ID-token signing algorithms accepted from the issuer
    """

    driver = Driver.OIDC
    default_scopes = ("openid", "profile", "email")
    uses_nonce = True

    def prepare(self, config: AuthProviderConfig) -> Dict[str, Any]:
        if not config.endpoints.issuer:
            raise MissingIssuerEndpointError(
                f"missing issuer endpoint for oidc provider {config.name}"
            )
        return {}

    def build_oauth2(self) -> OAuth2Config:
        self._jwks_lock = threading.Lock()
        self._jwks: Optional[jwt.PyJWKSet] = None

        self.discovery = self.discover(self.config.endpoints.issuer, self.config.discovery_timeout)
        self.algorithms = self._signing_algorithms(self.discovery)

        endpoints = self.config.endpoints.model_copy(
            update={
                "auth": self.discovery["authorization_endpoint"],
                "token": self.discovery["token_endpoint"],
                "profile": self.discovery.get("userinfo_endpoint") or "",
            }
        )
        self.config = self.config.model_copy(update={"endpoints": endpoints})

        return super().build_oauth2()

    def discover(self, issuer: str, timeout: float) -> Dict[str, Any]:
        """Fetch and validate the issuer's discovery document.

        Args:
            issuer: Configured issuer URL
            timeout: Request timeout in seconds

        Returns:
            Discovery document

        Raises:
            ProviderRegistrationError: If the document is unreachable, malformed,
                lacks a required endpoint or announces a different issuer
        """
        url = discovery_url(issuer)

        try:
            response = httpx.get(url, headers={"Accept": "application/json"}, timeout=timeout)
        except httpx.HTTPError as e:
            raise ProviderRegistrationError(f"failed to discover oidc provider {self.name}: {e}") from e

        if response.status_code != 200:
            raise ProviderRegistrationError(
                f"failed to discover oidc provider {self.name}: bad status code returned: {response.status_code}"
            )

        try:
            document = response.json()
        except ValueError as e:
            raise ProviderRegistrationError(f"failed to decode discovery document of {self.name}: {e}") from e

        if not isinstance(document, dict):
            raise ProviderRegistrationError(
                f"failed to decode discovery document of {self.name}: expected an object"
            )

        missing = [key for key in REQUIRED_DISCOVERY_FIELDS if not document.get(key)]
        if missing:
            raise ProviderRegistrationError(
                f"discovery document of {self.name} is missing {', '.join(missing)}"
            )

        announced = str(document.get("issuer") or "")
        if announced.rstrip("/") != issuer.rstrip("/"):
            raise ProviderRegistrationError(
                f"issuer did not match the issuer returned by provider, expected {issuer!r} got {announced!r}"
            )

        self.logger.debug("Discovered oidc provider", issuer=announced, **self.log_context)
        return document

    @staticmethod
    def _signing_algorithms(document: Dict[str, Any]) -> List[str]:
        announced = document.get("id_token_signing_alg_values_supported")
        if not isinstance(announced, list):
            return list(DEFAULT_SIGNING_ALGORITHMS)

        # JWKS only carries public keys, symmetric and unsigned tokens are refused
        algorithms = [
            alg for alg in announced
            if isinstance(alg, str) and alg != "none" and not alg.startswith("HS")
        ]
        return algorithms or list(DEFAULT_SIGNING_ALGORITHMS)

    def fetch_attributes(
        self,
        token: OAuth2Token,
        nonce: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        raw = token.extra_value("id_token")
        if not raw or not isinstance(raw, str):
            raise MissingTokenError("no id_token in token response")

        return self.verify_id_token(raw, nonce=nonce, timeout=timeout)

    def verify_id_token(
        self,
        raw: str,
        nonce: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Verify an ID token against the issuer's keys.

        Signature, issuer, audience (the client id) and expiry are checked.
        The nonce is checked only when one is given.

        Args:
            raw: Encoded ID token
            nonce: Expected nonce
            timeout: Timeout for fetching the JWKS

        Returns:
            Verified claims

        Raises:
            AuthenticationError: If the token fails verification
            ProviderError: If the JWKS cannot be fetched
        """
        try:
            header = jwt.get_unverified_header(raw)
        except jwt.PyJWTError as e:
            raise AuthenticationError(f"failed to verify token: {e}") from e

        key = self._signing_key(header.get("kid"), timeout)

        try:
            claims = jwt.decode(
                raw,
                key=key.key,
                algorithms=self.algorithms,
                audience=self.config.client_id,
                issuer=self.discovery["issuer"],
                leeway=LEEWAY_SECONDS,
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            raise AuthenticationError(f"failed to verify token: {e}") from e

        if nonce is not None and claims.get("nonce") != nonce:
            raise AuthenticationError("failed to verify token: nonce mismatch")

        return claims

    def _signing_key(self, kid: Optional[str], timeout: Optional[float]) -> jwt.PyJWK:
        with self._jwks_lock:
            fetched = False
            if self._jwks is None:
                self._jwks = self._fetch_jwks(timeout)
                fetched = True

            key = _find_key(self._jwks, kid)

            # Keys rotate, refetch once before giving up
            if key is None and not fetched:
                self._jwks = self._fetch_jwks(timeout)
                key = _find_key(self._jwks, kid)

        if key is None:
            raise AuthenticationError(f"failed to verify token: no signing key found for kid {kid!r}")

        return key

    def _fetch_jwks(self, timeout: Optional[float]) -> jwt.PyJWKSet:
        try:
            response = httpx.get(
                self.discovery["jwks_uri"],
                headers={"Accept": "application/json"},
                timeout=timeout or self.config.discovery_timeout,
            )
        except httpx.HTTPError as e:
            raise ProviderError(f"failed to fetch JWKS: {e}") from e

        if response.status_code != 200:
            raise ProviderError(f"failed to fetch JWKS: bad status code returned: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"failed to decode JWKS: {e}") from e

        if not isinstance(data, dict):
            raise ProviderError("failed to decode JWKS: expected an object")

        try:
            return jwt.PyJWKSet.from_dict(data)
        except jwt.PyJWTError as e:
            raise ProviderError(f"failed to decode JWKS: {e}") from e

    def extract_user(self, attrs: Dict[str, Any], diagnostics: Diagnostics) -> User:
        mappings = self.config.mappings
        user = User(raw=attrs)

        user.ident = expect_string(attrs, "sub", "ident", diagnostics) or ""

        if mappings.login:
            user.login = expect_string(attrs, mappings.login, "login", diagnostics) or ""

        if mappings.name:
            user.name = expect_string(attrs, mappings.name, "name", diagnostics) or ""

        if mappings.email:
            user.email = expect_string(attrs, mappings.email, "email", diagnostics) or ""

        if mappings.role:
            user.roles = expect_string_list(attrs, mappings.role, "roles", diagnostics)

        return user


def _find_key(jwks: jwt.PyJWKSet, kid: Optional[str]) -> Optional[jwt.PyJWK]:
    if kid is None:
        # Issuers with a single key may omit the kid header
        return jwks.keys[0] if len(jwks.keys) == 1 else None

    for key in jwks.keys:
        if key.key_id == kid:
            return key

    return None
