# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""OAuth2 authorization-code client configuration.

Builds authorization URLs, exchanges authorization codes for tokens, and
performs token-authenticated requests against provider APIs.
"""

import base64
import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl

import httpx

from .exceptions import AuthenticationError, ProviderError

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class OAuth2Token:
    """Token response of an authorization-code exchange.

    Attributes:
        access_token: Token used for API requests
        token_type: Authorization scheme, normalized to "Bearer"
        refresh_token: Optional refresh token
        expires_in: Optional lifetime in seconds
        extra: Every field of the raw token response, e.g. ``id_token``
    """
    access_token: str
    token_type: str = "Bearer"
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "OAuth2Token":
        """Build a token from a decoded token endpoint response.

        Raises:
            AuthenticationError: If the response carries an error or no access token
        """
        if data.get("error"):
            description = data.get("error_description") or data["error"]
            raise AuthenticationError(f"token exchange failed: {description}")

        access_token = data.get("access_token")
        if not access_token or not isinstance(access_token, str):
            raise AuthenticationError("no access token in response")

        token_type = str(data.get("token_type") or "Bearer")
        if token_type.lower() == "bearer":
            token_type = "Bearer"

        expires_in = data.get("expires_in")
        try:
            expires_in = int(expires_in) if expires_in is not None else None
        except (TypeError, ValueError):
            expires_in = None

        return cls(
            access_token=access_token,
            token_type=token_type,
            refresh_token=data.get("refresh_token") or None,
            expires_in=expires_in,
            extra=dict(data),
        )

    def extra_value(self, key: str) -> Any:
        """Return a raw field of the token response, or None."""
        return self.extra.get(key)

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"


def code_challenge(code_verifier: str) -> str:
    """Compute the S256 PKCE challenge for a code verifier."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


@dataclass(frozen=True)
class OAuth2Config:
    """Client registration and endpoints of one OAuth2 provider.

    Attributes:
        client_id: OAuth client ID
        client_secret: OAuth client secret
        auth_url: Authorization endpoint
        token_url: Token endpoint
        redirect_url: Callback URL registered with the provider
        scopes: Scopes requested during authorization
    """
    client_id: str
    client_secret: str
    auth_url: str
    token_url: str
    redirect_url: str = ""
    scopes: List[str] = field(default_factory=list)

    def authorization_url(
        self,
        state: str,
        nonce: Optional[str] = None,
        code_verifier: Optional[str] = None,
        prompt: Optional[str] = None,
    ) -> str:
        """Build the URL the user agent is redirected to.

        Args:
            state: Opaque CSRF state echoed back on the callback
            nonce: OIDC nonce bound into the ID token
            code_verifier: PKCE verifier; its S256 challenge is sent
            prompt: Optional OAuth prompt parameter (e.g. "select_account")

        Returns:
            Absolute authorization URL
        """
        params: Dict[str, str] = {
            "client_id": self.client_id,
            "response_type": "code",
            "state": state,
        }

        if self.redirect_url:
            params["redirect_uri"] = self.redirect_url

        if self.scopes:
            params["scope"] = " ".join(self.scopes)

        if nonce:
            params["nonce"] = nonce

        if code_verifier:
            params["code_challenge"] = code_challenge(code_verifier)
            params["code_challenge_method"] = "S256"

        if prompt:
            params["prompt"] = prompt

        return str(httpx.URL(self.auth_url).copy_merge_params(params))

    def exchange(
        self,
        code: str,
        code_verifier: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> OAuth2Token:
        """Exchange an authorization code for tokens.

        Args:
            code: Authorization code from the callback
            code_verifier: PKCE verifier used when building the authorization URL
            timeout: Request timeout in seconds

        Returns:
            Parsed token response

        Raises:
            AuthenticationError: If the provider rejects the code
            ProviderError: If the token endpoint is unavailable or unreadable
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

        if self.redirect_url:
            data["redirect_uri"] = self.redirect_url

        if code_verifier:
            data["code_verifier"] = code_verifier

        try:
            response = httpx.post(
                self.token_url,
                data=data,
                headers={"Accept": "application/json"},
                timeout=timeout or DEFAULT_TIMEOUT,
            )
        except httpx.HTTPError as e:
            raise ProviderError(f"token endpoint unavailable: {e}") from e

        if response.status_code >= 400:
            raise AuthenticationError(f"token exchange failed: status {response.status_code}")

        return OAuth2Token.from_response(_decode_token_response(response))

    def get(self, url: str, token: OAuth2Token, timeout: Optional[float] = None) -> httpx.Response:
        """Perform a GET request authenticated with the token.

        Raises:
            httpx.HTTPError: On transport failures
        """
        return httpx.get(
            url,
            headers={
                "Authorization": token.authorization,
                "Accept": "application/json",
            },
            timeout=timeout or DEFAULT_TIMEOUT,
        )


def _decode_token_response(response: httpx.Response) -> Dict[str, Any]:
    content_type = response.headers.get("content-type", "")

    if "application/x-www-form-urlencoded" in content_type or "text/plain" in content_type:
        return dict(parse_qsl(response.text))

    try:
        data = response.json()
    except ValueError as e:
        raise ProviderError(f"failed to decode token response: {e}") from e

    if not isinstance(data, dict):
        raise ProviderError("failed to decode token response: expected an object")

    return data
