# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Shared fixtures for the identity federation tests."""

from __future__ import annotations

import time
from typing import Any

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

from gopad_authn.config import AuthProviderConfig
from gopad_logging import SilentLogger
from gopad_secrets import SecretResolver

ISSUER = "https://sso.example.com/realms/gopad"
JWKS_URI = f"{ISSUER}/protocol/openid-connect/certs"
SIGNING_KID = "test-key-id"


def make_response(status_code: int = 200, json: Any = None, url: str = "https://idp.example.com", **kwargs) -> httpx.Response:
    """Build a real httpx response for patched httpx calls."""
    return httpx.Response(
        status_code,
        json=json,
        request=httpx.Request("GET", url),
        **kwargs,
    )


def make_config(driver: str = "github", name: str | None = None, **kwargs: Any) -> AuthProviderConfig:
    """Build a provider entry with literal credentials."""
    data = {
        "driver": driver,
        "name": name or driver,
        "callback": f"https://pad.example.com/auth/{name or driver}/callback",
        "client_id": "client-id",
        "client_secret": "client-secret",
        "verifier": "test-verifier",
    }
    data.update(kwargs)
    return AuthProviderConfig.model_validate(data)


def discovery_document(issuer: str = ISSUER, **overrides: Any) -> dict[str, Any]:
    document = {
        "issuer": issuer,
        "authorization_endpoint": f"{issuer}/protocol/openid-connect/auth",
        "token_endpoint": f"{issuer}/protocol/openid-connect/token",
        "userinfo_endpoint": f"{issuer}/protocol/openid-connect/userinfo",
        "jwks_uri": JWKS_URI,
        "id_token_signing_alg_values_supported": ["RS256"],
    }
    document.update(overrides)
    return document


@pytest.fixture
def silent_logger():
    """Logger capturing records in memory."""
    return SilentLogger(name="test")


@pytest.fixture
def resolver():
    """Secret resolver isolated from the process environment."""
    return SecretResolver(environ={})


@pytest.fixture(scope="session")
def rsa_key():
    """RSA key pair used to sign test ID tokens."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def jwks(rsa_key):
    """JWKS document publishing the test signing key."""
    public_jwk = RSAAlgorithm.to_jwk(rsa_key.public_key(), as_dict=True)
    public_jwk.update({"kid": SIGNING_KID, "use": "sig", "alg": "RS256"})
    return {"keys": [public_jwk]}


@pytest.fixture
def sign_id_token(rsa_key):
    """Return a function minting ID tokens signed with the test key."""

    def _sign(claims: dict[str, Any] | None = None, kid: str = SIGNING_KID, **overrides: Any) -> str:
        now = int(time.time())
        payload = {
            "iss": ISSUER,
            "aud": "client-id",
            "sub": "f3b1c2d4",
            "iat": now,
            "exp": now + 300,
        }
        payload.update(claims or {})
        payload.update(overrides)
        return jwt.encode(payload, rsa_key, algorithm="RS256", headers={"kid": kid})

    return _sign


@pytest.fixture
def discovery_get():
    """Patched httpx.get serving the discovery document only."""
    def _get(url, **kwargs):
        if url == f"{ISSUER}/.well-known/openid-configuration":
            return make_response(200, json=discovery_document(), url=url)
        raise AssertionError(f"unexpected GET {url}")

    return _get
