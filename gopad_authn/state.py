# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Signed OAuth2 state values keyed by the provider verifier.

A state has the form ``<issued>.<random>.<signature>`` where the signature is
an HMAC-SHA256 over the first two parts using the provider's verifier. The
OIDC nonce and the PKCE code verifier are derived from the same key and
state, so the callback can recompute them without server-side sessions.
"""

import base64
import hashlib
import hmac
import secrets
import time
from typing import Optional

from .exceptions import InvalidStateError

STATE_TTL_SECONDS = 600
MAX_CLOCK_SKEW_SECONDS = 60


def _mac(key: str, message: str) -> str:
    digest = hmac.new(key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def new_state(key: str, now: Optional[float] = None) -> str:
    """Create a fresh signed state.

    Args:
        key: Provider verifier
        now: Current UNIX time, for tests

    Returns:
        Signed state string
    """
    issued = int(now if now is not None else time.time())
    payload = f"{issued}.{secrets.token_urlsafe(16)}"
    return f"{payload}.{_mac(key, payload)}"


def verify_state(
    key: str,
    state: Optional[str],
    max_age: int = STATE_TTL_SECONDS,
    now: Optional[float] = None,
) -> None:
    """Check signature and age of a state returned on the callback.

    Raises:
        InvalidStateError: If the state is missing, forged or expired
    """
    if not state:
        raise InvalidStateError("missing state")

    if not state.isascii():
        raise InvalidStateError("malformed state")

    parts = state.split(".")
    if len(parts) != 3:
        raise InvalidStateError("malformed state")

    issued_raw, random_part, signature = parts
    payload = f"{issued_raw}.{random_part}"

    if not hmac.compare_digest(_mac(key, payload).encode("ascii"), signature.encode("ascii")):
        raise InvalidStateError("state signature mismatch")

    try:
        issued = int(issued_raw)
    except ValueError as e:
        raise InvalidStateError("malformed state") from e

    current = now if now is not None else time.time()
    age = current - issued

    if age < -MAX_CLOCK_SKEW_SECONDS:
        raise InvalidStateError("state issued in the future")

    if age > max_age:
        raise InvalidStateError(f"state expired (age: {age:.0f}s, TTL: {max_age}s)")


def derive_nonce(key: str, state: str) -> str:
    """Derive the OIDC nonce bound to a state."""
    return _mac(key, f"nonce:{state}")


def derive_code_verifier(key: str, state: str) -> str:
    """Derive the PKCE code verifier bound to a state.

    The result is 43 characters of base64url, the minimum length PKCE allows.
    """
    return _mac(key, f"pkce:{state}")
