# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""External login flow built on the provider registry."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from gopad_logging import create_logger

from .claims import Diagnostic, Diagnostics
from .exceptions import AuthenticationError, AuthnError
from .models import User
from .provisioning import ExternalUserStore, ProvisionedUser, resolve_admin
from .registry import ProviderRegistry

logger = create_logger(name="gopad_authn.service")


@dataclass
class LoginResult:
    """Outcome of a completed external login.

    Attributes:
        user: Local account the login was provisioned into
        identity: Normalized identity reported by the provider
        diagnostics: Claims that could not be mapped onto the identity
    """
    user: ProvisionedUser
    identity: User
    diagnostics: List[Diagnostic] = field(default_factory=list)


class LoginService:
    """Coordinates the authorization-code flow for all registered providers.

    The flow keeps no server-side session: the state is signed with the
    provider verifier, and the OIDC nonce and PKCE verifier are derived from
    it on both legs.

    Attributes:
        registry: Registered providers
        store: Store provisioning local accounts
        timeout: Timeout for every provider request
        stats: Login counters
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        store: ExternalUserStore,
        timeout: Optional[float] = None,
    ):
        self.registry = registry
        self.store = store
        self.timeout = timeout

        self.stats = {
            "logins_initiated": 0,
            "logins_completed": 0,
            "logins_failed": 0,
        }

    def initiate_login(self, name: str, prompt: Optional[str] = None) -> Tuple[str, str]:
        """Start a login with the named provider.

        Args:
            name: Registered provider name
            prompt: Optional OAuth prompt parameter

        Returns:
            Tuple of (authorization_url, state)

        Raises:
            ProviderNotFoundError: If no provider is registered under the name
        """
        provider = self.registry.get(name)

        state = provider.new_state()
        authorization_url = provider.authorization_url(state, prompt=prompt)

        self.stats["logins_initiated"] += 1
        logger.debug("Initiated external login", provider=name)

        return authorization_url, state

    def handle_callback(self, name: str, code: Optional[str], state: Optional[str]) -> LoginResult:
        """Complete a login from the provider's callback.

        Args:
            name: Registered provider name
            code: Authorization code from the callback
            state: State echoed back by the provider

        Returns:
            LoginResult for the provisioned account

        Raises:
            ProviderNotFoundError: If no provider is registered under the name
            InvalidStateError: If the state is missing, forged or expired
            AuthenticationError: If the code, token or claims are rejected
            ProviderError: If the provider is unavailable
            ProvisioningError: If no local account can be created
        """
        provider = self.registry.get(name)

        try:
            provider.verify_state(state)

            if not code:
                raise AuthenticationError("missing authorization code")

            token = provider.exchange(code, state, timeout=self.timeout)

            diagnostics = Diagnostics()
            identity = provider.claims(
                token,
                nonce=provider.nonce_for(state),
                diagnostics=diagnostics,
                timeout=self.timeout,
            )
            provider.report(diagnostics)

            user = self.store.upsert_external(
                provider=provider.name,
                ref=identity.ident,
                username=identity.login,
                email=identity.email,
                fullname=identity.name,
                admin=resolve_admin(provider.config.admins, identity),
            )

        except AuthnError as e:
            self.stats["logins_failed"] += 1
            logger.error(
                "External login failed",
                provider=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        self.stats["logins_completed"] += 1
        logger.info("Authenticated external user", provider=name, username=user.username)

        return LoginResult(user=user, identity=identity, diagnostics=diagnostics.entries)
