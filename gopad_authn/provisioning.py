# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Local account provisioning for externally authenticated users.

A successful external login is turned into a local account through an
:class:`ExternalUserStore`. The account is keyed by (provider, ref): the
first login creates it with a unique slugified username, later logins
refresh email, full name and admin flag but keep the username.
"""

import threading
import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from slugify import slugify

from gopad_logging import create_logger

from . import secret
from .config import AuthAdmins
from .exceptions import ProvisioningError
from .models import User

logger = create_logger(name="gopad_authn.provisioning")

USERNAME_SUFFIX_LENGTH = 6


@dataclass
class ExternalAuth:
    """Link between a local account and one external identity."""
    provider: str
    ref: str
    login: str = ""
    email: str = ""
    name: str = ""


@dataclass
class ProvisionedUser:
    """Local account created or updated by an external login.

    Attributes:
        id: Local account identifier
        username: Unique local username
        email: Email address reported by the last login
        fullname: Display name reported by the last login
        admin: Whether the account has administrative rights
        active: Whether the account may log in
        auths: External identities linked to the account
    """
    id: str
    username: str
    email: str = ""
    fullname: str = ""
    admin: bool = False
    active: bool = True
    auths: List[ExternalAuth] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "fullname": self.fullname,
            "admin": self.admin,
            "active": self.active,
            "auths": [
                {"provider": auth.provider, "ref": auth.ref, "login": auth.login}
                for auth in self.auths
            ],
        }


def resolve_admin(admins: AuthAdmins, user: User) -> bool:
    """Decide whether an external user is granted administrative rights.

    Args:
        admins: Allowlists of the provider the user logged in with
        user: Normalized user

    Returns:
        True if the login, the email or any role is allowlisted
    """
    if user.login and user.login in admins.users:
        return True

    if user.email and user.email in admins.emails:
        return True

    return any(user.has_role(role) for role in admins.roles)


class ExternalUserStore(ABC):
    """Abstract store creating local accounts for external identities."""

    @abstractmethod
    def upsert_external(
        self,
        provider: str,
        ref: str,
        username: str,
        email: str,
        fullname: str,
        admin: bool,
    ) -> ProvisionedUser:
        """Create or update the account linked to an external identity.

        Args:
            provider: Name of the provider the user logged in with
            ref: Provider-stable identifier of the user
            username: Preferred username, slugified before use
            email: Email address
            fullname: Display name
            admin: Administrative flag

        Returns:
            The provisioned account

        Raises:
            ProvisioningError: If the account cannot be created
        """
        pass


class InMemoryUserStore(ExternalUserStore):
    """Thread-safe in-memory account store for development and tests."""

    def __init__(self, reserved: Optional[Iterable[str]] = None):
        """Initialize the store.

        Args:
            reserved: Usernames that are already taken, e.g. local accounts
        """
        self._lock = threading.Lock()
        self._users: Dict[str, ProvisionedUser] = {}
        self._links: Dict[Tuple[str, str], str] = {}
        self._usernames = set(reserved or [])

    def upsert_external(
        self,
        provider: str,
        ref: str,
        username: str,
        email: str,
        fullname: str,
        admin: bool,
    ) -> ProvisionedUser:
        if not ref:
            raise ProvisioningError(f"missing external reference for provider {provider}")

        with self._lock:
            user_id = self._links.get((provider, ref))

            if user_id is not None:
                record = self._users[user_id]
                record.email = email
                record.fullname = fullname
                record.admin = admin
                auth = next(a for a in record.auths if a.provider == provider and a.ref == ref)
                auth.login, auth.email, auth.name = username, email, fullname

                logger.debug("Updated external user", provider=provider, username=record.username)
                return record

            record = ProvisionedUser(
                id=str(uuid.uuid4()),
                username=self._unique_username(username),
                email=email,
                fullname=fullname,
                admin=admin,
            )
            record.auths.append(
                ExternalAuth(provider=provider, ref=ref, login=username, email=email, name=fullname)
            )

            self._users[record.id] = record
            self._links[(provider, ref)] = record.id
            self._usernames.add(record.username)

        logger.info("Created external user", provider=provider, username=record.username)
        return record

    def _unique_username(self, username: str) -> str:
        base = slugify(username or "")
        if not base:
            raise ProvisioningError("cannot derive a username for external user")

        candidate = base
        while candidate in self._usernames:
            candidate = f"{base}-{secret.generate(USERNAME_SUFFIX_LENGTH).lower()}"

        return candidate

    def get(self, user_id: str) -> Optional[ProvisionedUser]:
        with self._lock:
            return self._users.get(user_id)

    def find_external(self, provider: str, ref: str) -> Optional[ProvisionedUser]:
        with self._lock:
            user_id = self._links.get((provider, ref))
            return self._users.get(user_id) if user_id else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
