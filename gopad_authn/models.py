# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Identity models produced by the identity providers."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class User:
    """Canonical identity of a user who logged in through an external provider.

    Every field except ``raw`` is best-effort and may be empty when the
    provider omitted the claim or delivered it with an unexpected type.

    Attributes:
        ident: Provider-stable subject identifier (numeric ids are stringified)
        login: URL-safe handle, slugified from the display name where the
            provider has no native handle
        name: Human display name
        email: Email address, if the provider disclosed one
        roles: Role or group names; only populated by the generic OIDC driver
        raw: Complete unmodified claims as delivered by the provider
    """
    ident: str = ""
    login: str = ""
    name: str = ""
    email: str = ""
    roles: Optional[List[str]] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    def has_role(self, role: str) -> bool:
        """Check if the provider asserted a specific role.

        Args:
            role: Role to check for

        Returns:
            True if user has the role, False otherwise
        """
        return role in (self.roles or [])

    def to_dict(self) -> dict:
        """Convert the normalized fields to a dictionary, without raw claims."""
        return {
            "ident": self.ident,
            "login": self.login,
            "name": self.name,
            "email": self.email,
            "roles": self.roles,
        }
