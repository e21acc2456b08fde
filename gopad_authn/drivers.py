# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Supported identity provider drivers."""

from enum import Enum

from .exceptions import UnknownDriverError


class Driver(str, Enum):
    """Closed set of provider families a configuration entry may select."""

    ENTRAID = "entraid"
    GOOGLE = "google"
    GITHUB = "github"
    GITEA = "gitea"
    GITLAB = "gitlab"
    OIDC = "oidc"

    @classmethod
    def parse(cls, value: str) -> "Driver":
        """Convert a configured driver string into a Driver.

        Raises:
            UnknownDriverError: If the value is not a supported driver
        """
        try:
            return cls(value)
        except ValueError as e:
            raise UnknownDriverError(
                f"unsupported auth provider: {value}. "
                f"Supported drivers: {', '.join(d.value for d in cls)}"
            ) from e
