# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Resolution of configuration values that may reference secrets.

A configuration value is either a literal or one of these references:

- ``file:///run/secrets/client_secret``: contents of the file, whitespace stripped
- ``env://GITHUB_CLIENT_SECRET``: value of the environment variable
- ``base64://c2VjcmV0``: base64-decoded UTF-8 text
- ``secret://github_client_secret``: lookup through a SecretProvider
"""

import base64
import binascii
import os
from pathlib import Path
from typing import Dict, Optional

from .exceptions import SecretError, SecretResolutionError
from .provider import SecretProvider

FILE_PREFIX = "file://"
ENV_PREFIX = "env://"
BASE64_PREFIX = "base64://"
SECRET_PREFIX = "secret://"


class SecretResolver:
    """Resolves literal and referenced configuration values.

    Attributes:
        secret_provider: Optional provider backing ``secret://`` references
    """

    def __init__(
        self,
        secret_provider: Optional[SecretProvider] = None,
        environ: Optional[Dict[str, str]] = None,
    ):
        self.secret_provider = secret_provider
        self._environ = environ if environ is not None else os.environ

    def resolve(self, value: Optional[str]) -> str:
        """Resolve a configuration value.

        Args:
            value: Literal value or reference; None resolves to ""

        Returns:
            The resolved string

        Raises:
            SecretResolutionError: If the reference cannot be resolved
        """
        if not value:
            return ""

        if value.startswith(FILE_PREFIX):
            return self._from_file(value[len(FILE_PREFIX):])

        if value.startswith(ENV_PREFIX):
            return self._from_env(value[len(ENV_PREFIX):])

        if value.startswith(BASE64_PREFIX):
            return self._from_base64(value[len(BASE64_PREFIX):])

        if value.startswith(SECRET_PREFIX):
            return self._from_provider(value[len(SECRET_PREFIX):])

        return value

    def _from_file(self, path: str) -> str:
        try:
            return Path(path).read_text(encoding="utf-8").strip()
        except FileNotFoundError as e:
            raise SecretResolutionError(f"failed to read secret file {path}: not found") from e
        except OSError as e:
            raise SecretResolutionError(f"failed to read secret file {path}: {e}") from e

    def _from_env(self, name: str) -> str:
        if name not in self._environ:
            raise SecretResolutionError(f"environment variable {name} is not set")
        return self._environ[name]

    def _from_base64(self, data: str) -> str:
        try:
            return base64.b64decode(data, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise SecretResolutionError(f"failed to decode base64 value: {e}") from e

    def _from_provider(self, key_name: str) -> str:
        if self.secret_provider is None:
            raise SecretResolutionError(
                f"secret reference {key_name} used without a configured secret provider"
            )

        try:
            return self.secret_provider.get_secret(key_name)
        except SecretError as e:
            raise SecretResolutionError(f"failed to resolve secret {key_name}: {e}") from e
