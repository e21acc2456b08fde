# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Environment-backed secret provider."""

import os
from typing import Dict, Optional

from .exceptions import SecretNotFoundError
from .provider import SecretProvider


class EnvSecretProvider(SecretProvider):
    """Secret provider that reads secrets from environment variables.

    Secret names are upper-cased and prefixed, so ``github_client_secret``
    with the default prefix maps to ``GOPAD_SECRET_GITHUB_CLIENT_SECRET``.
    """

    def __init__(self, prefix: str = "GOPAD_SECRET_", environ: Optional[Dict[str, str]] = None):
        self.prefix = prefix
        self._environ = environ if environ is not None else os.environ

    def _variable(self, key_name: str) -> str:
        return f"{self.prefix}{key_name}".upper().replace("-", "_").replace(".", "_")

    def get_secret(self, key_name: str, version: Optional[str] = None) -> str:
        value = self._environ.get(self._variable(key_name))
        if value is None:
            raise SecretNotFoundError(key_name)
        return value

    def secret_exists(self, key_name: str) -> bool:
        return self._variable(key_name) in self._environ
