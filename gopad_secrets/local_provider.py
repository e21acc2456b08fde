# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Local filesystem secret provider."""

from pathlib import Path

from gopad_logging import create_logger

from .exceptions import SecretNotFoundError, SecretProviderError
from .provider import SecretProvider

logger = create_logger(name="gopad_secrets.local")


class LocalFileSecretProvider(SecretProvider):
    """Secret provider that reads secrets from a local directory.

    Each file in the base directory holds one secret, named after the file.
    Suitable for Docker or Kubernetes mounted secrets.

    Example:
        >>> provider = LocalFileSecretProvider(base_path="/run/secrets")
        >>> client_secret = provider.get_secret("gitlab_client_secret")

    Attributes:
        base_path: Directory containing secret files
    """

    def __init__(self, base_path: str):
        """Initialize the local file secret provider.

        Args:
            base_path: Base directory containing secret files

        Raises:
            SecretProviderError: If base_path does not exist or is not a directory
        """
        self.base_path = Path(base_path)

        if not self.base_path.exists():
            raise SecretProviderError("Secret base path does not exist")

        if not self.base_path.is_dir():
            raise SecretProviderError("Secret base path is not a directory")

        logger.info("Initialized local secret provider")

    def _get_secret_path(self, key_name: str) -> Path:
        """Get the filesystem path for a secret.

        Raises:
            SecretProviderError: If key_name escapes the base directory
        """
        potential_path = (self.base_path / key_name).resolve()
        base_resolved = self.base_path.resolve()

        try:
            potential_path.relative_to(base_resolved)
        except ValueError as e:
            raise SecretProviderError(
                f"Invalid secret name (path traversal detected): {key_name}"
            ) from e

        return potential_path

    def get_secret(self, key_name: str, version: str | None = None) -> str:
        """Retrieve a secret by name.

        Args:
            key_name: Name of the secret (filename in base_path)
            version: Ignored for local filesystem provider

        Returns:
            Secret value with surrounding whitespace stripped

        Raises:
            SecretNotFoundError: If the secret file does not exist
            SecretProviderError: If reading the file fails
        """
        if version is not None:
            logger.warning("Version parameter ignored for local secrets", key_name=key_name)

        secret_path = self._get_secret_path(key_name)

        if not secret_path.exists():
            raise SecretNotFoundError(key_name)

        if not secret_path.is_file():
            raise SecretProviderError(f"Secret path is not a file: {key_name}")

        try:
            with open(secret_path, encoding="utf-8") as f:
                return f.read().strip()
        except OSError as e:
            raise SecretProviderError(f"Failed to read secret {key_name}: {e}") from e

    def secret_exists(self, key_name: str) -> bool:
        try:
            return self._get_secret_path(key_name).is_file()
        except SecretProviderError:
            return False
