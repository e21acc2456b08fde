# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Provider configuration models and file loading.

The provider file is a structured document with a top-level ``providers``
list. YAML, JSON and TOML files are accepted:

    providers:
      - driver: github
        name: github
        display: GitHub
        callback: https://pad.example.com/api/v1/auth/github/callback
        client_id: env://GITHUB_CLIENT_ID
        client_secret: file:///run/secrets/github_client_secret
"""

import json
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from gopad_logging import create_logger

from .exceptions import ConfigNotFoundError, ConfigParseError, UnsupportedConfigError

logger = create_logger(name="gopad_authn.config")

SUPPORTED_EXTENSIONS = (".yaml", ".yml", ".json", ".toml")


class _ConfigModel(BaseModel):
    """Frozen base model that treats explicit nulls like omitted keys."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class AuthEndpoints(_ConfigModel):
    """Endpoint overrides for a provider."""

    issuer: str = ""
    auth: str = ""
    token: str = ""
    profile: str = ""
    email: str = ""


class AuthMappings(_ConfigModel):
    """Claim names used by the generic OIDC driver.

    An empty string disables extraction of that field.
    """

    login: str = "preferred_username"
    name: str = "name"
    email: str = "email"
    role: str = ""


class AuthAdmins(_ConfigModel):
    """Allowlists that grant administrative rights to external users."""

    users: list[str] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)


class AuthProviderConfig(_ConfigModel):
    """A single provider entry of the configuration file.

    ``driver`` stays a plain string here so an unknown value surfaces as an
    unknown-driver error during registration instead of a parse error.
    """

    driver: str
    name: str
    display: str = ""
    icon: str = ""
    callback: str = ""
    client_id: str = ""
    client_secret: str = ""
    verifier: str = ""
    tenant: str = ""
    scopes: list[str] = Field(default_factory=list)
    endpoints: AuthEndpoints = Field(default_factory=AuthEndpoints)
    mappings: AuthMappings = Field(default_factory=AuthMappings)
    admins: AuthAdmins = Field(default_factory=AuthAdmins)
    discovery_timeout: float = Field(default=10.0, gt=0)


class AuthConfig(_ConfigModel):
    """Root of the provider configuration file."""

    providers: list[AuthProviderConfig] = Field(default_factory=list)


def _parse(path: Path) -> Any:
    suffix = path.suffix.lower()

    try:
        if suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                return yaml.safe_load(f)

        if suffix == ".json":
            with open(path, encoding="utf-8") as f:
                return json.load(f)

        with open(path, "rb") as f:
            return tomllib.load(f)

    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"failed to read auth config: {e}") from e
    except OSError as e:
        raise ConfigParseError(f"failed to read auth config: {e}") from e


def load_auth_config(config_path: str) -> AuthConfig:
    """Load and validate the provider configuration file.

    Args:
        config_path: Path to a YAML, JSON or TOML file

    Returns:
        Validated AuthConfig

    Raises:
        ConfigNotFoundError: If the file does not exist
        UnsupportedConfigError: If the file extension is not supported
        ConfigParseError: If the file is malformed or violates the schema
    """
    path = Path(config_path)

    if not path.is_file():
        raise ConfigNotFoundError(f"failed to find auth config: {config_path}")

    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise UnsupportedConfigError(
            f"unsupported type for auth config: {path.suffix or '<none>'}. "
            f"Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    data = _parse(path)

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigParseError(
            f"failed to parse auth config: expected a mapping, got {type(data).__name__}"
        )

    try:
        config = AuthConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(f"failed to parse auth config: {e}") from e

    logger.debug("Auth configuration loaded", path=str(path), providers=len(config.providers))
    return config
