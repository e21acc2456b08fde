# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""FastAPI application exposing the external login endpoints."""

from typing import Any, Optional

from fastapi import FastAPI

from gopad_logging import create_logger
from gopad_secrets import SecretResolver

from . import __version__
from .provisioning import ExternalUserStore, InMemoryUserStore
from .registry import ProviderRegistry, register
from .routes import create_auth_router
from .service import LoginService

logger = create_logger(name="gopad_authn.app")


def create_app(
    registry: Optional[ProviderRegistry] = None,
    store: Optional[ExternalUserStore] = None,
    config_path: Optional[str] = None,
    resolver: Optional[SecretResolver] = None,
) -> FastAPI:
    """Create the application.

    Providers are registered before the application is returned, so a broken
    provider file fails startup instead of the first login.

    Args:
        registry: Pre-built registry; built from ``config_path`` when omitted
        store: Account store; an in-memory store when omitted
        config_path: Provider file, see :func:`register`
        resolver: Secret resolver for provider credentials, see :func:`register`

    Returns:
        FastAPI application
    """
    if registry is None:
        registry = register(config_path, resolver=resolver)

    service = LoginService(registry, store or InMemoryUserStore())

    app = FastAPI(
        title="gopad external authentication",
        version=__version__,
    )
    app.state.registry = registry
    app.state.login_service = service

    @app.get("/health")
    def health() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "authn",
            "version": __version__,
            "providers": len(registry),
            **service.stats,
        }

    app.include_router(create_auth_router(registry, service))

    logger.info("External authentication ready", providers=registry.names())
    return app
