# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""HTTP routes for external logins.

Endpoints are synchronous because every provider call is a blocking httpx
request; FastAPI runs them in its threadpool.
"""

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import RedirectResponse

from gopad_logging import create_logger

from .exceptions import (
    AuthenticationError,
    InvalidStateError,
    ProviderError,
    ProviderNotFoundError,
    ProvisioningError,
)
from .registry import ProviderRegistry
from .service import LoginService

logger = create_logger(name="gopad_authn.routes")


def create_auth_router(registry: ProviderRegistry, service: LoginService) -> APIRouter:
    """Create the router serving the external login endpoints.

    Args:
        registry: Registered providers
        service: Login flow coordinator

    Returns:
        APIRouter with ``/auth/providers``, ``/auth/{provider}/request`` and
        ``/auth/{provider}/callback``
    """
    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.get("/providers")
    def list_providers() -> dict[str, Any]:
        """List the providers rendered on the login page."""
        return {"providers": registry.listing()}

    @router.get("/{provider}/request")
    def request_login(
        provider: str,
        prompt: Optional[str] = Query(None, description="OAuth prompt parameter"),
    ) -> RedirectResponse:
        """Redirect the user agent to the provider's authorization page."""
        try:
            authorization_url, _ = service.initiate_login(provider, prompt=prompt)
        except ProviderNotFoundError as e:
            logger.error("Failed to detect provider", provider=provider, error=str(e))
            raise HTTPException(status_code=404, detail="Failed to detect provider")

        return RedirectResponse(url=authorization_url, status_code=307)

    @router.get("/{provider}/callback")
    def callback(
        provider: str,
        code: Optional[str] = Query(None, description="Authorization code from provider"),
        state: Optional[str] = Query(None, description="OAuth state parameter"),
    ) -> dict[str, Any]:
        """Complete the login and return the provisioned account."""
        try:
            result = service.handle_callback(provider, code, state)

        except ProviderNotFoundError:
            raise HTTPException(status_code=404, detail="Failed to detect provider")
        except InvalidStateError:
            raise HTTPException(status_code=412, detail="Failed to verify state")
        except AuthenticationError as e:
            raise HTTPException(status_code=401, detail=f"Failed to authenticate: {e}")
        except ProviderError as e:
            raise HTTPException(status_code=502, detail=f"Failed to fetch user: {e}")
        except ProvisioningError:
            raise HTTPException(status_code=412, detail="Failed to create user")

        return {
            "provider": provider,
            "user": result.user.to_dict(),
        }

    return router
