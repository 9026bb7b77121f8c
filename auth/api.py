"""HTTP routes for authentication."""

import ipaddress
from typing import Callable

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter

from api.base import success_response
from auth.service import AuthService
from auth.types import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    Identity,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UpdateProfileRequest,
)


def _get_client_ip(request: Request) -> str | None:
    """Extract valid IP address from request, or None if invalid."""
    if not request.client:
        return None
    host = request.client.host
    try:
        ipaddress.ip_address(host)
        return host
    except ValueError:
        return None


def _client_meta(request: Request) -> dict:
    return {
        "ip_address": _get_client_ip(request),
        "user_agent": request.headers.get("User-Agent"),
    }


def create_auth_router(
    auth_service: AuthService,
    require_identity: Callable[..., Identity],
    limiter: Limiter,
    rate_limit: str,
) -> APIRouter:
    """Create auth router with injected service, guard and limiter."""
    router = APIRouter(tags=["auth"])

    # -------------------------------------------------------------------------
    # Public routes (rate limited)
    # -------------------------------------------------------------------------

    @router.post("/signup", status_code=201)
    @limiter.limit(rate_limit)
    def signup(request: Request, body: SignupRequest):
        result = auth_service.signup(body, **_client_meta(request))
        return success_response("User registered successfully", token=result.token, user=result.user)

    @router.post("/login")
    @limiter.limit(rate_limit)
    def login(request: Request, body: LoginRequest):
        result = auth_service.login(body, **_client_meta(request))
        return success_response("Logged in successfully", token=result.token, user=result.user)

    @router.post("/forgot-password")
    @limiter.limit(rate_limit)
    def forgot_password(request: Request, body: ForgotPasswordRequest):
        """Same response whether or not the email is registered."""
        message = auth_service.forgot_password(body, **_client_meta(request))
        return success_response(message)

    @router.post("/reset-password")
    @limiter.limit(rate_limit)
    def reset_password(request: Request, body: ResetPasswordRequest):
        auth_service.reset_password(body, **_client_meta(request))
        return success_response("Password reset successfully. Please login with your new password.")

    # -------------------------------------------------------------------------
    # Authenticated routes
    # -------------------------------------------------------------------------

    @router.get("/profile")
    def get_profile(identity: Identity = Depends(require_identity)):
        user = auth_service.get_profile(identity.account_id)
        return success_response("User profile fetched successfully", user=user)

    @router.put("/profile")
    def update_profile(
        body: UpdateProfileRequest,
        identity: Identity = Depends(require_identity),
    ):
        user = auth_service.update_profile(identity.account_id, body)
        return success_response("Profile updated successfully", user=user)

    @router.put("/change-password")
    def change_password(
        request: Request,
        body: ChangePasswordRequest,
        identity: Identity = Depends(require_identity),
    ):
        auth_service.change_password(identity.account_id, body, **_client_meta(request))
        return success_response("Password changed successfully")

    return router
