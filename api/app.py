"""Application factory: wires routers, middleware and error handlers."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from api.config import ServerConfig
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from api.rate_limiting import rate_limit_exceeded_handler
from api.tasks import create_task_router
from auth.api import create_auth_router
from auth.guard import AccessGuard
from auth.service import AuthService
from core.services.task_service import TaskService

logger = logging.getLogger(__name__)


def create_app(
    auth_service: AuthService,
    task_service: TaskService,
    guard: AccessGuard,
    limiter: Limiter,
    server_config: ServerConfig,
    lifespan=None,
) -> FastAPI:
    """
    Build the FastAPI application from already-constructed services.

    Args:
        auth_service: Auth flow
        task_service: Task flow
        guard: Access guard for protected routes
        limiter: Rate limiter shared by the public auth routes
        server_config: CORS and rate-limit settings
        lifespan: Optional lifespan context owning resource startup/shutdown

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(title="Task Manager API", lifespan=lifespan)

    # Middleware runs in reverse order of registration
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=server_config.cors_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )

    register_error_handlers(app)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.state.limiter = limiter

    require_identity = guard.dependency()

    app.include_router(
        create_auth_router(auth_service, require_identity, limiter, server_config.rate_limit),
        prefix="/auth",
    )
    app.include_router(create_task_router(task_service, require_identity), prefix="/todo")

    @app.get("/")
    def root():
        return {"message": "Task Manager API is running"}

    @app.get("/health")
    def health():
        return {"status": "OK"}

    return app
