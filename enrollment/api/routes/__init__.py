"""Top level API router registration."""
from fastapi import APIRouter, FastAPI

from enrollment.api.routes import applications, health


def register_routes(application: FastAPI) -> None:
    """Register all API routers and their error handlers with the FastAPI application."""
    api_router = APIRouter(prefix="/api")

    api_router.include_router(health.router, tags=["health"])
    api_router.include_router(applications.router, tags=["shareholder-applications"])

    application.include_router(api_router)
    applications.register_exception_handlers(application)


__all__ = ["register_routes"]
