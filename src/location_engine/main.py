"""FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, location, service_areas
from .config import settings

ROUTERS = (health.router, location.router, service_areas.router)


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, root_path="")
    origins = list(settings.frontend_allowed_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        """Diagnostics: where the API lives and which providers are configured."""
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "providers": {
                "geocoding": settings.geocoding_provider,
                "routing": settings.routing_provider,
            },
            "docs": "/docs",
        }

    for router in ROUTERS:
        app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
