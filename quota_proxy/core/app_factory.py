from __future__ import annotations

"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build isolated instances.
"""

from fastapi import FastAPI

from quota_proxy.api.routes import health_router, messages_router, usage_router
from quota_proxy.core.config import settings
from quota_proxy.core.exception_handlers import setup_exception_handlers
from quota_proxy.core.logging import configure_logging
from quota_proxy.core.middleware import (
    PreflightCORSMiddleware,
    cors_options,
    request_id_middleware,
)
from quota_proxy.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Quota Proxy",
        description=(
            "Reverse proxy for the Anthropic Messages API that grants each "
            "client a fixed number of successful calls per rolling 24-hour "
            "window. Clients identify themselves with x-client-id; the "
            "remaining quota is returned in X-Uses-Remaining."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    # Middleware (the last one added runs first)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(PreflightCORSMiddleware, **cors_options())

    setup_exception_handlers(app)

    app.include_router(messages_router)
    app.include_router(usage_router)
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
