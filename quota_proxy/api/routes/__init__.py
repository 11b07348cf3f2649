from __future__ import annotations

from quota_proxy.api.routes.health import router as health_router
from quota_proxy.api.routes.messages import router as messages_router
from quota_proxy.api.routes.usage import router as usage_router

__all__ = ["health_router", "messages_router", "usage_router"]
