"""OpenAPI metadata and customization utilities.

Provides a helper to enrich the generated OpenAPI schema with:
- Tags metadata
- The optional client identifier header on quota-enforced operations

This keeps documentation concerns decoupled from the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

from quota_proxy.core.config import settings


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add metadata.

    - Adds tags metadata if not present
    - Documents the client identifier header on the /messages operation,
      which reads it from the raw request rather than a declared parameter
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {
                "name": "Proxy",
                "description": "Quota-enforced relay to the upstream Messages API.",
            },
            {
                "name": "Usage",
                "description": "Optimistic, non-authoritative quota snapshot.",
            },
            {
                "name": "Health",
                "description": "Liveness checks.",
            },
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        client_id_param = {
            "name": settings.app.client_id_header,
            "in": "header",
            "required": False,
            "description": (
                "Quota key. Falls back to X-Forwarded-For, then to a shared "
                "anonymous bucket."
            ),
            "schema": {"type": "string"},
        }
        paths = schema.get("paths", {})
        for path, methods in paths.items():
            if not path.endswith("/messages"):
                continue
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                params = method_obj.setdefault("parameters", [])
                if all(p.get("name") != client_id_param["name"] for p in params):
                    params.append(client_id_param)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
