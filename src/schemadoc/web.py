"""Serve a generated document from a FastAPI application.

Mounts a Swagger UI page at ``path`` and the raw JSON document at
``<path>/swagger.json``.
"""

from fastapi import FastAPI
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse

from schemadoc.generator.openapi import SwaggerGenerator


def setup_docs(
    app: FastAPI,
    generator: SwaggerGenerator,
    path: str = "/api-docs",
    use_swagger2: bool = False,
) -> dict:
    """Register the documentation routes and return the served document."""
    spec = generator.generate_swagger2() if use_swagger2 else generator.generate_spec()
    json_path = f"{path.rstrip('/')}/swagger.json"
    title = spec.get("info", {}).get("title", "API")

    async def swagger_json() -> JSONResponse:
        return JSONResponse(spec)

    async def swagger_ui() -> HTMLResponse:
        return get_swagger_ui_html(openapi_url=json_path, title=f"{title} - Docs")

    app.add_api_route(json_path, swagger_json, methods=["GET"], include_in_schema=False)
    app.add_api_route(path, swagger_ui, methods=["GET"], include_in_schema=False)
    return spec
