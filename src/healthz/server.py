"""
HTTP surface for the Healthz reporter.

Mounts the reporter on a FastAPI router so it can be embedded in an existing
application or served standalone with uvicorn.
"""

from __future__ import annotations

from fastapi import APIRouter, FastAPI, Response

from healthz import __version__
from healthz.config import Config
from healthz.reporter import Reporter


def create_router(reporter: Reporter, path: str = "/healthz") -> APIRouter:
    """Return a router serving ``GET <path>`` from the given reporter."""
    router = APIRouter()

    @router.get(path, tags=["health"])
    def healthz() -> Response:
        status_code, headers, body = reporter.respond()
        return Response(content=body, status_code=status_code, headers=headers)

    return router


def create_app(config: Config | None = None, reporter: Reporter | None = None) -> FastAPI:
    """Create a standalone application serving the health endpoint."""
    config = config or Config()
    reporter = reporter or Reporter(config)

    app = FastAPI(
        title="healthz",
        version=__version__,
        openapi_tags=[{"name": "health", "description": "Process health and resource metrics"}],
    )
    app.include_router(create_router(reporter, config.server_path))

    app.state.config = config
    app.state.reporter = reporter

    return app
