#!/usr/bin/env python3
"""
varquery HTTP Server
Plain-text search endpoint over the variable server registry.

Endpoints:
- /health - Deployment health check
- /search - Rendered search results, one variable per line
"""

import io
from typing import Callable, Optional

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route

from varquery import __version__
from varquery.config import ConfigManager, get_log_level
from varquery.query.types import ResultCode
from varquery.registry import HttpRegistrySession, RegistrySession
from varquery.search.service import search_with
from varquery.utils import Logger

logger = Logger("varquery-http", level=get_log_level())

_TRUE_VALUES = ("1", "true", "yes", "on")

_STATUS = {
    ResultCode.SUCCESS: 200,
    ResultCode.NO_MATCHES: 200,
    ResultCode.INVALID_ARGUMENTS: 400,
    ResultCode.TRANSPORT_FAILURE: 502,
}


def _int_param(request: Request, key: str) -> Optional[int]:
    raw = request.query_params.get(key)
    if raw is None or raw == "":
        return None
    try:
        return int(raw, 0)
    except ValueError:
        raise ValueError(f"Query parameter '{key}' must be an integer, got '{raw}'")


def create_app(session_factory: Optional[Callable[[], RegistrySession]] = None) -> Starlette:
    """Create the Starlette app; sessions default to the configured variable server."""
    if session_factory is None:
        def session_factory():
            return HttpRegistrySession.from_config(ConfigManager.get_instance().get(), logger=logger)

    async def health_check(request: Request):
        """Health check endpoint."""
        config = ConfigManager.get_instance().get()
        return PlainTextResponse(
            f"varquery (HTTP)\n"
            f"Version: {__version__}\n"
            f"Status: Running\n"
            f"Variable server: {config.server_url}\n"
        )

    async def search_endpoint(request: Request):
        """Run a search and return the rendered lines as text/plain."""
        try:
            flags = _int_param(request, "flags")
            instance_id = _int_param(request, "instance")
        except ValueError as e:
            return JSONResponse({"error": str(e), "code": ResultCode.INVALID_ARGUMENTS.value}, status_code=400)

        show_value = request.query_params.get("value", "").lower() in _TRUE_VALUES
        buffer = io.StringIO()

        def run_search():
            with session_factory() as session:
                return search_with(
                    session,
                    buffer,
                    name=request.query_params.get("name"),
                    regex=request.query_params.get("regex"),
                    flags=flags,
                    tags=request.query_params.get("tags"),
                    instance_id=instance_id,
                    show_value=show_value,
                    log=logger,
                )

        # Sessions block, so the walk runs off the event loop
        result = await run_in_threadpool(run_search)

        headers = {
            "X-Result-Code": result.code.value,
            "X-Tag-Filter-Applied": "true" if result.tag_filter_applied else "false",
        }

        if not result.ok:
            return JSONResponse(
                {
                    "error": result.error.message if result.error else "unknown error",
                    "code": result.code.value,
                    "kind": result.error.kind.value if result.error else None,
                    "partial_output": buffer.getvalue(),
                },
                status_code=_STATUS[result.code],
                headers=headers,
            )

        return PlainTextResponse(buffer.getvalue(), headers=headers)

    return Starlette(
        routes=[
            Route("/health", endpoint=health_check),
            Route("/search", endpoint=search_endpoint),
        ],
    )


async def main(port: Optional[int] = None):
    """Run the HTTP server."""
    import uvicorn

    config = ConfigManager.get_instance().load()
    port = port or config.http_port

    server = uvicorn.Server(uvicorn.Config(
        create_app(),
        host="0.0.0.0",
        port=port,
        log_level=config.log_level.lower(),
    ))

    logger.info(f"varquery HTTP server starting on port {port}, variable server {config.server_url}")
    await server.serve()
