#!/usr/bin/env python
# vim:fileencoding=UTF-8:ts=4:sw=4:sta:et:sts=4:ai

"""SSE + JSON-RPC server for no-code automation platforms (Make.com).

Each request carries its own VK token (``Authorization: Bearer <token>``),
so one deployment can serve many VK accounts.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional

import anyio
import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, StreamingResponse
from starlette.routing import Route

from .auth import extract_access_token
from .config_loader import ServerConfig, create_client, load_config_from_env, setup_logging
from .core.vk_api import VKApiClient
from .dispatcher import JSONRPCDispatcher
from .errors import MissingAccessTokenError
from .mcp_protocol import (
    PARSE_ERROR,
    SERVER_VERSION,
    http_status_for,
    make_error_response,
    make_notification,
    server_info,
)
from .tools.catalogue import ToolCatalogue, build_catalogue

log = logging.getLogger(__name__)

TRANSPORT = "SSE + HTTP"
SSE_PATH = "/mcp/sse"
API_PATH = "/mcp/api"
KEEPALIVE_SECONDS = 15.0
MAKE_ORIGINS = ["https://www.make.com"]
MAKE_ORIGIN_REGEX = r"https://.*\.make\.com"

ClientFactory = Callable[[str], VKApiClient]


def sse_event(payload: dict) -> str:
    return "data: %s\n\n" % json.dumps(payload, ensure_ascii=False)


def catalogue_events(catalogue: ToolCatalogue) -> Iterator[str]:
    """Yield the server announcement followed by one event per tool."""
    yield sse_event(make_notification("notifications/serverInfo", server_info(TRANSPORT)))
    for tool in catalogue.describe():
        yield sse_event(make_notification("notifications/toolInfo", {"tool": tool}))


def create_app(
    config: ServerConfig | None = None,
    client_factory: Optional[ClientFactory] = None,
    keepalive_seconds: Optional[float] = KEEPALIVE_SECONDS,
) -> Starlette:
    cfg = config or load_config_from_env()
    catalogue = build_catalogue()
    dispatcher = JSONRPCDispatcher(catalogue, result_style="data")
    factory: ClientFactory = client_factory or (lambda token: create_client(cfg, token))
    started = time.monotonic()

    def client_opener(request: Request):
        def _open() -> VKApiClient:
            try:
                token = extract_access_token(request.headers)
            except MissingAccessTokenError:
                if not cfg.vk_access_token:
                    raise
                token = cfg.vk_access_token
            return factory(token)

        return _open

    async def rpc(request: Request) -> JSONResponse:
        try:
            payload = await request.json()
        except ValueError:
            return JSONResponse(make_error_response(None, "Parse error", PARSE_ERROR), status_code=400)
        response = await dispatcher.dispatch(payload, client_opener(request))
        return JSONResponse(response, status_code=http_status_for(response))

    async def sse(request: Request) -> StreamingResponse:
        log.info("Client connected to SSE from %s", request.client.host if request.client else "unknown")

        async def stream():
            for event in catalogue_events(catalogue):
                yield event
            if not keepalive_seconds:
                return
            while not await request.is_disconnected():
                await anyio.sleep(keepalive_seconds)
                yield ": keep-alive\n\n"
            log.info("Client disconnected from SSE")

        return StreamingResponse(
            stream(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive", "X-Accel-Buffering": "no"},
        )

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "service": "VKontakte MCP Server for Make.com",
                "version": SERVER_VERSION,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "mcp_endpoints": {"sse": SSE_PATH, "api": API_PATH},
                "uptime": round(time.monotonic() - started, 3),
                "port": cfg.http_port,
            }
        )

    async def ready(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ready",
                "message": "VKontakte MCP Server is running",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "port": cfg.http_port,
            }
        )

    async def info(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                **server_info(TRANSPORT),
                "tools": catalogue.names(),
                "make_com_integration": {
                    "sse_endpoint": SSE_PATH,
                    "api_endpoint": API_PATH,
                    "oauth_redirect": "https://www.make.com/oauth/cb/mcp",
                },
            }
        )

    return Starlette(
        routes=[
            Route(SSE_PATH, sse, methods=["GET"]),
            Route(API_PATH, rpc, methods=["POST"]),
            Route("/", ready, methods=["GET"]),
            Route("/", rpc, methods=["POST"]),
            Route("/health", health, methods=["GET"]),
            Route("/mcp/info", info, methods=["GET"]),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=MAKE_ORIGINS,
                allow_origin_regex=MAKE_ORIGIN_REGEX,
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            )
        ],
    )


def run_from_env() -> None:
    cfg = load_config_from_env()
    setup_logging(cfg.log_level)
    log.info("Starting automation server on http://%s:%s (SSE %s, API %s)", cfg.http_host, cfg.http_port, SSE_PATH, API_PATH)

    app = create_app(cfg)
    uvicorn.run(app, host=cfg.http_host, port=cfg.http_port, log_level="info")


if __name__ == "__main__":
    run_from_env()
