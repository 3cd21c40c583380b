#!/usr/bin/env python
from __future__ import annotations

from datetime import datetime, timezone

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route
import uvicorn

from .config_loader import ServerConfig, load_config_from_env, setup_logging
from .core.vk_api import VKApiClient
from .main import create_mcp_server
from .mcp_protocol import SERVER_NAME, SERVER_VERSION
from .tools.catalogue import ToolCatalogue, build_catalogue

MCP_PATH = "/mcp"


def create_app(
    config: ServerConfig | None = None,
    client: VKApiClient | None = None,
) -> Starlette:
    # Mount FastMCP's Streamable HTTP app at /mcp next to the info routes.
    cfg = config or load_config_from_env()
    catalogue: ToolCatalogue = build_catalogue()
    mcp = create_mcp_server(cfg, client=client, catalogue=catalogue)
    mcp_app = mcp.http_app(path=MCP_PATH)

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "service": "VKontakte MCP Server",
                "version": SERVER_VERSION,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    async def mcp_info(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "name": SERVER_NAME,
                "version": SERVER_VERSION,
                "description": "MCP server for VKontakte (VK.com) integration",
                "transports": ["streamable-http"],
                "endpoint": MCP_PATH,
                "capabilities": ["tools"],
                "tools": catalogue.names(),
            }
        )

    return Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Route("/mcp-info", mcp_info, methods=["GET"]),
            Mount("/", app=mcp_app),
        ],
        lifespan=mcp_app.lifespan,
    )


def run_from_env() -> None:
    # Read host/port from environment and serve via Uvicorn.
    cfg = load_config_from_env()
    setup_logging(cfg.log_level)

    app = create_app(cfg)
    uvicorn.run(app, host=cfg.http_host, port=cfg.http_port, log_level="info")


if __name__ == "__main__":
    run_from_env()
