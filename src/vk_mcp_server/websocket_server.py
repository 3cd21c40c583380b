#!/usr/bin/env python
# vim:fileencoding=UTF-8:ts=4:sw=4:sta:et:sts=4:ai

"""Standalone MCP-style WebSocket server exposing the VK tools."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import sys
from typing import Any, Dict, Optional

from websockets.asyncio.server import Server, ServerConnection, serve

from .config_loader import ServerConfig, create_client, load_config_from_env, setup_logging
from .core.vk_api import VKApiClient, mask_token
from .dispatcher import JSONRPCDispatcher
from .mcp_protocol import PARSE_ERROR, make_error_response
from .tools.catalogue import build_catalogue

log = logging.getLogger(__name__)


def log_startup_context(cfg: ServerConfig) -> None:
    log.info(
        "WebSocket server startup: python=%s argv=%s cwd=%s token=%s api=%s",
        sys.executable,
        sys.argv,
        os.getcwd(),
        mask_token(cfg.vk_access_token),
        cfg.vk_api_version,
    )


class MCPWebSocketServer:
    """Very small MCP-inspired WebSocket facade over the VK tool catalogue."""

    def __init__(self, config: ServerConfig, client: Optional[VKApiClient] = None):
        self.config = config
        self._client = client or create_client(config)
        self._server: Optional[Server] = None
        self._dispatcher = JSONRPCDispatcher(build_catalogue(), result_style="content")

    def _open_client(self):
        # one shared client; closed in stop()
        return contextlib.nullcontext(self._client)

    async def handle_message(self, message: str | bytes) -> Dict[str, Any]:
        try:
            payload = json.loads(message)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return make_error_response(None, "Invalid JSON", PARSE_ERROR)
        return await self._dispatcher.dispatch(payload, self._open_client)

    async def start(self):
        cfg = self.config
        log.info("Starting MCP WebSocket server on ws://%s:%s", cfg.server_host, cfg.server_port)
        try:
            self._server = await serve(self._handle_client, cfg.server_host, cfg.server_port)
        except OSError as exc:
            raise RuntimeError(f"Could not bind port {cfg.server_port}: {exc}") from exc

    async def stop(self):
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        await self._client.aclose()

    async def _handle_client(self, websocket: ServerConnection) -> None:
        async for message in websocket:
            response = await self.handle_message(message)
            await websocket.send(json.dumps(response, ensure_ascii=False))


async def run_async(config: Optional[ServerConfig] = None) -> None:
    cfg = config or load_config_from_env()
    server = MCPWebSocketServer(cfg)
    await server.start()
    try:
        await asyncio.Future()  # run forever
    finally:
        await server.stop()


def run_from_env() -> None:
    cfg = load_config_from_env()
    setup_logging(cfg.log_level)
    log_startup_context(cfg)
    try:
        asyncio.run(run_async(cfg))
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        raise
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run_from_env()
