#!/usr/bin/env python
from __future__ import annotations

import hmac
import json
import logging
from typing import Iterable

import uvicorn

from .config_loader import ServerConfig, load_config_from_env, setup_logging
from .core.vk_api import VKApiClient
from .http_server import create_app as create_http_app

log = logging.getLogger(__name__)

OPEN_PATHS = ("/health",)


class BearerAuthASGIMiddleware:
    """Reject HTTP requests that do not carry ``Authorization: Bearer <secret>``."""

    def __init__(self, app, expected_token: str, open_paths: Iterable[str] = OPEN_PATHS) -> None:
        if not expected_token:
            raise ValueError("A non-empty shared secret is required")
        self._app = app
        self._expected = ("Bearer " + expected_token).encode("latin-1")
        self._open_paths = frozenset(open_paths)

    async def __call__(self, scope, receive, send) -> None:
        if scope.get("type") != "http" or (scope.get("path") or "") in self._open_paths:
            await self._app(scope, receive, send)
            return

        auth = b""
        for key, value in scope.get("headers", []):
            if key.lower() == b"authorization":
                auth = value
                break

        if not hmac.compare_digest(auth, self._expected):
            log.warning("Rejected unauthenticated request to %s", scope.get("path"))
            body = json.dumps({"error": "Unauthorized"}).encode("utf-8")
            await send(
                {
                    "type": "http.response.start",
                    "status": 401,
                    "headers": [
                        (b"content-type", b"application/json"),
                        (b"www-authenticate", b"Bearer"),
                    ],
                }
            )
            await send({"type": "http.response.body", "body": body})
            return

        await self._app(scope, receive, send)


def create_app(
    shared_secret: str,
    config: ServerConfig | None = None,
    client: VKApiClient | None = None,
):
    inner_app = create_http_app(config, client=client)
    return BearerAuthASGIMiddleware(inner_app, expected_token=shared_secret)


def run_from_env() -> None:
    cfg = load_config_from_env()
    setup_logging(cfg.log_level)
    if not cfg.shared_secret:
        raise RuntimeError("Missing required env var: MCP_SHARED_SECRET")

    app = create_app(cfg.shared_secret, cfg)
    uvicorn.run(app, host=cfg.http_host, port=cfg.http_port, log_level="info")


if __name__ == "__main__":
    run_from_env()
