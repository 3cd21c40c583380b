#!/usr/bin/env python
"""Plain REST endpoints for manually checking a VK token and group setup."""

from __future__ import annotations

import contextlib
import logging
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .config_loader import ServerConfig, create_client, load_config_from_env, setup_logging
from .core.owner_ids import group_id_from_owner, owner_id_for
from .core.vk_api import VKApiClient
from .errors import VKMCPError
from .mcp_protocol import SERVER_VERSION
from .tools.catalogue import build_catalogue

log = logging.getLogger(__name__)

ENDPOINTS = [
    "POST /test/post - publish a post",
    "GET /test/posts - read wall posts",
    "GET /test/user/{user_id} - user info",
    "GET /mcp/tools - tool names",
    "GET /health - health check",
    "GET /info - server info",
]


def _error(exc: Exception, status_code: int = 500) -> JSONResponse:
    return JSONResponse({"success": False, "error": str(exc)}, status_code=status_code)


def create_app(config: ServerConfig | None = None, client: Optional[VKApiClient] = None) -> Starlette:
    cfg = config or load_config_from_env()
    tool_names = build_catalogue().names()
    vk_holder = {"client": client}

    def vk() -> VKApiClient:
        # created lazily so the info routes work without a token
        if vk_holder["client"] is None:
            vk_holder["client"] = create_client(cfg)
        return vk_holder["client"]

    async def test_post(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError:
            return _error(ValueError("Request body must be JSON"), 400)
        if not isinstance(body, dict):
            return _error(ValueError("Request body must be a JSON object"), 400)
        message = body.get("message")
        if not isinstance(message, str) or not message.strip():
            return _error(ValueError("Message is required"), 400)

        group_id = body.get("group_id")
        user_id = body.get("user_id")
        owner_id = owner_id_for(group_id, user_id) or owner_id_for(cfg.vk_group_id)
        log.info("Publishing post: owner_id=%s group_id=%s user_id=%s length=%d", owner_id, group_id, user_id, len(message))

        try:
            result = await vk().post_to_wall(message=message, owner_id=owner_id)
        except VKMCPError as exc:
            log.error("Error posting to wall: %s", exc)
            return _error(exc)
        return JSONResponse(
            {
                "success": True,
                "message": "Post published",
                "post_id": result.get("post_id"),
                "owner_id": owner_id,
                "target": "group" if group_id_from_owner(owner_id) else "user",
            }
        )

    async def test_posts(request: Request) -> JSONResponse:
        params = request.query_params
        try:
            count = int(params.get("count", "5"))
        except ValueError:
            return _error(ValueError("count must be an integer"), 400)
        try:
            total, posts = await vk().get_wall_posts(
                owner_id=owner_id_for(params.get("group_id"), params.get("user_id")),
                count=count,
                offset=0,
            )
        except VKMCPError as exc:
            log.error("Error getting posts: %s", exc)
            return _error(exc)
        return JSONResponse({"success": True, "count": total, "posts": [post.summary() for post in posts]})

    async def test_user(request: Request) -> JSONResponse:
        try:
            user = await vk().get_user_info(request.path_params["user_id"])
        except VKMCPError as exc:
            log.error("Error getting user info: %s", exc)
            return _error(exc)
        return JSONResponse({"success": True, "user": user.to_dict()})

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        try:
            yield
        finally:
            if vk_holder["client"] is not None:
                await vk_holder["client"].aclose()
                vk_holder["client"] = None

    async def tools(request: Request) -> JSONResponse:
        return JSONResponse({"tools": tool_names})

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "service": "VKontakte Test Server",
                "version": SERVER_VERSION,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    async def info(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "name": "vkontakte-test-server",
                "version": SERVER_VERSION,
                "description": "Simple test server for VKontakte API",
                "endpoints": ENDPOINTS,
            }
        )

    return Starlette(
        routes=[
            Route("/test/post", test_post, methods=["POST"]),
            Route("/test/posts", test_posts, methods=["GET"]),
            Route("/test/user/{user_id}", test_user, methods=["GET"]),
            Route("/mcp/tools", tools, methods=["GET"]),
            Route("/health", health, methods=["GET"]),
            Route("/info", info, methods=["GET"]),
        ],
        middleware=[Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])],
        lifespan=lifespan,
    )


def run_from_env() -> None:
    cfg = load_config_from_env()
    setup_logging(cfg.log_level)

    app = create_app(cfg)
    uvicorn.run(app, host=cfg.http_host, port=cfg.http_port, log_level="info")


if __name__ == "__main__":
    run_from_env()
