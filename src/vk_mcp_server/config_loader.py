#!/usr/bin/env python
# vim:fileencoding=UTF-8:ts=4:sw=4:sta:et:sts=4:ai

"""Environment based configuration shared by all server entry points."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from .core.vk_api import DEFAULT_API_VERSION, DEFAULT_TIMEOUT, VKApiClient
from .errors import MissingAccessTokenError


@dataclass
class ServerConfig:
    vk_access_token: str | None = None
    vk_api_version: str = DEFAULT_API_VERSION
    vk_group_id: str | None = None
    request_timeout: float = DEFAULT_TIMEOUT
    server_host: str = "127.0.0.1"
    server_port: int = 8765
    http_host: str = "0.0.0.0"
    http_port: int = 3000
    shared_secret: str | None = None
    log_level: str = "INFO"


def _env(name: str) -> str | None:
    value = (os.environ.get(name) or "").strip()
    return value or None


def load_config_from_env() -> ServerConfig:
    load_dotenv(find_dotenv(usecwd=True))
    return ServerConfig(
        vk_access_token=_env("VK_ACCESS_TOKEN"),
        vk_api_version=_env("VK_API_VERSION") or DEFAULT_API_VERSION,
        vk_group_id=_env("VK_GROUP_ID"),
        request_timeout=float(_env("VK_REQUEST_TIMEOUT") or DEFAULT_TIMEOUT),
        server_host=_env("MCP_SERVER_HOST") or "127.0.0.1",
        server_port=int(_env("MCP_SERVER_PORT") or "8765"),
        http_host=_env("MCP_HTTP_HOST") or "0.0.0.0",
        http_port=int(_env("MCP_HTTP_PORT") or _env("PORT") or "3000"),
        shared_secret=_env("MCP_SHARED_SECRET"),
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    )


def require_access_token(cfg: ServerConfig) -> str:
    if not cfg.vk_access_token:
        raise MissingAccessTokenError()
    return cfg.vk_access_token


def create_client(cfg: ServerConfig, access_token: str | None = None) -> VKApiClient:
    """Build a VK client for ``access_token`` or, if omitted, the configured token."""
    token = access_token or require_access_token(cfg)
    return VKApiClient(token, api_version=cfg.vk_api_version, timeout=cfg.request_timeout)


def setup_logging(level: str = "INFO") -> None:
    # stdout carries the MCP stdio stream, so logs always go to stderr
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
