#!/usr/bin/env python
# vim:fileencoding=UTF-8:ts=4:sw=4:sta:et:sts=4:ai

"""JSON-RPC 2.0 helpers for the transports that do not go through FastMCP."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .errors import InvalidToolArguments, MissingAccessTokenError, UnknownToolError, VKAPIError, VKNetworkError

SERVER_NAME = "vkontakte-mcp-server"
SERVER_VERSION = "1.0.0"
PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
UNAUTHORIZED = -32001

RequestId = Optional[Any]


def make_error_response(
    request_id: RequestId,
    message: str,
    code: int = INTERNAL_ERROR,
    data: Optional[Any] = None,
) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


def make_result_response(request_id: RequestId, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def make_notification(method: str, params: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": None, "method": method, "params": params}


def server_info(transport: str) -> Dict[str, Any]:
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "description": "MCP server for VKontakte (VK.com) integration",
        "transport": transport,
        "capabilities": ["tools"],
    }


def initialize_result() -> Dict[str, Any]:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}},
        "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
    }


def error_for_exception(request_id: RequestId, exc: Exception) -> Dict[str, Any]:
    """Map a package exception onto a JSON-RPC error envelope."""
    if isinstance(exc, UnknownToolError):
        return make_error_response(request_id, str(exc), METHOD_NOT_FOUND)
    if isinstance(exc, InvalidToolArguments):
        return make_error_response(request_id, str(exc), INVALID_PARAMS, data=exc.errors)
    if isinstance(exc, MissingAccessTokenError):
        return make_error_response(request_id, str(exc), UNAUTHORIZED)
    if isinstance(exc, (VKAPIError, VKNetworkError)):
        return make_error_response(request_id, str(exc), INTERNAL_ERROR, data=exc.to_dict())
    return make_error_response(request_id, str(exc) or type(exc).__name__, INTERNAL_ERROR)


def http_status_for(response: Dict[str, Any]) -> int:
    error = response.get("error")
    if not error:
        return 200
    code = error.get("code")
    if code == UNAUTHORIZED:
        return 401
    if code in (PARSE_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND, INVALID_PARAMS):
        return 400
    return 500
