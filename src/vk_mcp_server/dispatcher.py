"""JSON-RPC method dispatch over the tool catalogue."""

from __future__ import annotations

import logging
from typing import Any, AsyncContextManager, Callable, Dict

from .core.vk_api import VKApiClient
from .errors import InvalidToolArguments, UnknownToolError, VKMCPError
from .mcp_protocol import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    error_for_exception,
    initialize_result,
    make_error_response,
    make_result_response,
)
from .tools.catalogue import ToolCatalogue, ToolOutput

log = logging.getLogger(__name__)

ClientOpener = Callable[[], AsyncContextManager[VKApiClient]]

# "data": structured JSON results, failures as JSON-RPC errors (automation clients)
# "content": MCP content blocks, tool failures as isError results
RESULT_STYLES = ("data", "content")


class JSONRPCDispatcher(object):
    """Answer ``initialize``, ``tools/list`` and ``tools/call`` requests."""

    def __init__(self, catalogue: ToolCatalogue, result_style: str = "data"):
        if result_style not in RESULT_STYLES:
            raise ValueError(f"Unknown result style: {result_style}")
        self.catalogue = catalogue
        self.result_style = result_style

    async def dispatch(self, payload: Any, open_client: ClientOpener) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            return make_error_response(None, "Invalid Request", INVALID_REQUEST)

        request_id = payload.get("id")
        method = payload.get("method")
        params = payload.get("params") or {}
        if not isinstance(method, str) or not method:
            return make_error_response(request_id, "Invalid Request: missing method", INVALID_REQUEST)

        log.info("JSON-RPC request: %s (id=%r)", method, request_id)

        if method.startswith("notifications/"):
            return make_result_response(request_id, {})
        if method == "initialize":
            return make_result_response(request_id, initialize_result())
        if method == "ping":
            return make_result_response(request_id, {})
        if method in ("tools/list", "list_tools"):
            return make_result_response(request_id, {"tools": self.catalogue.describe()})
        if method in ("tools/call", "call_tool"):
            return await self._call_tool(request_id, params, open_client)
        return make_error_response(request_id, f"Unknown method: {method}", METHOD_NOT_FOUND)

    async def _call_tool(self, request_id: Any, params: Any, open_client: ClientOpener) -> Dict[str, Any]:
        if not isinstance(params, dict):
            return make_error_response(request_id, "params must be an object", INVALID_PARAMS)
        name = params.get("name")
        arguments = params.get("arguments") or {}
        if not isinstance(name, str) or not name:
            return make_error_response(request_id, "Missing tool name", INVALID_PARAMS)

        try:
            self.catalogue.get(name)
            async with open_client() as client:
                output = await self.catalogue.call(name, arguments, client)
        except (UnknownToolError, InvalidToolArguments) as exc:
            return error_for_exception(request_id, exc)
        except VKMCPError as exc:
            log.warning("Tool %s failed: %s", name, exc)
            return self._failure(request_id, exc)
        except Exception as exc:  # noqa: BLE001
            log.exception("Tool %s crashed", name)
            return self._failure(request_id, exc)

        return make_result_response(request_id, self._format(output))

    def _format(self, output: ToolOutput) -> Dict[str, Any]:
        if self.result_style == "content":
            return {"content": [{"type": "text", "text": output.text}], "isError": False}
        if output.data is None:
            return {"text": output.text}
        if isinstance(output.data, dict):
            return output.data
        return {"response": output.data}

    def _failure(self, request_id: Any, exc: Exception) -> Dict[str, Any]:
        if self.result_style == "content":
            return make_result_response(
                request_id,
                {"content": [{"type": "text", "text": f"Error: {exc}"}], "isError": True},
            )
        return error_for_exception(request_id, exc)
