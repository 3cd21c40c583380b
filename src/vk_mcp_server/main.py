#!/usr/bin/env python
import logging

import anyio

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from .config_loader import ServerConfig, create_client, load_config_from_env, setup_logging
from .core.vk_api import VKApiClient
from .errors import VKMCPError
from .mcp_protocol import SERVER_NAME
from .tools.catalogue import ToolCatalogue, ToolSpec, build_catalogue

log = logging.getLogger(__name__)


def _bind_tool(mcp: FastMCP, spec: ToolSpec, client: VKApiClient) -> None:
    """Expose one catalogue entry as a FastMCP tool taking a single ``input`` object."""
    input_model = spec.input_model

    async def _tool(input: input_model) -> str:
        try:
            output = await spec.handler(client, input)
        except VKMCPError as exc:
            log.warning("Tool %s failed: %s", spec.name, exc)
            raise ToolError(f"Error: {exc}") from exc
        return output.text

    _tool.__name__ = spec.name
    _tool.__doc__ = spec.description
    mcp.tool(name=spec.name, description=spec.description)(_tool)


def create_mcp_server(
    config: ServerConfig | None = None,
    client: VKApiClient | None = None,
    catalogue: ToolCatalogue | None = None,
) -> FastMCP:
    """Create MCP server with every VK tool registered."""
    cfg = config or load_config_from_env()
    vk = client or create_client(cfg)
    tools = catalogue or build_catalogue()

    mcp = FastMCP(SERVER_NAME)
    for spec in tools.specs():
        _bind_tool(mcp, spec, vk)

    log.info("Registered %d VK tools (API v%s)", len(tools), vk.api_version)
    return mcp


def run(config: ServerConfig | None = None) -> None:
    """Run MCP server using stdio transport (MCP clients connect via pipes)."""

    cfg = config or load_config_from_env()
    setup_logging(cfg.log_level)
    client = create_client(cfg)
    server = create_mcp_server(cfg, client=client)

    async def _serve():
        try:
            await server.run_async(transport="stdio")
        finally:
            await client.aclose()

    anyio.run(_serve)


if __name__ == "__main__":
    run()
