import json

import pytest

from vk_mcp_server.websocket_server import MCPWebSocketServer

pytestmark = pytest.mark.anyio


@pytest.fixture
def server(config, fake_vk):
    return MCPWebSocketServer(config, client=fake_vk.client())


async def test_invalid_json(server):
    response = await server.handle_message("{oops")
    assert response == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Invalid JSON"}}


async def test_list_tools(server):
    response = await server.handle_message(json.dumps({"jsonrpc": "2.0", "id": 1, "method": "list_tools"}))
    tools = response["result"]["tools"]
    assert len(tools) == 40
    assert tools[0]["inputSchema"]["required"] == ["message"]


async def test_call_tool_returns_content(server, fake_vk):
    fake_vk.respond("groups.getById", [{"id": 1, "name": "API Club", "type": "page", "members_count": 3}])
    response = await server.handle_message(
        json.dumps(
            {
                "jsonrpc": "2.0",
                "id": 2,
                "method": "call_tool",
                "params": {"name": "get_group_info", "arguments": {"group_id": "1"}},
            }
        )
    )
    result = response["result"]
    assert result["isError"] is False
    assert result["content"][0]["text"].endswith("Members: 3")


async def test_tool_failure_is_an_error_result(server, fake_vk):
    fake_vk.on("groups.getById", {"error": {"error_code": 100, "error_msg": "One of the parameters specified was missing or invalid"}})
    response = await server.handle_message(
        json.dumps({"id": 3, "method": "tools/call", "params": {"name": "get_group_info", "arguments": {"group_id": "x"}}})
    )
    assert response["result"]["isError"] is True
    assert response["result"]["content"][0]["text"].startswith("Error: VK API Error:")


async def test_unknown_method(server):
    response = await server.handle_message(json.dumps({"id": 4, "method": "shutdown"}))
    assert response["error"]["code"] == -32601


async def test_ping(server):
    response = await server.handle_message(json.dumps({"jsonrpc": "2.0", "id": 5, "method": "ping"}))
    assert response["result"] == {}
