"""
Manual connectivity test for the VK MCP WebSocket server.

1. Check raw TCP connectivity to the given host:port.
2. Perform a WebSocket handshake and ask the server for its tool list.

Use this script while `vk-mcp-websocket` is running.
"""

import argparse
import asyncio
import json
import socket
from urllib.parse import urlparse

from websockets.asyncio.client import connect
from websockets.exceptions import InvalidHandshake

CONNECT_TIMEOUT_SECONDS = 3.0


def check_tcp_connectivity(url: str) -> bool:
    """Check whether a TCP connection to the WebSocket host:port is possible."""
    parsed = urlparse(url)
    host = parsed.hostname or "127.0.0.1"

    if parsed.port is not None:
        port = parsed.port
    elif parsed.scheme == "wss":
        port = 443
    else:
        port = 80

    print("=== TCP connectivity check ===")
    print("Target host:", host)
    print("Target port:", port)

    try:
        with socket.create_connection((host, port), timeout=CONNECT_TIMEOUT_SECONDS):
            pass
    except OSError as exc:
        print()
        print("TCP connect failed:", repr(exc))
        print()
        print("Most likely causes:")
        print(" - vk-mcp-websocket is not running")
        print(" - MCP_SERVER_HOST / MCP_SERVER_PORT point somewhere else")
        print(" - Local firewall or security tool blocks the connection")
        return False
    print("TCP connect successful, port is open.")
    return True


async def check_websocket_handshake(url: str) -> None:
    """Perform a WebSocket handshake and request the tool list."""
    print()
    print("=== WebSocket handshake test ===")
    print("Target URL:", url)

    try:
        async with connect(url) as ws:
            print("WebSocket handshake successful.")
            await ws.send(json.dumps({"jsonrpc": "2.0", "id": 1, "method": "list_tools"}))
            reply = json.loads(await ws.recv())
    except (OSError, InvalidHandshake) as exc:
        print("WebSocket handshake failed:", repr(exc))
        print()
        print("Possible reasons:")
        print(" - The server on this port is not a WebSocket server")
        print(" - TLS/URL mismatch (ws:// vs wss://)")
        return

    if "error" in reply:
        print("Server answered with an error:", reply["error"])
        return
    tools = reply["result"]["tools"]
    print("Server exposes %d tools:" % len(tools))
    for tool in tools:
        print("  %-32s %s" % (tool["name"], tool["description"]))


def main() -> None:
    parser = argparse.ArgumentParser(description="Check connectivity to the VK MCP WebSocket server")
    parser.add_argument("--url", default="ws://127.0.0.1:8765", help="WebSocket URL")
    args = parser.parse_args()

    print("Manual WebSocket connectivity test for VK MCP Server")
    print("Target URL:", args.url)
    print("=" * 60)

    if not check_tcp_connectivity(args.url):
        return

    print("=" * 60)
    asyncio.run(check_websocket_handshake(args.url))


if __name__ == "__main__":
    main()
