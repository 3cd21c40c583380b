from typing import Any, Callable, Dict, List, Union

import httpx
import pytest

from vk_mcp_server.config_loader import ServerConfig
from vk_mcp_server.core.vk_api import VKApiClient

TEST_TOKEN = "vk1.a.test-token-0123456789"

Reply = Union[Dict[str, Any], httpx.Response, Callable[[httpx.Request], Any]]


class FakeVK(object):
    """Route VK method calls and upload URLs to canned replies."""

    def __init__(self):
        self.replies: Dict[str, Reply] = {}
        self.requests: List[httpx.Request] = []

    def on(self, key: str, reply: Reply) -> "FakeVK":
        self.replies[key] = reply
        return self

    def respond(self, method: str, response: Any) -> "FakeVK":
        return self.on(method, {"response": response})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "api.vk.com":
            key = request.url.path.rsplit("/", 1)[-1]
        else:
            key = str(request.url).split("?")[0]
        reply = self.replies.get(key)
        if reply is None:
            return httpx.Response(404, json={"detail": "not mocked: %s" % key})
        if callable(reply):
            reply = reply(request)
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)

    def params(self, method: str) -> List[Dict[str, str]]:
        return [
            dict(r.url.params)
            for r in self.requests
            if r.url.host == "api.vk.com" and r.url.path.endswith("/" + method)
        ]

    def client(self, token: str = TEST_TOKEN) -> VKApiClient:
        return VKApiClient(token, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_vk() -> FakeVK:
    return FakeVK()


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(vk_access_token=TEST_TOKEN, vk_group_id="555")
