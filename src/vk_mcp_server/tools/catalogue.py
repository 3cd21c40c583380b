import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from ..core.vk_api import VKApiClient
from ..errors import InvalidToolArguments, UnknownToolError

logger = logging.getLogger(__name__)


@dataclass
class ToolOutput(object):
    """Result of one tool call.

    ``text`` is what MCP clients see, ``data`` is the JSON payload returned
    to JSON-RPC clients.
    """

    text: str
    data: Any = None


Handler = Callable[[VKApiClient, BaseModel], Awaitable[ToolOutput]]


@dataclass
class ToolSpec(object):
    """A named, schema-described operation mapped onto the VK API."""

    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Handler

    def input_schema(self) -> Dict[str, Any]:
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        return schema

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


def to_json_text(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


def json_output(data: Any) -> ToolOutput:
    return ToolOutput(text=to_json_text(data), data=data)


def vk_method_handler(method: str) -> Handler:
    """Return a handler passing the validated arguments straight to ``method``."""

    async def _handler(client: VKApiClient, args: BaseModel) -> ToolOutput:
        result = await client.call(method, args.model_dump(exclude_none=True))
        return json_output(result)

    return _handler


class ToolCatalogue(object):
    """Ordered registry of the tools exposed by every transport."""

    def __init__(self):
        self._tools: Dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._tools[spec.name] = spec

    def add(self, name: str, description: str, input_model: Type[BaseModel], handler: Handler) -> None:
        self.register(ToolSpec(name=name, description=description, input_model=input_model, handler=handler))

    def get(self, name: Optional[str]) -> ToolSpec:
        spec = self._tools.get(name or "")
        if spec is None:
            raise UnknownToolError(name or "")
        return spec

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> List[str]:
        return list(self._tools)

    def specs(self) -> List[ToolSpec]:
        return list(self._tools.values())

    def describe(self) -> List[Dict[str, Any]]:
        return [spec.describe() for spec in self._tools.values()]

    def validate(self, name: str, arguments: Optional[Dict[str, Any]]) -> BaseModel:
        spec = self.get(name)
        try:
            return spec.input_model.model_validate(arguments or {})
        except ValidationError as exc:
            raise InvalidToolArguments(name, exc.errors(include_url=False)) from exc

    async def call(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]],
        client: VKApiClient,
    ) -> ToolOutput:
        spec = self.get(name)
        args = self.validate(name, arguments)
        logger.info("Tool call: %s", name)
        return await spec.handler(client, args)


def build_catalogue() -> ToolCatalogue:
    """Create the catalogue with every VK tool registered."""
    from .engagement_tools import register_engagement_tools
    from .group_tools import register_group_tools
    from .media_tools import register_media_tools
    from .story_tools import register_story_tools
    from .user_tools import register_user_tools
    from .wall_tools import register_wall_tools

    catalogue = ToolCatalogue()
    register_wall_tools(catalogue)
    register_engagement_tools(catalogue)
    register_group_tools(catalogue)
    register_user_tools(catalogue)
    register_media_tools(catalogue)
    register_story_tools(catalogue)
    return catalogue
