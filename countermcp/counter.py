"""Counter service exposing MCP tools, resources and prompts over JSON-RPC."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping

PROTOCOL_VERSION = "2024-11-05"
INSTRUCTIONS = (
    "This server provides a counter tool that can increment and decrement values. "
    "The counter starts at 0 and can be modified using the 'increment' and "
    "'decrement' tools. Use 'get_value' to check the current count."
)

INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
RESOURCE_NOT_FOUND = -32002

PATH_RESOURCE_URI = "str:////Users/to/some/path/"
MEMO_RESOURCE_URI = "memo://insights"
_RESOURCE_TEXTS = {
    PATH_RESOURCE_URI: "/Users/to/some/path/",
    MEMO_RESOURCE_URI: "Business Intelligence Memo\n\nAnalysis has revealed 5 key insights ...",
}


def _tool(name: str, description: str, properties: dict[str, Any] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties or {}}
    if properties:
        schema["required"] = list(properties)
    return {"name": name, "description": description, "inputSchema": schema}


_INT32 = {"type": "integer", "format": "int32"}
_TOOLS = [
    _tool("increment", "Increment the counter by 1"),
    _tool("decrement", "Decrement the counter by 1"),
    _tool("get_value", "Get the current counter value"),
    _tool("say_hello", "Say hello to the client"),
    _tool("echo", "Repeat what you say", {"saying": {"type": "string", "description": "Repeat what you say"}}),
    _tool("sum", "Calculate the sum of two numbers", {"a": _INT32, "b": _INT32}),
]


class McpError(Exception):
    """A JSON-RPC error raised by the service."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-RPC error object."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class DataService(ABC):
    """Source of external data shown as a resource name."""

    @abstractmethod
    def get_data(self) -> str:
        """Return the service's data."""


class MockDataService(DataService):
    """Fixed data used in place of a real service."""

    def get_data(self) -> str:
        return "mock dataasdfasdf"


class GenericServer:
    """A server exposing a single tool backed by a data service."""

    def __init__(self, data_service: DataService) -> None:
        self.data_service = data_service

    async def get_data(self) -> str:
        """Get data from the service."""
        return self.data_service.get_data()


@dataclass(frozen=True)
class StructRequest:
    """Arguments of the sum tool."""

    a: int
    b: int


def _text_result(text: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": False}


def _param(params: Mapping[str, Any], key: str, kind: type) -> Any:
    value = params.get(key)
    if isinstance(value, bool) or not isinstance(value, kind):
        raise McpError(INVALID_PARAMS, f"missing or invalid parameter '{key}'")
    if kind is int and not -(2**31) <= value < 2**31:
        raise McpError(INVALID_PARAMS, f"parameter '{key}' is out of range")
    return value


def _optional_mapping(params: Mapping[str, Any], key: str) -> dict[str, Any] | None:
    value = params.get(key)
    if value is not None and not isinstance(value, dict):
        raise McpError(INVALID_PARAMS, f"parameter '{key}' must be an object")
    return value


def _error_response(request_id: Any, error: McpError) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": error.to_dict()}


class Counter:
    """An MCP service holding a shared integer counter."""

    def __init__(self, value: int = 0, external: DataService | None = None) -> None:
        self._value = value
        self._lock = asyncio.Lock()
        self.external = external if external is not None else MockDataService()

    async def _change(self, delta: int) -> dict[str, Any]:
        async with self._lock:
            self._value += delta
            return _text_result(str(self._value))

    async def increment(self) -> dict[str, Any]:
        """Increment the counter by 1."""
        return await self._change(1)

    async def decrement(self) -> dict[str, Any]:
        """Decrement the counter by 1."""
        return await self._change(-1)

    async def get_value(self) -> dict[str, Any]:
        """Get the current counter value."""
        return await self._change(0)

    def say_hello(self) -> dict[str, Any]:
        """Say hello to the client."""
        return _text_result("hello")

    def echo(self, saying: str) -> dict[str, Any]:
        """Repeat what you say."""
        return _text_result(saying)

    def sum(self, request: StructRequest) -> dict[str, Any]:
        """Calculate the sum of two numbers."""
        return _text_result(str(request.a + request.b))

    def list_tools(self) -> dict[str, Any]:
        """Describe every tool the service offers."""
        return {"tools": [dict(tool) for tool in _TOOLS]}

    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Run the named tool with the given arguments."""
        args = arguments or {}
        if name in ("increment", "decrement", "get_value"):
            return await getattr(self, name)()
        if name == "say_hello":
            return self.say_hello()
        if name == "echo":
            return self.echo(_param(args, "saying", str))
        if name == "sum":
            return self.sum(StructRequest(_param(args, "a", int), _param(args, "b", int)))
        raise McpError(INVALID_PARAMS, "tool not found")

    def get_info(self) -> dict[str, Any]:
        """Return the server description sent on initialisation."""
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"prompts": {}, "resources": {}, "tools": {}},
            "serverInfo": {"name": "countermcp", "version": "0.1.0"},
            "instructions": INSTRUCTIONS,
        }

    def list_resources(self) -> dict[str, Any]:
        """List the readable resources."""
        return {
            "resources": [
                {"uri": PATH_RESOURCE_URI, "name": self.external.get_data()},
                {"uri": MEMO_RESOURCE_URI, "name": "memo-name"},
            ]
        }

    def read_resource(self, uri: str) -> dict[str, Any]:
        """Return the contents of the resource at ``uri``."""
        if uri not in _RESOURCE_TEXTS:
            raise McpError(RESOURCE_NOT_FOUND, "resource_not_found", {"uri": uri})
        return {"contents": [{"uri": uri, "mimeType": "text", "text": _RESOURCE_TEXTS[uri]}]}

    def list_prompts(self) -> dict[str, Any]:
        """List the available prompts."""
        return {
            "prompts": [
                {
                    "name": "example_prompt",
                    "description": "This is an example prompt that takes one required argument, message",
                    "arguments": [
                        {"name": "message", "description": "A message to put in the prompt", "required": True}
                    ],
                }
            ]
        }

    def get_prompt(self, name: str, arguments: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Render the named prompt with its arguments."""
        if name != "example_prompt":
            raise McpError(INVALID_PARAMS, "prompt not found")
        message = (arguments or {}).get("message")
        if not isinstance(message, str):
            raise McpError(INVALID_PARAMS, "No message provided to example_prompt")
        prompt = f"This is an example prompt with your message here: '{message}'"
        return {"messages": [{"role": "user", "content": {"type": "text", "text": prompt}}]}

    def list_resource_templates(self) -> dict[str, Any]:
        """List resource templates; there are none."""
        return {"resourceTemplates": []}

    async def handle_message(self, message: Any) -> dict[str, Any] | None:
        """Answer one JSON-RPC message; notifications and responses get ``None``."""
        if not isinstance(message, dict) or message.get("jsonrpc") != "2.0":
            return _error_response(None, McpError(INVALID_REQUEST, "invalid JSON-RPC message"))
        method = message.get("method")
        if method is None or "id" not in message:
            return None
        request_id = message["id"]
        try:
            if not isinstance(method, str):
                raise McpError(INVALID_REQUEST, "method must be a string")
            params = message.get("params") or {}
            if not isinstance(params, dict):
                raise McpError(INVALID_PARAMS, "params must be an object")
            result = await self._dispatch(method, params)
        except McpError as error:
            return _error_response(request_id, error)
        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    async def _dispatch(self, method: str, params: Mapping[str, Any]) -> dict[str, Any]:
        simple = {
            "initialize": self.get_info,
            "ping": dict,
            "tools/list": self.list_tools,
            "resources/list": self.list_resources,
            "resources/templates/list": self.list_resource_templates,
            "prompts/list": self.list_prompts,
        }
        if method in simple:
            return simple[method]()
        if method == "tools/call":
            return await self.call_tool(_param(params, "name", str), _optional_mapping(params, "arguments"))
        if method == "resources/read":
            return self.read_resource(_param(params, "uri", str))
        if method == "prompts/get":
            return self.get_prompt(_param(params, "name", str), _optional_mapping(params, "arguments"))
        raise McpError(METHOD_NOT_FOUND, "method not found")