import pytest

from countermcp.counter import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    MEMO_RESOURCE_URI,
    METHOD_NOT_FOUND,
    PATH_RESOURCE_URI,
    RESOURCE_NOT_FOUND,
    Counter,
    DataService,
    GenericServer,
    McpError,
    MockDataService,
    StructRequest,
)


class _FixedService(DataService):
    def __init__(self, value):
        self.value = value

    def get_data(self):
        return self.value


def _text(result):
    return result["content"][0]["text"]


def test_mock_data_service():
    assert MockDataService().get_data() == "mock dataasdfasdf"


@pytest.mark.asyncio
async def test_generic_server_uses_service():
    server = GenericServer(_FixedService("payload"))
    assert await server.get_data() == "payload"


@pytest.mark.asyncio
async def test_increment_then_decrement_restores_value():
    counter = Counter(value=41)
    before = _text(await counter.get_value())
    after_inc = _text(await counter.increment())
    assert _text(await counter.get_value()) == after_inc
    assert int(after_inc) == int(before) + 1
    assert _text(await counter.decrement()) == before


@pytest.mark.asyncio
async def test_counter_starts_at_zero():
    assert _text(await Counter().get_value()) == "0"


def test_say_hello_and_echo():
    counter = Counter()
    assert _text(counter.say_hello()) == "hello"
    assert _text(counter.echo("repeat me")) == "repeat me"
    assert counter.echo("x")["isError"] is False


def test_sum_identity_and_commutativity():
    counter = Counter()
    assert _text(counter.sum(StructRequest(a=7, b=0))) == "7"
    assert _text(counter.sum(StructRequest(a=11, b=-4))) == _text(counter.sum(StructRequest(a=-4, b=11)))


@pytest.mark.asyncio
async def test_call_tool_dispatches():
    counter = Counter()
    assert _text(await counter.call_tool("echo", {"saying": "hi"})) == "hi"
    assert _text(await counter.call_tool("sum", {"a": 9, "b": 0})) == "9"
    incremented = _text(await counter.call_tool("increment"))
    assert _text(await counter.call_tool("get_value", {})) == incremented


@pytest.mark.asyncio
async def test_call_tool_unknown_tool():
    with pytest.raises(McpError) as info:
        await Counter().call_tool("nope", {})
    assert info.value.code == INVALID_PARAMS


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name,arguments",
    [("echo", {}), ("echo", {"saying": 3}), ("sum", {"a": 1}), ("sum", {"a": True, "b": 1}), ("sum", {"a": 2**31, "b": 0})],
)
async def test_call_tool_bad_arguments(name, arguments):
    with pytest.raises(McpError) as info:
        await Counter().call_tool(name, arguments)
    assert info.value.code == INVALID_PARAMS


def test_list_tools_names():
    names = [tool["name"] for tool in Counter().list_tools()["tools"]]
    assert sorted(names) == sorted(["increment", "decrement", "get_value", "say_hello", "echo", "sum"])


def test_list_resources_uses_external_data():
    counter = Counter(external=_FixedService("external-name"))
    resources = counter.list_resources()["resources"]
    assert resources[0] == {"uri": PATH_RESOURCE_URI, "name": "external-name"}
    assert resources[1] == {"uri": MEMO_RESOURCE_URI, "name": "memo-name"}


def test_read_resource_known_uris():
    counter = Counter()
    path = counter.read_resource(PATH_RESOURCE_URI)["contents"][0]
    assert path["text"] == "/Users/to/some/path/"
    assert path["uri"] == PATH_RESOURCE_URI
    memo = counter.read_resource(MEMO_RESOURCE_URI)["contents"][0]
    assert memo["text"].startswith("Business Intelligence Memo")


def test_read_resource_unknown_uri():
    with pytest.raises(McpError) as info:
        Counter().read_resource("file:///missing")
    assert info.value.code == RESOURCE_NOT_FOUND
    assert info.value.data == {"uri": "file:///missing"}


def test_prompts():
    counter = Counter()
    prompt = counter.list_prompts()["prompts"][0]
    assert prompt["name"] == "example_prompt"
    assert prompt["arguments"][0]["required"] is True
    result = counter.get_prompt("example_prompt", {"message": "abc"})
    message = result["messages"][0]
    assert message["role"] == "user"
    assert message["content"]["text"] == "This is an example prompt with your message here: 'abc'"


@pytest.mark.parametrize("name,arguments", [("example_prompt", None), ("example_prompt", {"message": 1}), ("other", {"message": "x"})])
def test_get_prompt_errors(name, arguments):
    with pytest.raises(McpError) as info:
        Counter().get_prompt(name, arguments)
    assert info.value.code == INVALID_PARAMS


def test_resource_templates_empty():
    assert Counter().list_resource_templates() == {"resourceTemplates": []}


def test_error_to_dict():
    assert McpError(INVALID_PARAMS, "bad", {"k": "v"}).to_dict() == {"code": INVALID_PARAMS, "message": "bad", "data": {"k": "v"}}
    assert McpError(INVALID_PARAMS, "bad").to_dict() == {"code": INVALID_PARAMS, "message": "bad"}


def test_get_info():
    info = Counter().get_info()
    assert info["protocolVersion"] == "2024-11-05"
    assert set(info["capabilities"]) == {"prompts", "resources", "tools"}
    assert "counter" in info["instructions"]


@pytest.mark.asyncio
async def test_handle_message_initialize_and_call():
    counter = Counter()
    reply = await counter.handle_message({"jsonrpc": "2.0", "id": 5, "method": "initialize", "params": {}})
    assert reply["id"] == 5
    assert reply["result"] == counter.get_info()
    call = {"jsonrpc": "2.0", "id": 6, "method": "tools/call", "params": {"name": "echo", "arguments": {"saying": "yo"}}}
    reply = await counter.handle_message(call)
    assert _text(reply["result"]) == "yo"


@pytest.mark.asyncio
async def test_handle_message_notification_returns_none():
    reply = await Counter().handle_message({"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert reply is None


@pytest.mark.asyncio
async def test_handle_message_errors():
    counter = Counter()
    unknown = await counter.handle_message({"jsonrpc": "2.0", "id": 1, "method": "nothing"})
    assert unknown["error"]["code"] == METHOD_NOT_FOUND
    invalid = await counter.handle_message({"id": 1, "method": "ping"})
    assert invalid["error"]["code"] == INVALID_REQUEST
    missing = await counter.handle_message({"jsonrpc": "2.0", "id": 2, "method": "resources/read", "params": {"uri": "x://y"}})
    assert missing["error"]["code"] == RESOURCE_NOT_FOUND
    assert missing["id"] == 2