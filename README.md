# countermcp

A small Model Context Protocol (MCP) server. It speaks JSON-RPC 2.0 over
HTTP, using `aiohttp`, and offers:

- **Tools** that work on a shared integer counter, which starts at 0:
  `increment`, `decrement` and `get_value`. There are also `say_hello`,
  `echo` (returns its `saying` argument) and `sum` (adds the 32-bit
  integers `a` and `b`).
- **Resources**: `str:////Users/to/some/path/` and `memo://insights`.
  There are no resource templates.
- **Prompts**: `example_prompt`, which needs a `message` argument.
- A plain `GET /hello` route that answers `Hello world! state`.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Running the server

```
countermcp
```

The server listens on `127.0.0.1:3000` by default. Use `--bind host:port`
to choose another address:

```
countermcp --bind 0.0.0.0:8080
```

Log output goes to standard error.

## The MCP endpoint

The endpoint is served at both `/mcp` and `/mcp/`.

- `POST` takes a JSON-RPC message or a batch (a JSON array). The supported
  methods are `initialize`, `ping`, `tools/list`, `tools/call`,
  `resources/list`, `resources/read`, `resources/templates/list`,
  `prompts/list` and `prompts/get`.
  - An `initialize` request sent without an `Mcp-Session-Id` header starts a
    new session. The new id comes back in the `Mcp-Session-Id` response
    header.
  - Every other request must carry that header. A missing header gives
    `400` and an unknown session gives `404`.
  - If the `Accept` header includes `text/event-stream`, the reply is sent as
    a single server-sent event. Otherwise it is plain JSON.
  - If the message holds only notifications or responses, the reply is
    `202 Accepted` with no body.
- `GET` opens a server-sent event stream for a session. The stream sends a
  `:ping` comment every 15 seconds until the session ends.
- `DELETE` ends a session, closes its event stream and answers `202`.

### Example

```
curl -si -X POST http://127.0.0.1:3000/mcp/ \
  -H 'Content-Type: application/json' \
  -d '{"jsonrpc":"2.0","id":1,"method":"initialize","params":{}}'
# read the Mcp-Session-Id header from the response, then:
curl -s -X POST http://127.0.0.1:3000/mcp/ \
  -H 'Content-Type: application/json' \
  -H 'Mcp-Session-Id: <session id>' \
  -d '{"jsonrpc":"2.0","id":2,"method":"tools/call","params":{"name":"increment","arguments":{}}}'
```

Errors come back as JSON-RPC error objects. An unknown method gives
`-32601`, bad parameters or an unknown tool or prompt give `-32602`, and an
unknown resource gives `-32002`, with the `uri` in its data.

## Using it from Python

`countermcp.counter.Counter` is the service itself. Each tool is a method
that returns an MCP tool result (a dict). `handle_message` answers a whole
JSON-RPC message:

```python
import asyncio
from countermcp.counter import Counter, MockDataService

async def demo():
    counter = Counter(external=MockDataService())
    await counter.increment()
    print(await counter.get_value())
    print(await counter.handle_message(
        {"jsonrpc": "2.0", "id": 1, "method": "tools/call",
         "params": {"name": "sum", "arguments": {"a": 2, "b": 3}}}
    ))

asyncio.run(demo())
```

The name of the first resource comes from a `DataService`. Subclass it and
implement `get_data()` to supply your own. `MockDataService` returns a fixed
string.

`countermcp.server.create_app(counter, app_state, keep_alive)` builds the
`aiohttp` application. Every argument is optional. Use it to embed the
server in your own process or to test it.

## Limitations

- The event stream opened by `GET` carries only keep-alive pings. Replies are
  always sent in the body of the `POST` response, and the server never sends
  requests or notifications of its own.
- Sessions exist only in memory and end when the server stops.
- Only the HTTP transport is offered. There is no standard input/output
  transport.

## Tests

```
pytest
```