# mcpclient

A small client for the Model Context Protocol. It speaks JSON-RPC 2.0
through any object that implements the abstract `Transport` class in
`mcpclient.client`.

## Installation

```
pip install mcpclient
```

## Providing a transport

Subclass `mcpclient.client.Transport` and implement:

- `start()`: open the connection.
- `send_request(request)`: receives a `JSONRPCRequest` and returns a
  `JSONRPCResponse`. `JSONRPCRequest.to_dict()` gives the wire form.
  `JSONRPCResponse.from_dict(data)` builds a response from a decoded message.
  A response's `error` member is an `RPCError` with `code`, `message` and `data`.
- `send_notification(notification)`: receives a `JSONRPCNotification`.
- `set_notification_handler(handler)`: the client passes a callable. Call it
  with a `JSONRPCNotification` for each notification from the server.
  `JSONRPCNotification.from_dict(data)` builds one and raises `ValueError` if
  `method` is missing.
- `close()`: close the connection.

## Usage

```python
from mcpclient.client import Client

with Client(my_transport) as client:
    client.on_notification(lambda n: print("notification:", n.method))

    result = client.initialize(
        "2025-03-26",
        {"name": "example-client", "version": "1.0.0"},
    )
    print(result["serverInfo"]["name"])

    client.ping()

    for tool in client.list_tools()["tools"]:
        print(tool["name"])

    reply = client.call_tool("echo", {"text": "hello"})
    print(reply["content"])
```

Entering the `with` block calls `start()`, and leaving it calls `close()`.
`start()` raises `ClientError` if the client was given no transport. The
client registers its own notification dispatcher with the transport. Handlers
added with `on_notification` are called in the order they were added.

`Client(transport, client_capabilities=None)` stores the capabilities you pass.
The `transport`, `client_capabilities`, `server_capabilities` and `initialized`
properties expose the client's state. `server_capabilities` is filled in by
`initialize`.

### Requests

Results come back as plain dictionaries, decoded from the server's JSON.

- `initialize(protocol_version, client_info, capabilities=None)` must be called
  before any other request. Any other request made first raises
  `ClientError("client not initialized")`. After a successful reply the client
  sends `notifications/initialized`.
- `ping()`, `subscribe(uri)`, `unsubscribe(uri)` and `set_level(level)` return
  nothing.
- `read_resource(uri, arguments=None)`, `get_prompt(name, arguments=None)` and
  `call_tool(name, arguments=None)` each return the result object.
  `complete(ref, argument_name, argument_value)` does the same.
- `list_tools`, `list_prompts`, `list_resources` and `list_resource_templates`
  each take an optional starting `cursor`. They follow `nextCursor` until no
  pages remain and return every item under `tools`, `prompts`, `resources` or
  `resourceTemplates`.
- The `*_by_page` variants return one page, including its `nextCursor` if the
  server sent one.

Request ids are integers counting up from 1.

### Errors

All failures raise `ClientError`:

- An error reported by the server is raised with the server's message, and its
  code is set on the exception's `code` attribute.
- An exception raised by the transport is wrapped with a message beginning
  `transport error:`.
- A result that is not a JSON object, where an object is expected, raises
  `ClientError`.

## What this package does not include

The package ships no concrete transport: nothing for stdio subprocesses, HTTP
or server-sent events. It has no server side and no OAuth support. You supply
the transport and the server.

## Running the tests

```
pip install -e .[test]
pytest
```