"""Model Context Protocol client over a pluggable JSON-RPC transport."""

from __future__ import annotations

import abc
import itertools
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

JSONRPC_VERSION = "2.0"


@dataclass
class JSONRPCRequest:
    """A JSON-RPC request sent from the client to the server."""

    id: int | str
    method: str
    params: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
        }
        if self.params is not None:
            data["params"] = self.params
        return data


@dataclass
class JSONRPCNotification:
    """A JSON-RPC notification: a message that expects no response."""

    method: str
    params: dict[str, Any] = field(default_factory=dict)
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "method": self.method}
        if self.params:
            data["params"] = self.params
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JSONRPCNotification:
        if "method" not in data:
            raise ValueError("notification has no method")
        return cls(
            method=data["method"],
            params=dict(data.get("params") or {}),
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
        )


@dataclass
class RPCError:
    """The error member of a JSON-RPC response."""

    code: int
    message: str
    data: Any = None


@dataclass
class JSONRPCResponse:
    """A JSON-RPC response carrying either a result or an error."""

    id: int | str | None
    result: Any = None
    error: RPCError | None = None
    jsonrpc: str = JSONRPC_VERSION

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JSONRPCResponse:
        error = None
        raw_error = data.get("error")
        if raw_error is not None:
            error = RPCError(
                code=int(raw_error.get("code", 0)),
                message=str(raw_error.get("message", "")),
                data=raw_error.get("data"),
            )
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=error,
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
        )


NotificationHandler = Callable[[JSONRPCNotification], None]


class Transport(abc.ABC):
    """The channel a client uses to exchange JSON-RPC messages with a server."""

    @abc.abstractmethod
    def start(self) -> None:
        """Open the connection."""

    @abc.abstractmethod
    def send_request(self, request: JSONRPCRequest) -> JSONRPCResponse:
        """Send a request and wait for its response."""

    @abc.abstractmethod
    def send_notification(self, notification: JSONRPCNotification) -> None:
        """Send a notification without waiting for anything back."""

    @abc.abstractmethod
    def set_notification_handler(self, handler: NotificationHandler) -> None:
        """Register the callback for notifications arriving from the server."""

    @abc.abstractmethod
    def close(self) -> None:
        """Close the connection."""


class ClientError(Exception):
    """Raised when a request fails, in the transport or on the server."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class Client:
    """An MCP client speaking to one server through a transport."""

    def __init__(
        self,
        transport: Transport | None,
        client_capabilities: Mapping[str, Any] | None = None,
    ) -> None:
        self._transport = transport
        self._client_capabilities: dict[str, Any] = dict(client_capabilities or {})
        self._server_capabilities: dict[str, Any] = {}
        self._initialized = False
        self._handlers: list[NotificationHandler] = []
        self._handlers_lock = threading.Lock()
        self._ids = itertools.count(1)
        self._ids_lock = threading.Lock()

    @property
    def transport(self) -> Transport | None:
        return self._transport

    @property
    def server_capabilities(self) -> dict[str, Any]:
        return self._server_capabilities

    @property
    def client_capabilities(self) -> dict[str, Any]:
        return self._client_capabilities

    @property
    def initialized(self) -> bool:
        return self._initialized

    def start(self) -> None:
        """Start the transport and begin dispatching server notifications."""
        if self._transport is None:
            raise ClientError("transport is nil")
        self._transport.start()
        self._transport.set_notification_handler(self._dispatch_notification)

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()

    def __enter__(self) -> Client:
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def on_notification(self, handler: NotificationHandler) -> None:
        """Add a notification handler; handlers run in the order added."""
        with self._handlers_lock:
            self._handlers.append(handler)

    def _dispatch_notification(self, notification: JSONRPCNotification) -> None:
        with self._handlers_lock:
            handlers = list(self._handlers)
        for handler in handlers:
            handler(notification)

    def _send_request(self, method: str, params: Any = None) -> Any:
        if not self._initialized and method != "initialize":
            raise ClientError("client not initialized")
        if self._transport is None:
            raise ClientError("transport is nil")
        with self._ids_lock:
            request_id = next(self._ids)
        request = JSONRPCRequest(id=request_id, method=method, params=params)
        try:
            response = self._transport.send_request(request)
        except Exception as exc:
            raise ClientError(f"transport error: {exc}") from exc
        if response.error is not None:
            raise ClientError(response.error.message, code=response.error.code)
        return response.result

    def _request_object(self, method: str, params: Any = None) -> dict[str, Any]:
        result = self._send_request(method, params)
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise ClientError(
                "failed to unmarshal response: expected an object, "
                f"got {type(result).__name__}"
            )
        return result

    def initialize(
        self,
        protocol_version: str,
        client_info: Mapping[str, Any],
        capabilities: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Negotiate with the server; must precede every other request."""
        params = {
            "protocolVersion": protocol_version,
            "clientInfo": dict(client_info),
            "capabilities": dict(capabilities or {}),
        }
        result = self._request_object("initialize", params)
        capabilities_result = result.get("capabilities") or {}
        if not isinstance(capabilities_result, dict):
            raise ClientError("failed to unmarshal response: capabilities is not an object")
        self._server_capabilities = capabilities_result

        notification = JSONRPCNotification(method="notifications/initialized")
        try:
            self._transport.send_notification(notification)
        except Exception as exc:
            raise ClientError(f"failed to send initialized notification: {exc}") from exc

        self._initialized = True
        return result

    def ping(self) -> None:
        self._send_request("ping")

    def _list_by_page(self, method: str, cursor: str | None) -> dict[str, Any]:
        params = {"cursor": cursor} if cursor else {}
        return self._request_object(method, params)

    def _list_all(self, method: str, key: str, cursor: str | None) -> dict[str, Any]:
        result = self._list_by_page(method, cursor)
        result.setdefault(key, [])
        while result.get("nextCursor"):
            page = self._list_by_page(method, result["nextCursor"])
            result[key].extend(page.get(key) or [])
            result["nextCursor"] = page.get("nextCursor", "")
        result.pop("nextCursor", None)
        return result

    def list_resources_by_page(self, cursor: str | None = None) -> dict[str, Any]:
        return self._list_by_page("resources/list", cursor)

    def list_resources(self, cursor: str | None = None) -> dict[str, Any]:
        return self._list_all("resources/list", "resources", cursor)

    def list_resource_templates_by_page(self, cursor: str | None = None) -> dict[str, Any]:
        return self._list_by_page("resources/templates/list", cursor)

    def list_resource_templates(self, cursor: str | None = None) -> dict[str, Any]:
        return self._list_all("resources/templates/list", "resourceTemplates", cursor)

    def read_resource(
        self, uri: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"uri": uri}
        if arguments:
            params["arguments"] = dict(arguments)
        return self._request_object("resources/read", params)

    def subscribe(self, uri: str) -> None:
        self._send_request("resources/subscribe", {"uri": uri})

    def unsubscribe(self, uri: str) -> None:
        self._send_request("resources/unsubscribe", {"uri": uri})

    def list_prompts_by_page(self, cursor: str | None = None) -> dict[str, Any]:
        return self._list_by_page("prompts/list", cursor)

    def list_prompts(self, cursor: str | None = None) -> dict[str, Any]:
        return self._list_all("prompts/list", "prompts", cursor)

    def get_prompt(
        self, name: str, arguments: Mapping[str, str] | None = None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"name": name}
        if arguments:
            params["arguments"] = dict(arguments)
        return self._request_object("prompts/get", params)

    def list_tools_by_page(self, cursor: str | None = None) -> dict[str, Any]:
        return self._list_by_page("tools/list", cursor)

    def list_tools(self, cursor: str | None = None) -> dict[str, Any]:
        return self._list_all("tools/list", "tools", cursor)

    def call_tool(
        self, name: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"name": name}
        if arguments:
            params["arguments"] = dict(arguments)
        return self._request_object("tools/call", params)

    def set_level(self, level: str) -> None:
        self._send_request("logging/setLevel", {"level": level})

    def complete(
        self, ref: Mapping[str, Any], argument_name: str, argument_value: str
    ) -> dict[str, Any]:
        params = {
            "ref": dict(ref),
            "argument": {"name": argument_name, "value": argument_value},
        }
        return self._request_object("completion/complete", params)