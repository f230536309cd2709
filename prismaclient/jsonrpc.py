"""JSON-RPC messages exchanged with the Prisma CLI."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass
class Request:
    """An incoming JSON-RPC request."""

    jsonrpc: str = ""
    id: int = 0
    method: str = ""
    params: Any = None


@dataclass
class Response:
    """An outgoing JSON-RPC response."""

    jsonrpc: str
    id: int
    result: Any

    def to_dict(self) -> dict[str, Any]:
        result = self.result.to_dict() if hasattr(self.result, "to_dict") else self.result
        return {"jsonrpc": self.jsonrpc, "id": self.id, "result": result}


@dataclass
class Manifest:
    """Generator information reported to the Prisma CLI."""

    pretty_name: str = ""
    default_output: str = ""
    denylist: list[str] | None = None
    requires_generators: list[str] | None = None
    requires_engines: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "prettyName": self.pretty_name,
            "defaultOutput": self.default_output,
            "denylist": self.denylist,
            "requiresGenerators": self.requires_generators,
            "requiresEngines": self.requires_engines,
        }


@dataclass
class ManifestResponse:
    """The result returned when the CLI asks for the manifest."""

    manifest: Manifest

    def to_dict(self) -> dict[str, Any]:
        return {"manifest": self.manifest.to_dict()}


def _field(obj: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = obj.get(key)
    if value is None:
        return default
    if not isinstance(value, kind) or isinstance(value, bool) and kind is not bool:
        raise ValueError(f"invalid value for {key!r}: {value!r}")
    return value


def parse_request(data: str | bytes | dict[str, Any]) -> Request:
    """Decode a JSON-RPC request; raise ValueError if it is malformed."""
    obj = json.loads(data) if isinstance(data, (str, bytes, bytearray)) else data
    if not isinstance(obj, dict):
        raise ValueError("request must be a JSON object")
    return Request(
        jsonrpc=_field(obj, "jsonrpc", str, ""),
        id=_field(obj, "id", int, 0),
        method=_field(obj, "method", str, ""),
        params=obj.get("params"),
    )


def new_response(id: int, result: Any) -> Response:
    """Build a version 2.0 response to a CLI request."""
    return Response(jsonrpc="2.0", id=id, result=result)