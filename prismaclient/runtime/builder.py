"""Builds query engine requests from inputs and selected outputs."""

from __future__ import annotations

import base64
import dataclasses
import json
import math
import queue
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Protocol

from prismaclient.logger import debug_logger
from prismaclient.runtime.values import PrismaError

_debug = debug_logger()


class Engine(Protocol):
    """Processes queries against the database."""

    def connect(self) -> None: ...

    def disconnect(self) -> None: ...

    def do(self, payload: Any) -> Any: ...

    def batch(self, payload: Any) -> Any: ...


@dataclass
class Field:
    """An input field: either a value or a subselection of fields."""

    name: str = ""
    list: bool = False
    wrap_list: bool = False
    value: Any = None
    fields: list[Field] | None = None


@dataclass
class Input:
    """An argument of an operation."""

    name: str = ""
    fields: list[Field] = field(default_factory=list)
    value: Any = None
    wrap_list: bool = False


@dataclass
class Output:
    """A selected output field, possibly with arguments and nested outputs."""

    name: str = ""
    inputs: list[Input] = field(default_factory=list)
    outputs: list[Output] = field(default_factory=list)


@dataclass
class Query:
    """One operation sent to the query engine."""

    engine: Engine | None = None
    operation: str = ""
    name: str = ""
    method: str = ""
    model: str = ""
    inputs: list[Input] = field(default_factory=list)
    outputs: list[Output] = field(default_factory=list)
    start: float = field(default_factory=time.perf_counter)
    tx_result: queue.Queue[Any] | None = None

    def build(self) -> str:
        """The full query document."""
        return f"{self.operation} {self.name}{{result: {self.build_inner()}}}"

    def build_inner(self) -> str:
        """The operation call with its arguments and selection."""
        parts = [self.method + self.model]
        if self.inputs:
            parts.append(_build_inputs(self.inputs))
        parts.append(" ")
        if self.outputs:
            parts.append(_build_outputs(self.outputs))
        return "".join(parts)

    def exec(self) -> Any:
        """Send the query and return the engine's response."""
        return self.do({"query": self.build(), "variables": {}})

    def do(self, payload: Any) -> Any:
        """Send a payload through the engine and return the response."""
        if self.engine is None:
            raise PrismaError(
                "client.Prisma.Connect() needs to be called before sending queries"
            )
        _debug.debug("[timing] building %r", time.perf_counter() - self.start)
        try:
            return self.engine.do(payload)
        finally:
            _debug.debug("[timing] TOTAL %r", time.perf_counter() - self.start)


def new_query() -> Query:
    """A fresh query whose timer starts now."""
    return Query()


def _build_inputs(inputs: list[Input]) -> str:
    parts = ["("]
    for item in inputs:
        parts.append(item.name + ":")
        if item.value is not None:
            parts.append(encode_value(item.value))
        else:
            inner = _build_fields(item.wrap_list, item.wrap_list, item.fields)
            parts.append(f"[{inner}]" if item.wrap_list else inner)
        parts.append(",")
    parts.append(")")
    return "".join(parts)


def _build_outputs(outputs: list[Output]) -> str:
    parts = ["{"]
    for out in outputs:
        parts.append(out.name + " ")
        if out.inputs:
            parts.append(_build_inputs(out.inputs))
        if out.outputs:
            parts.append(_build_outputs(out.outputs))
    parts.append("}")
    return "".join(parts)


def _merge_fields(fields: list[Field]) -> list[Field]:
    # fields of the same name share one subselection; repeated value fields stay
    # separate, which some operations such as linking several records rely on
    duplicates: list[Field] = []
    uniques: dict[str, Field] = {}
    for f in fields:
        existing = uniques.get(f.name)
        if existing is None:
            uniques[f.name] = dataclasses.replace(f)
        elif f.fields is not None:
            if f.fields:
                existing.fields = (existing.fields or []) + f.fields
        else:
            duplicates.append(f)
    return duplicates + list(uniques.values())


def _build_fields(is_list: bool, wrap_list: bool, fields: list[Field] | None) -> str:
    parts = [] if is_list else ["{"]
    for f in _merge_fields(fields or []):
        if wrap_list:
            parts.append("{")
        if f.name:
            parts.append(f.name + ":")
        if f.list:
            parts.append("[")
        if f.fields is not None:
            parts.append(_build_fields(f.list, f.wrap_list, f.fields))
        if f.value is not None:
            parts.append(encode_value(f.value))
        if f.list:
            parts.append("]")
        if wrap_list:
            parts.append("}")
        parts.append(",")
    if not is_list:
        parts.append("}")
    return "".join(parts)


def transform_equals(fields: list[Field]) -> list[Field]:
    """Replace subselections holding an equals filter by the filter's value."""
    result = []
    for f in fields:
        if f.fields is not None:
            for inner in f.fields:
                if inner.name == "equals":
                    f = dataclasses.replace(f, value=inner.value, fields=None)
        result.append(f)
    return result


# --- value encoding -----------------------------------------------------------

_STRING_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _encode_str(text: str) -> str:
    out = json.dumps(text, ensure_ascii=False)
    for raw, escaped in _STRING_ESCAPES:
        out = out.replace(raw, escaped)
    return out


def _encode_float(number: float) -> str:
    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"unsupported float value: {number!r}")
    magnitude = abs(number)
    if magnitude == 0 or 1e-6 <= magnitude < 1e21:
        return format(Decimal(repr(number)).normalize(), "f")
    text = repr(number)
    return text.replace("e-0", "e-").replace("e+0", "e+")


def _encode_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    fraction = f"{value.microsecond:06d}".rstrip("0")
    if fraction:
        text += "." + fraction
    offset = value.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _encode(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return _encode_float(value)
    if isinstance(value, str):
        return _encode_str(value)
    if isinstance(value, (bytes, bytearray)):
        return _encode_str(base64.b64encode(bytes(value)).decode("ascii"))
    if isinstance(value, datetime):
        return _encode_str(_encode_datetime(value))
    if isinstance(value, Decimal):
        return _encode_str(format(value, "f"))
    if isinstance(value, Mapping):
        items = []
        for key, item in value.items():
            if isinstance(key, bool) or not isinstance(key, (str, int)):
                raise TypeError(f"unsupported map key: {key!r}")
            items.append((str(key), item))
        items.sort(key=lambda pair: pair[0])
        return "{" + ",".join(f"{_encode_str(k)}:{_encode(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    raise TypeError(f"cannot encode value of type {type(value).__name__}")


def encode_value(value: Any) -> str:
    """Encode a value as compact JSON with sorted keys and HTML-safe strings."""
    return _encode(value)