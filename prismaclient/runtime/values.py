"""Value types and codecs shared by the client runtime."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INTEGER = re.compile(r"[+-]?[0-9]+")


class PrismaError(Exception):
    """Base class for errors raised by the client runtime."""


class NotFoundError(PrismaError):
    """Raised when a database record does not exist."""

    def __init__(self, message: str = "ErrNotFound") -> None:
        super().__init__(message)


@dataclass
class BatchResult:
    """The number of records touched by a batch operation."""

    count: int


def format_datetime(value: datetime) -> str:
    """Format as RFC 3339 with at most millisecond precision; naive values count as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    fraction = f"{value.microsecond // 1000:03d}".rstrip("0")
    if fraction:
        text += "." + fraction
    offset = value.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _unquote(data: str | bytes, label: str) -> str:
    try:
        text = json.loads(data)
    except ValueError as exc:
        raise ValueError(f"{label}: {exc}") from exc
    if not isinstance(text, str):
        raise ValueError(f"{label}: expected a quoted string")
    return text


def parse_bigint(data: str | bytes) -> int:
    """Decode a 64-bit integer sent by the query engine as a JSON string."""
    text = _unquote(data, "BigInt: unquote")
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"BigInt: invalid syntax: {text!r}")
    number = int(text)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(f"BigInt: value out of range: {text!r}")
    return number


def encode_json(value: str | bytes | None) -> str:
    """Encode raw JSON text as the quoted string the query engine expects."""
    if value is None:
        return "null"
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8")
    return json.dumps(value, ensure_ascii=False)


def decode_json(data: str | bytes) -> str:
    """Recover raw JSON text from the quoted string sent by the query engine."""
    return _unquote(data, "JSON: UnmarshalJSON error")