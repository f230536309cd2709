"""String types with the casing helpers used when generating client code."""

from __future__ import annotations

import re

_NUMBER_SEQUENCE = re.compile(r"([a-zA-Z])([0-9]+)([a-zA-Z]?)")

_INITIALISMS = (
    "ACL", "API", "ASCII", "CPU", "CSS", "DNS", "EOF", "GUID", "HTML", "HTTP",
    "HTTPS", "ID", "IP", "JSON", "LHS", "QPS", "RAM", "RHS", "RPC", "SLA",
    "SMTP", "SQL", "SSH", "TCP", "TLS", "TTL", "UDP", "UI", "UID", "UUID",
    "URI", "URL", "UTF8", "VM", "XML", "XMPP", "XSRF", "XSS",
)


def _compile_initialisms() -> list[tuple[re.Pattern[str], re.Pattern[str], str]]:
    compiled = []
    for word in sorted(_INITIALISMS, key=len, reverse=True):
        capitalised = re.escape(word[0] + word[1:].lower())
        compiled.append(
            (re.compile(capitalised + "([^a-z])"), re.compile(capitalised + r"\Z"), word)
        )
    return compiled


_INITIALISM_PATTERNS = _compile_initialisms()

_BUILTIN = {
    "ID": "string",
    "String": "string",
    "Boolean": "bool",
    "Int": "int",
    "Float": "float64",
    "DateTime": "DateTime",
    "Json": "JSON",
    "Bytes": "Bytes",
    "BigInt": "BigInt",
}


def _camel(text: str, capitalise_first: bool) -> str:
    text = _NUMBER_SEQUENCE.sub(r"\1 \2 \3", text).strip(" ")
    parts = []
    cap_next = capitalise_first
    for ch in text:
        if "A" <= ch <= "Z" or "0" <= ch <= "9":
            parts.append(ch)
        elif "a" <= ch <= "z":
            parts.append(ch.upper() if cap_next else ch)
        cap_next = ch in ("_", " ", "-")
    return "".join(parts)


def to_camel(text: str) -> str:
    """Convert snake, kebab or spaced text to UpperCamelCase."""
    return _camel(text, True)


def to_lower_camel(text: str) -> str:
    """Convert snake, kebab or spaced text to lowerCamelCase."""
    if not text:
        return text
    if "A" <= text[0] <= "Z":
        text = text[0].lower() + text[1:]
    return _camel(text, False)


def apply_initialisms(text: str) -> str:
    """Upper-case common initialisms such as Id or Url where they end a word."""
    for inner, trailing, upper in _INITIALISM_PATTERNS:
        text = inner.sub(lambda m, upper=upper: upper + m.group(1), text)
        text = trailing.sub(upper, text)
    return text


def _is_separator(ch: str) -> bool:
    if ch <= "\x7f":
        return not (ch.isalnum() or ch == "_")
    if ch.isalpha() or ch.isdigit():
        return False
    return ch.isspace()


def _title(text: str) -> str:
    out = []
    previous = " "
    for ch in text:
        out.append(ch.upper() if _is_separator(previous) else ch)
        previous = ch
    return "".join(out)


class PrismaString(str):
    """A string with the casing transformations used in generated code."""

    __slots__ = ()

    def go_case(self) -> str:
        """Exported identifier casing, e.g. userId -> UserID."""
        return apply_initialisms(to_camel(self))

    def go_lower_case(self) -> str:
        """Unexported identifier casing."""
        return apply_initialisms(to_lower_camel(self))

    def camel_case(self) -> str:
        """lowerCamelCase, as used for JSON keys."""
        return to_lower_camel(self)

    def tag(self) -> str:
        """The struct tag mapping a field to its JSON key."""
        return f'`json:"{self}"`'

    def prisma_go_case(self) -> str:
        """Turn relevance into Relevance_."""
        return _title(self) + "_"

    def prisma_internal_case(self) -> str:
        """Turn relevance into _relevance."""
        return "_" + self


class PrismaType(str):
    """A schema type name with helpers to map it to generated types."""

    __slots__ = ()

    def value(self) -> str:
        """The native type for a built-in scalar, else the type name in exported casing."""
        builtin = _BUILTIN.get(str(self))
        if builtin is not None:
            return builtin
        return apply_initialisms(to_camel(self))

    def go_case(self) -> str:
        return apply_initialisms(to_camel(self))

    def go_lower_case(self) -> str:
        return apply_initialisms(to_lower_camel(self))

    def camel_case(self) -> str:
        return to_lower_camel(self)