"""Generator input sent by the Prisma CLI and the steps that act on it."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from prismaclient.generator.dmmf import Document, parse_document
from prismaclient.generator.names import PrismaString
from prismaclient.generator.transform import AST, build_ast
from prismaclient.logger import debug_logger

DEFAULT_PACKAGE_NAME = "db"
ENGINE_TYPE_ENV_VAR = "PRISMA_CLIENT_ENGINE_TYPE"
GITIGNORE_CONTENT = "# gitignore generated by Prisma Client Go. DO NOT EDIT.\n*_gen.go\n"

_debug = debug_logger()


class ConnectorType(str, Enum):
    """The database a datasource connects to."""

    MYSQL = "mysql"
    MONGO = "mongo"
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


@dataclass
class Config:
    """Options of the client generator block."""

    engine_type: str = ""
    package: PrismaString = PrismaString("")
    disable_gitignore: str = ""
    disable_go_binaries: str = ""


@dataclass
class Value:
    """A value that may have been read from an environment variable."""

    from_env_var: str = ""
    value: str = ""


@dataclass
class BinaryTarget:
    """A platform the query engine is fetched for."""

    from_env_var: str = ""
    value: str = ""


@dataclass
class Generator:
    """A generator block of the Prisma schema."""

    output: Value | None = None
    name: PrismaString = PrismaString("")
    provider: Value | None = None
    config: Config = field(default_factory=Config)
    binary_targets: list[BinaryTarget] = field(default_factory=list)
    pinned_binary_target: str = ""


@dataclass
class EnvValue:
    """A string value and the environment variable it came from, if any."""

    from_env_var: str = ""
    value: str = ""


@dataclass
class Datasource:
    """A datasource block of the Prisma schema."""

    name: PrismaString = PrismaString("")
    connector_type: ConnectorType | str = ""
    url: EnvValue = field(default_factory=EnvValue)
    config: Any = None


@dataclass
class BinaryPaths:
    """Paths of the engine binaries, keyed by platform."""

    migration_engine: dict[str, str] = field(default_factory=dict)
    query_engine: dict[str, str] = field(default_factory=dict)
    introspection_engine: dict[str, str] = field(default_factory=dict)


@dataclass
class Root:
    """Everything the CLI hands to the generator."""

    generator: Generator = field(default_factory=Generator)
    other_generators: list[Generator] = field(default_factory=list)
    schema_path: str = ""
    dmmf: Document = field(default_factory=Document)
    datasources: list[Datasource] = field(default_factory=list)
    datamodel: str = ""
    binary_paths: BinaryPaths = field(default_factory=BinaryPaths)
    ast: AST | None = None

    def engine_type(self, environ: Mapping[str, str] | None = None) -> str:
        """The engine type: environment first, then schema config, else binary."""
        env = os.environ if environ is None else environ
        from_env = env.get(ENGINE_TYPE_ENV_VAR, "")
        if from_env:
            return from_env
        if self.generator.config.engine_type:
            return self.generator.config.engine_type
        return "binary"


# --- decoding ---------------------------------------------------------------


def _obj(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{where}: expected a JSON object, got {value!r}")
    return value


def _str(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string, got {value!r}")
    return value


def _items(obj: dict[str, Any], key: str) -> list[Any]:
    value = obj.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key}: expected a list, got {value!r}")
    return value


def _str_map(obj: dict[str, Any], key: str) -> dict[str, str]:
    mapping = _obj(obj.get(key), key)
    for k, v in mapping.items():
        if not isinstance(v, str):
            raise ValueError(f"{key}.{k}: expected a string, got {v!r}")
    return dict(mapping)


def _value(raw: Any, where: str) -> Value | None:
    if raw is None:
        return None
    obj = _obj(raw, where)
    return Value(from_env_var=_str(obj, "fromEnvVar"), value=_str(obj, "value"))


def _generator(raw: Any) -> Generator:
    obj = _obj(raw, "generator")
    cfg = _obj(obj.get("config"), "config")
    targets = []
    for item in _items(obj, "binaryTargets"):
        target = _obj(item, "binaryTarget")
        targets.append(
            BinaryTarget(from_env_var=_str(target, "fromEnvVar"), value=_str(target, "value"))
        )
    return Generator(
        output=_value(obj.get("output"), "output"),
        name=PrismaString(_str(obj, "name")),
        provider=_value(obj.get("provider"), "provider"),
        config=Config(
            engine_type=_str(cfg, "engineType"),
            package=PrismaString(_str(cfg, "package")),
            disable_gitignore=_str(cfg, "disableGitignore"),
            disable_go_binaries=_str(cfg, "disableGoBinaries"),
        ),
        binary_targets=targets,
        pinned_binary_target=_str(obj, "pinnedBinaryTarget"),
    )


def _datasource(raw: Any) -> Datasource:
    obj = _obj(raw, "datasource")
    url = _obj(obj.get("url"), "url")
    connector = _str(obj, "connectorType")
    try:
        connector_type: ConnectorType | str = ConnectorType(connector)
    except ValueError:
        connector_type = connector
    return Datasource(
        name=PrismaString(_str(obj, "name")),
        connector_type=connector_type,
        url=EnvValue(from_env_var=_str(url, "fromEnvVar"), value=_str(url, "value")),
        config=obj.get("config"),
    )


def parse_root(data: str | bytes | dict[str, Any]) -> Root:
    """Decode the generator input from JSON text or an already decoded object."""
    obj = json.loads(data) if isinstance(data, (str, bytes, bytearray)) else data
    obj = _obj(obj, "root")
    paths = _obj(obj.get("binaryPaths"), "binaryPaths")
    return Root(
        generator=_generator(obj.get("generator")),
        other_generators=[_generator(g) for g in _items(obj, "otherGenerators")],
        schema_path=_str(obj, "schemaPath"),
        dmmf=parse_document(_obj(obj.get("DMMF"), "DMMF")),
        datasources=[_datasource(d) for d in _items(obj, "datasources")],
        datamodel=_str(obj, "datamodel"),
        binary_paths=BinaryPaths(
            migration_engine=_str_map(paths, "migrationEngine"),
            query_engine=_str_map(paths, "queryEngine"),
            introspection_engine=_str_map(paths, "introspectionEngine"),
        ),
    )


# --- generation steps ---------------------------------------------------------


def add_defaults(root: Root) -> None:
    """Fill in the package name when the schema does not give one."""
    if not root.generator.config.package:
        root.generator.config.package = PrismaString(DEFAULT_PACKAGE_NAME)


def write_gitignore(root: Root) -> Path | None:
    """Write a .gitignore for generated engine files into the output directory.

    Returns the written path, or None when the config turns it off.
    """
    cfg = root.generator.config
    if cfg.disable_gitignore == "true" or cfg.disable_go_binaries == "true":
        return None
    if root.generator.output is None:
        raise ValueError("generator output is not set")
    _debug.debug("writing gitignore file")
    path = Path(root.generator.output.value) / ".gitignore"
    try:
        path.write_text(GITIGNORE_CONTENT, encoding="utf-8")
    except OSError as exc:
        raise OSError(f"could not write .gitignore: {exc}") from exc
    return path


def binary_targets(root: Root) -> list[str]:
    """The platforms query engines are needed for; empty when none are fetched."""
    if root.generator.config.disable_go_binaries == "true":
        return []
    if root.engine_type() == "dataproxy":
        _debug.debug("using data proxy; not fetching any engines")
        return []
    targets = [target.value for target in root.generator.binary_targets]
    targets.append("native")
    targets.append("linux")
    return targets


def transform(root: Root, environ: Mapping[str, str] | None = None) -> AST:
    """Build the template AST from the DMMF and store it on the root."""
    root.ast = build_ast(root.dmmf)
    env = os.environ if environ is None else environ
    if env.get("DEBUG", ""):
        print(f"AST: {json.dumps(root.ast.to_dict(), indent=2)}")
    return root.ast