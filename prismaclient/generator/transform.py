"""Turns the flat DMMF document into a structure convenient for code templates."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from prismaclient.generator import dmmf
from prismaclient.generator.names import PrismaString, PrismaType

_LIST = "List"


@dataclass
class Enum:
    """A model enum with its values."""

    name: PrismaString = PrismaString("")
    values: list[PrismaString] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"name": str(self.name), "values": [str(v) for v in self.values]}


@dataclass(frozen=True)
class Method:
    """A filter or write method such as Equals or Contains."""

    name: str
    action: str
    is_list: bool = False
    deprecated: str = ""
    type: PrismaType = PrismaType("")

    def to_dict(self) -> dict[str, Any]:
        return {
            "Name": self.name,
            "Action": self.action,
            "IsList": self.is_list,
            "Deprecated": self.deprecated,
            "Type": str(self.type),
        }


@dataclass
class Filter:
    """A scalar type or field together with its methods."""

    name: str
    methods: list[Method] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"Name": self.name, "Methods": [m.to_dict() for m in self.methods]}


@dataclass
class Index:
    """A unique index or compound primary key of a model."""

    name: PrismaString
    internal_name: str
    fields: list[PrismaString] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": str(self.name),
            "internalName": self.internal_name,
            "fields": [str(f) for f in self.fields],
        }


@dataclass
class Field(dmmf.Field):
    """A model field; prisma marks pseudo fields such as Relevance_."""

    prisma: bool = False

    @classmethod
    def from_dmmf(cls, source: dmmf.Field, prisma: bool = False) -> Field:
        values = {f.name: getattr(source, f.name) for f in fields(dmmf.Field)}
        return cls(prisma=prisma, **values)

    def to_dict(self) -> dict[str, Any]:
        kind = self.kind.value if isinstance(self.kind, dmmf.FieldKind) else str(self.kind)
        return {
            "prisma": self.prisma,
            "kind": kind,
            "name": str(self.name),
            "isRequired": self.is_required,
            "isList": self.is_list,
            "isUnique": self.is_unique,
            "isReadOnly": self.is_read_only,
            "isId": self.is_id,
            "type": str(self.type),
            "dBName": str(self.db_name),
            "isGenerated": self.is_generated,
            "isUpdatedAt": self.is_updated_at,
            "relationToFields": list(self.relation_to_fields),
            "relationOnDelete": str(self.relation_on_delete),
            "relationName": str(self.relation_name),
            "hasDefaultValue": self.has_default_value,
        }


@dataclass
class Model:
    """A model with its fields and indexes."""

    name: PrismaString
    fields: list[Field] = field(default_factory=list)
    indexes: list[Index] = field(default_factory=list)
    old_model: dmmf.Model = field(default_factory=dmmf.Model, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": str(self.name),
            "fields": [f.to_dict() for f in self.fields],
            "indexes": [i.to_dict() for i in self.indexes],
        }


@dataclass
class OrderBy:
    """An ordering option of find-many operations."""

    def to_dict(self) -> dict[str, Any]:
        return {}


@dataclass
class AST:
    """Scalars, enums, models and filters derived from a DMMF document."""

    document: dmmf.Document = field(default_factory=dmmf.Document, repr=False)
    scalars: list[str] = field(default_factory=list)
    enums: list[Enum] = field(default_factory=list)
    models: list[Model] = field(default_factory=list)
    read_filters: list[Filter] = field(default_factory=list)
    write_filters: list[Filter] = field(default_factory=list)
    order_bys: list[OrderBy] = field(default_factory=list)

    def read_filter(self, scalar: str, is_list: bool) -> Filter | None:
        """The read filter for a scalar, or None if there is none."""
        scalar = scalar.replace("NullableFilter", "", 1).replace("ReadFilter", "", 1)
        if is_list:
            scalar += _LIST
        return next((f for f in self.read_filters if f.name == scalar), None)

    def write_filter(self, scalar: str, is_list: bool) -> Filter | None:
        """The write filter for a scalar, or None if there is none."""
        if is_list:
            scalar += _LIST
        return next((f for f in self.write_filters if f.name == scalar), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scalars": list(self.scalars),
            "enums": [e.to_dict() for e in self.enums],
            "models": [m.to_dict() for m in self.models],
            "readFilters": [f.to_dict() for f in self.read_filters],
            "writeFilters": [f.to_dict() for f in self.write_filters],
            "orderBys": [o.to_dict() for o in self.order_bys],
        }


def _pick(document: dmmf.Document, *names: str) -> dmmf.CoreType | None:
    for name in names:
        for core in document.schema.input_object_types.prisma:
            if core.name == name:
                return core
    return None


def _scalars(document: dmmf.Document) -> list[str]:
    scalars: list[str] = []
    for item in document.schema.input_object_types.prisma:
        for arg in item.fields:
            for input_type in arg.input_types:
                if input_type.location != "scalar":
                    continue
                name = str(input_type.type)
                if name not in scalars:
                    scalars.append(name)
    return scalars


def _enums(document: dmmf.Document) -> list[Enum]:
    return [
        Enum(name=e.name, values=list(e.values))
        for e in document.schema.enum_types.model
    ]


def _concat_fields_to_name(names: list[PrismaString]) -> str:
    return "_".join(str(n) for n in names)


def _index_name(name: str, names: list[PrismaString]) -> PrismaString:
    if name:
        return PrismaString(name)
    return PrismaString("".join(n.go_case() for n in names))


def _indexes(model: dmmf.Model) -> list[Index]:
    result = [
        Index(
            name=_index_name(unique.internal_name, unique.fields),
            internal_name=unique.internal_name or _concat_fields_to_name(unique.fields),
            fields=list(unique.fields),
        )
        for unique in model.unique_indexes
    ]
    pk_fields = model.primary_key.fields
    if pk_fields:
        joined = _concat_fields_to_name(pk_fields)
        result.append(
            Index(name=_index_name(joined, pk_fields), internal_name=joined, fields=list(pk_fields))
        )
    return result


def _models(document: dmmf.Document) -> list[Model]:
    return [
        Model(
            name=model.name,
            fields=[Field.from_dmmf(f) for f in model.fields],
            indexes=_indexes(model),
            old_model=model,
        )
        for model in document.datamodel.models
    ]


def _method_from(arg: dmmf.OuterInputType, locations: tuple[str, ...]) -> Method:
    type_name = PrismaType("")
    is_list = False
    for input_type in arg.input_types:
        if input_type.location in locations and input_type.type != "Null":
            type_name = input_type.type
            if input_type.is_list:
                is_list = True
    return Method(name=arg.name.go_case(), action=str(arg.name), type=type_name, is_list=is_list)


def _convert_field(arg: dmmf.OuterInputType) -> Method | None:
    # equals is handled separately by the templates
    if arg.name == "equals":
        return None
    return _method_from(arg, ("scalar", "enumTypes"))


def _read_methods(core: dmmf.CoreType) -> list[Method]:
    return [m for m in map(_convert_field, core.fields) if m is not None]


def _read_filters(document: dmmf.Document, ast: AST) -> list[Filter]:
    filters: list[Filter] = []
    for scalar in ast.scalars:
        combinations = (
            (scalar + "ListFilter", scalar + "NullableListFilter"),
            (scalar + "Filter", scalar + "NullableFilter"),
        )
        for names in combinations:
            core = _pick(document, *names)
            if core is None:
                continue
            name = scalar + _LIST if "ListFilter" in core.name else scalar
            filters.append(Filter(name=name, methods=_read_methods(core)))

    for enum in ast.enums:
        core = _pick(document, f"Enum{enum.name}Filter", f"Enum{enum.name}NullableFilter")
        if core is None:
            continue
        filters.append(Filter(name=str(enum.name), methods=_read_methods(core)))

    for model in ast.models:
        core = _pick(document, f"{model.name}OrderByRelevanceInput")
        if core is None:
            continue
        filters.append(Filter(name=str(core.name), methods=_read_methods(core)))
        # pseudo field so that the client offers Model.Relevance_
        model.fields.append(
            Field(
                prisma=True,
                name=PrismaString("relevance"),
                kind=dmmf.FieldKind.SCALAR,
                type=PrismaType(core.name.go_case()),
            )
        )
    return filters


def _write_filters(document: dmmf.Document, ast: AST) -> list[Filter]:
    filters: list[Filter] = []
    for scalar in ast.scalars:
        core = _pick(
            document,
            f"{scalar}FieldUpdateOperationsInput",
            f"Nullable{scalar}FieldUpdateOperationsInput",
        )
        if core is None:
            continue
        methods = [_method_from(arg, ("scalar",)) for arg in core.fields if arg.name != "set"]
        filters.append(Filter(name=scalar, methods=methods))

    # list write operations only exist per model and field
    for model in ast.models:
        for model_field in model.fields:
            core = _pick(document, f"{model.name}Update{model_field.name}Input")
            if core is None:
                continue
            scalar_name = ""
            methods: list[Method] = []
            for arg in core.fields:
                if arg.name == "set":
                    for input_type in arg.input_types:
                        if input_type.location == "scalar" and input_type.type != "Null":
                            scalar_name = str(input_type.type) + _LIST
                    continue
                methods.append(_method_from(arg, ("scalar",)))
            filters.append(Filter(name=scalar_name, methods=methods))
    return filters


def _deprecated_read_filters() -> list[Filter]:
    number = [
        Method(name="LT", action="lt", deprecated="Lt"),
        Method(name="LTE", action="lte", deprecated="Lte"),
        Method(name="GT", action="gt", deprecated="Gt"),
        Method(name="GTE", action="gte", deprecated="Gte"),
    ]
    return [
        Filter(name="Int", methods=list(number)),
        Filter(name="Float", methods=list(number)),
        Filter(
            name="String",
            methods=[
                Method(name="HasPrefix", action="starts_with", deprecated="StartsWith"),
                Method(name="HasSuffix", action="ends_with", deprecated="EndsWith"),
            ],
        ),
        Filter(
            name="DateTime",
            methods=[
                Method(name="Before", action="lt", deprecated="Lt"),
                Method(name="After", action="gt", deprecated="Gt"),
                Method(name="BeforeEquals", action="lte", deprecated="Lte"),
                Method(name="AfterEquals", action="gte", deprecated="Gte"),
            ],
        ),
    ]


def build_ast(document: dmmf.Document) -> AST:
    """Build the template AST from a DMMF document."""
    ast = AST(document=document)
    ast.scalars = _scalars(document)
    ast.enums = _enums(document)
    ast.models = _models(document)
    ast.read_filters = _read_filters(document, ast)
    ast.write_filters = _write_filters(document, ast)

    # old filter names kept for compatibility
    for deprecated in _deprecated_read_filters():
        for existing in ast.read_filters:
            if existing.name == deprecated.name:
                existing.methods.extend(deprecated.methods)
    return ast