"""Data model meta format (DMMF) document describing a Prisma schema."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum as _StrEnum
from typing import Any, TypeVar

from prismaclient.generator.names import PrismaString, PrismaType

_T = TypeVar("_T")


class FieldKind(str, _StrEnum):
    """Whether a field is a scalar, an object (relation) or an enum."""

    SCALAR = "scalar"
    OBJECT = "object"
    ENUM = "enum"

    def include_in_struct(self) -> bool:
        """Whether the field belongs in a model's data struct."""
        return self in (FieldKind.SCALAR, FieldKind.ENUM)

    def is_relation(self) -> bool:
        return self is FieldKind.OBJECT


class DatamodelFieldKind(str, _StrEnum):
    """Field kinds as named in the datamodel section."""

    SCALAR = "scalar"
    RELATION = "relation"
    ENUM = "enum"

    def include_in_struct(self) -> bool:
        """Whether the field belongs in a model's data struct."""
        return self in (DatamodelFieldKind.SCALAR, DatamodelFieldKind.ENUM)

    def is_relation(self) -> bool:
        return self is DatamodelFieldKind.RELATION


@dataclass(frozen=True)
class Operator:
    """A query operator such as NOT or OR."""

    name: str
    action: str


@dataclass(frozen=True)
class Action:
    """A CRUD operation and whether it is a query or a mutation."""

    type: str
    name: PrismaString


@dataclass(frozen=True)
class ActionType:
    """A query variation such as Unique, First or Many."""

    name: PrismaString
    inner_name: PrismaString
    list: bool = False
    return_list: bool = False


@dataclass(frozen=True)
class Method:
    """A write method on a numeric type."""

    name: str
    action: str


@dataclass(frozen=True)
class TypeSpec:
    """A scalar type together with its write methods."""

    name: str
    methods: tuple[Method, ...]


@dataclass(frozen=True)
class RelationMethod:
    """A filter method offered on a relation field."""

    name: str
    action: str


@dataclass
class SchemaEnum:
    """An enumerated type of the internal schema."""

    name: PrismaString = PrismaString("")
    values: list[PrismaString] = field(default_factory=list)
    db_name: PrismaString = PrismaString("")


@dataclass
class EnumValue:
    """One value of a datamodel enum."""

    name: PrismaString = PrismaString("")
    db_name: PrismaString = PrismaString("")


@dataclass
class Enum:
    """An enumerated type of the datamodel."""

    name: PrismaString = PrismaString("")
    values: list[EnumValue] = field(default_factory=list)
    db_name: PrismaString = PrismaString("")


@dataclass
class UniqueIndex:
    """A compound unique index of a model."""

    internal_name: str = ""
    fields: list[PrismaString] = field(default_factory=list)


@dataclass
class PrimaryKey:
    """A compound primary key of a model."""

    name: PrismaString = PrismaString("")
    fields: list[PrismaString] = field(default_factory=list)


@dataclass
class Field:
    """A single field of a model."""

    kind: FieldKind | str = ""
    name: PrismaString = PrismaString("")
    is_required: bool = False
    is_list: bool = False
    is_unique: bool = False
    is_read_only: bool = False
    is_id: bool = False
    type: PrismaType = PrismaType("")
    db_name: PrismaString = PrismaString("")
    is_generated: bool = False
    is_updated_at: bool = False
    relation_to_fields: list[Any] = field(default_factory=list)
    relation_on_delete: PrismaString = PrismaString("")
    relation_name: PrismaString = PrismaString("")
    has_default_value: bool = False

    def required_on_create(self) -> bool:
        """Whether a value must be given when creating a record."""
        return not (
            not self.is_required
            or self.is_updated_at
            or self.has_default_value
            or self.is_read_only
            or self.is_list
        )

    def relation_methods(self) -> list[RelationMethod]:
        """The filter methods available for this relation field."""
        if self.is_list:
            return [RelationMethod("Some", "some"), RelationMethod("Every", "every")]
        return [RelationMethod("Where", "is")]


@dataclass
class Model:
    """A model, usually mapped to a table or collection."""

    name: PrismaString = PrismaString("")
    is_embedded: bool = False
    db_name: PrismaString = PrismaString("")
    fields: list[Field] = field(default_factory=list)
    unique_indexes: list[UniqueIndex] = field(default_factory=list)
    primary_key: PrimaryKey = field(default_factory=PrimaryKey)

    def actions(self) -> list[str]:
        return ["Set", "Equals"]

    def relation_fields_plus_one(self) -> list[Field]:
        """All relation fields followed by one empty field."""
        relations = [f for f in self.fields if f.kind == FieldKind.OBJECT]
        relations.append(Field())
        return relations


@dataclass
class Datamodel:
    """All models and enums of the datamodel."""

    models: list[Model] = field(default_factory=list)
    enums: list[Enum] = field(default_factory=list)


@dataclass
class SchemaInputType:
    """One accepted input type of an argument."""

    is_required: bool = False
    is_list: bool = False
    type: PrismaType = PrismaType("")
    kind: FieldKind | str = ""
    namespace: PrismaString = PrismaString("")
    location: str = ""


@dataclass
class OuterInputType:
    """An argument of a field along with its accepted input types."""

    name: PrismaString = PrismaString("")
    input_types: list[SchemaInputType] = field(default_factory=list)
    is_relation_filter: bool = False


@dataclass
class CoreType:
    """An input object type of the query schema."""

    name: PrismaString = PrismaString("")
    is_where_type: bool = False
    is_order_type: bool = False
    at_least_one: bool = False
    at_most_one: bool = False
    fields: list[OuterInputType] = field(default_factory=list)


@dataclass
class SchemaOutputType:
    """The output type of a schema field."""

    type: PrismaString = PrismaString("")
    is_list: bool = False
    is_required: bool = False
    kind: FieldKind | str = ""


@dataclass
class SchemaField:
    """A field of an output type."""

    name: PrismaString = PrismaString("")
    output_type: SchemaOutputType = field(default_factory=SchemaOutputType)
    args: list[OuterInputType] = field(default_factory=list)


@dataclass
class OutputType:
    """A return type of the query schema."""

    name: PrismaString = PrismaString("")
    fields: list[SchemaField] = field(default_factory=list)
    is_embedded: bool = False


@dataclass
class EnumTypes:
    """Enums internal to Prisma and enums defined by models."""

    prisma: list[SchemaEnum] = field(default_factory=list)
    model: list[SchemaEnum] = field(default_factory=list)


@dataclass
class InputObjectType:
    prisma: list[CoreType] = field(default_factory=list)


@dataclass
class OutputObject:
    prisma: list[OutputType] = field(default_factory=list)


@dataclass
class Schema:
    """The query schema."""

    root_query_type: PrismaString = PrismaString("")
    root_mutation_type: PrismaString = PrismaString("")
    input_object_types: InputObjectType = field(default_factory=InputObjectType)
    output_object_types: OutputObject = field(default_factory=OutputObject)
    enum_types: EnumTypes = field(default_factory=EnumTypes)


@dataclass
class ModelOperation:
    """The names of the operations generated for one model."""

    model: PrismaString = PrismaString("")
    aggregate: PrismaString = PrismaString("")
    create_one: PrismaString = PrismaString("")
    delete_many: PrismaString = PrismaString("")
    delete_one: PrismaString = PrismaString("")
    find_first: PrismaString = PrismaString("")
    find_many: PrismaString = PrismaString("")
    find_unique: PrismaString = PrismaString("")
    group_by: PrismaString = PrismaString("")
    update_many: PrismaString = PrismaString("")
    update_one: PrismaString = PrismaString("")
    upsert_one: PrismaString = PrismaString("")

    def namespace(self) -> str:
        return self.model.go_case() + "Namespace"


@dataclass
class Mappings:
    """Operation names per model, plus other read and write operations."""

    model_operations: list[ModelOperation] = field(default_factory=list)
    other_read: list[str] = field(default_factory=list)
    other_write: list[str] = field(default_factory=list)


_NUMBER_METHODS = (
    Method("Increment", "increment"),
    Method("Decrement", "decrement"),
    Method("Multiply", "multiply"),
    Method("Divide", "divide"),
)


@dataclass
class Document:
    """The root of the DMMF."""

    datamodel: Datamodel = field(default_factory=Datamodel)
    schema: Schema = field(default_factory=Schema)
    mappings: Mappings = field(default_factory=Mappings)

    def operators(self) -> list[Operator]:
        """All query operators such as NOT and OR."""
        return [Operator("Not", "NOT"), Operator("Or", "OR"), Operator("And", "AND")]

    def types(self) -> list[str]:
        return ["Unique", "Many"]

    def variations(self) -> list[ActionType]:
        """The query variations Unique, First and Many."""
        return [
            ActionType(PrismaString("Unique"), PrismaString("One")),
            ActionType(PrismaString("First"), PrismaString("One"), list=True),
            ActionType(PrismaString("Many"), PrismaString("Many"), list=True, return_list=True),
        ]

    def actions(self) -> list[Action]:
        """All CRUD operations."""
        return [
            Action("query", PrismaString("Find")),
            Action("mutation", PrismaString("Create")),
            Action("mutation", PrismaString("Update")),
            Action("mutation", PrismaString("Delete")),
        ]

    def write_types(self) -> list[TypeSpec]:
        """Numeric types and their atomic write methods."""
        return [TypeSpec("Int", _NUMBER_METHODS), TypeSpec("Float", _NUMBER_METHODS)]


# --- decoding ---------------------------------------------------------------


def _obj(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{where}: expected a JSON object, got {value!r}")
    return value


def _str(obj: dict[str, Any], key: str, cls: Callable[[str], _T] = PrismaString) -> _T:
    value = obj.get(key)
    if value is None:
        return cls("")
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string, got {value!r}")
    return cls(value)


def _bool(obj: dict[str, Any], key: str) -> bool:
    value = obj.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key}: expected a boolean, got {value!r}")
    return value


def _list(obj: dict[str, Any], key: str, parse: Callable[[Any], _T]) -> list[_T]:
    value = obj.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key}: expected a list, got {value!r}")
    return [parse(item) for item in value]


def _name(value: Any) -> PrismaString:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return PrismaString(value)


def _kind(obj: dict[str, Any], key: str) -> FieldKind | str:
    text = _str(obj, key, str)
    try:
        return FieldKind(text)
    except ValueError:
        return text


def _enum_value(value: Any) -> EnumValue:
    obj = _obj(value, "enum value")
    return EnumValue(name=_str(obj, "name"), db_name=_str(obj, "dBName"))


def _enum(value: Any) -> Enum:
    obj = _obj(value, "enum")
    return Enum(
        name=_str(obj, "name"),
        values=_list(obj, "values", _enum_value),
        db_name=_str(obj, "dBName"),
    )


def _schema_enum(value: Any) -> SchemaEnum:
    obj = _obj(value, "schema enum")
    return SchemaEnum(
        name=_str(obj, "name"),
        values=_list(obj, "values", _name),
        db_name=_str(obj, "dBName"),
    )


def _field(value: Any) -> Field:
    obj = _obj(value, "field")
    relation_to_fields = obj.get("relationToFields")
    if relation_to_fields is None:
        relation_to_fields = []
    elif not isinstance(relation_to_fields, list):
        raise ValueError(f"relationToFields: expected a list, got {relation_to_fields!r}")
    return Field(
        kind=_kind(obj, "kind"),
        name=_str(obj, "name"),
        is_required=_bool(obj, "isRequired"),
        is_list=_bool(obj, "isList"),
        is_unique=_bool(obj, "isUnique"),
        is_read_only=_bool(obj, "isReadOnly"),
        is_id=_bool(obj, "isId"),
        type=_str(obj, "type", PrismaType),
        db_name=_str(obj, "dBName"),
        is_generated=_bool(obj, "isGenerated"),
        is_updated_at=_bool(obj, "isUpdatedAt"),
        relation_to_fields=list(relation_to_fields),
        relation_on_delete=_str(obj, "relationOnDelete"),
        relation_name=_str(obj, "relationName"),
        has_default_value=_bool(obj, "hasDefaultValue"),
    )


def _unique_index(value: Any) -> UniqueIndex:
    obj = _obj(value, "unique index")
    return UniqueIndex(internal_name=_str(obj, "name", str), fields=_list(obj, "fields", _name))


def _model(value: Any) -> Model:
    obj = _obj(value, "model")
    pk = _obj(obj.get("primaryKey"), "primaryKey")
    return Model(
        name=_str(obj, "name"),
        is_embedded=_bool(obj, "isEmbedded"),
        db_name=_str(obj, "dbName"),
        fields=_list(obj, "fields", _field),
        unique_indexes=_list(obj, "uniqueIndexes", _unique_index),
        primary_key=PrimaryKey(name=_str(pk, "name"), fields=_list(pk, "fields", _name)),
    )


def _schema_input_type(value: Any) -> SchemaInputType:
    obj = _obj(value, "input type")
    return SchemaInputType(
        is_required=_bool(obj, "isRequired"),
        is_list=_bool(obj, "isList"),
        type=_str(obj, "type", PrismaType),
        kind=_kind(obj, "kind"),
        namespace=_str(obj, "namespace"),
        location=_str(obj, "location", str),
    )


def _outer_input_type(value: Any) -> OuterInputType:
    obj = _obj(value, "argument")
    return OuterInputType(
        name=_str(obj, "name"),
        input_types=_list(obj, "inputTypes", _schema_input_type),
        is_relation_filter=_bool(obj, "isRelationFilter"),
    )


def _core_type(value: Any) -> CoreType:
    obj = _obj(value, "input object type")
    return CoreType(
        name=_str(obj, "name"),
        is_where_type=_bool(obj, "isWhereType"),
        is_order_type=_bool(obj, "isOrderType"),
        at_least_one=_bool(obj, "atLeastOne"),
        at_most_one=_bool(obj, "atMostOne"),
        fields=_list(obj, "fields", _outer_input_type),
    )


def _schema_field(value: Any) -> SchemaField:
    obj = _obj(value, "output field")
    out = _obj(obj.get("outputType"), "outputType")
    return SchemaField(
        name=_str(obj, "name"),
        output_type=SchemaOutputType(
            type=_str(out, "type"),
            is_list=_bool(out, "isList"),
            is_required=_bool(out, "isRequired"),
            kind=_kind(out, "kind"),
        ),
        args=_list(obj, "args", _outer_input_type),
    )


def _output_type(value: Any) -> OutputType:
    obj = _obj(value, "output type")
    return OutputType(
        name=_str(obj, "name"),
        fields=_list(obj, "fields", _schema_field),
        is_embedded=_bool(obj, "isEmbedded"),
    )


def _schema(value: Any) -> Schema:
    obj = _obj(value, "schema")
    inputs = _obj(obj.get("inputObjectTypes"), "inputObjectTypes")
    outputs = _obj(obj.get("outputObjectTypes"), "outputObjectTypes")
    enums = _obj(obj.get("enumTypes"), "enumTypes")
    return Schema(
        root_query_type=_str(obj, "rootQueryType"),
        root_mutation_type=_str(obj, "rootMutationType"),
        input_object_types=InputObjectType(prisma=_list(inputs, "prisma", _core_type)),
        output_object_types=OutputObject(prisma=_list(outputs, "prisma", _output_type)),
        enum_types=EnumTypes(
            prisma=_list(enums, "prisma", _schema_enum),
            model=_list(enums, "model", _schema_enum),
        ),
    )


def _model_operation(value: Any) -> ModelOperation:
    obj = _obj(value, "model operation")
    return ModelOperation(
        model=_str(obj, "model"),
        aggregate=_str(obj, "aggregate"),
        create_one=_str(obj, "createOne"),
        delete_many=_str(obj, "deleteMany"),
        delete_one=_str(obj, "deleteOne"),
        find_first=_str(obj, "findFirst"),
        find_many=_str(obj, "findMany"),
        find_unique=_str(obj, "findUnique"),
        group_by=_str(obj, "groupBy"),
        update_many=_str(obj, "updateMany"),
        update_one=_str(obj, "updateOne"),
        upsert_one=_str(obj, "upsertOne"),
    )


def _plain(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def _mappings(value: Any) -> Mappings:
    obj = _obj(value, "mappings")
    other = _obj(obj.get("otherOperations"), "otherOperations")
    return Mappings(
        model_operations=_list(obj, "modelOperations", _model_operation),
        other_read=_list(other, "read", _plain),
        other_write=_list(other, "write", _plain),
    )


def parse_document(data: str | bytes | dict[str, Any]) -> Document:
    """Decode a DMMF document from JSON text or an already decoded object."""
    obj = json.loads(data) if isinstance(data, (str, bytes, bytearray)) else data
    obj = _obj(obj, "document")
    datamodel = _obj(obj.get("datamodel"), "datamodel")
    return Document(
        datamodel=Datamodel(
            models=_list(datamodel, "models", _model),
            enums=_list(datamodel, "enums", _enum),
        ),
        schema=_schema(obj.get("schema")),
        mappings=_mappings(obj.get("mappings")),
    )