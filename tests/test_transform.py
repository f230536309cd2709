import json

import pytest

from prismaclient.generator import dmmf
from prismaclient.generator.transform import AST, Field, Method, build_ast


def _arg(name, *types):
    return {
        "name": name,
        "inputTypes": [
            {"type": t, "location": loc, "isList": is_list} for t, loc, is_list in types
        ],
    }


DOCUMENT = {
    "datamodel": {
        "models": [
            {
                "name": "User",
                "fields": [
                    {"name": "id", "kind": "scalar", "type": "String", "isId": True},
                    {"name": "tags", "kind": "scalar", "type": "String", "isList": True},
                    {"name": "role", "kind": "enum", "type": "Role"},
                ],
                "uniqueIndexes": [{"name": "", "fields": ["firstName", "lastName"]}],
            },
            {
                "name": "Post",
                "fields": [{"name": "a", "kind": "scalar", "type": "String"}],
                "uniqueIndexes": [{"name": "myCustomKey", "fields": ["userId", "eventId"]}],
                "primaryKey": {"name": None, "fields": ["a", "b"]},
            },
        ],
        "enums": [],
    },
    "schema": {
        "inputObjectTypes": {
            "prisma": [
                {
                    "name": "StringFilter",
                    "fields": [
                        _arg("equals", ("String", "scalar", False)),
                        _arg("contains", ("String", "scalar", False)),
                        _arg("in", ("String", "scalar", True)),
                    ],
                },
                {
                    "name": "StringNullableListFilter",
                    "fields": [
                        _arg("equals", ("String", "scalar", True)),
                        _arg("has", ("String", "scalar", False), ("Null", "scalar", False)),
                    ],
                },
                {
                    "name": "IntFilter",
                    "fields": [
                        _arg("equals", ("Int", "scalar", False)),
                        _arg("lt", ("Int", "scalar", False)),
                        _arg("gt", ("Int", "scalar", False)),
                    ],
                },
                {
                    "name": "EnumRoleFilter",
                    "fields": [
                        _arg("equals", ("Role", "enumTypes", False)),
                        _arg("in", ("Role", "enumTypes", True)),
                    ],
                },
                {
                    "name": "UserOrderByRelevanceInput",
                    "fields": [
                        _arg("sort", ("SortOrder", "enumTypes", False)),
                        _arg("search", ("String", "scalar", False)),
                    ],
                },
                {
                    "name": "IntFieldUpdateOperationsInput",
                    "fields": [
                        _arg("set", ("Int", "scalar", False)),
                        _arg("increment", ("Int", "scalar", False)),
                        _arg("decrement", ("Int", "scalar", False)),
                    ],
                },
                {
                    "name": "UserUpdatetagsInput",
                    "fields": [
                        _arg("set", ("String", "scalar", True)),
                        _arg("push", ("String", "scalar", False), ("String", "scalar", True)),
                    ],
                },
            ]
        },
        "enumTypes": {"model": [{"name": "Role", "values": ["ADMIN", "USER"]}]},
    },
}


@pytest.fixture
def ast():
    return build_ast(dmmf.parse_document(DOCUMENT))


def test_scalars_are_unique_and_ordered(ast):
    assert ast.scalars == ["String", "Null", "Int"]


def test_enums(ast):
    assert [(e.name, e.values) for e in ast.enums] == [("Role", ["ADMIN", "USER"])]


def test_read_filter_names_and_order(ast):
    assert [f.name for f in ast.read_filters] == [
        "StringList",
        "String",
        "Int",
        "Role",
        "UserOrderByRelevanceInput",
    ]


def test_string_filter_skips_equals_and_adds_deprecated(ast):
    methods = ast.read_filter("String", False).methods
    assert [m.action for m in methods] == [
        "contains", "in", "starts_with", "ends_with",
    ]
    assert methods[0].name == "Contains"
    assert methods[1] == Method(name="In", action="in", is_list=True, type="String")
    assert methods[2].name == "HasPrefix"
    assert methods[2].deprecated == "StartsWith"


def test_null_type_is_ignored_in_list_filter(ast):
    methods = ast.read_filter("String", True).methods
    assert len(methods) == 1
    assert methods[0].action == "has"
    assert methods[0].type == "String"
    assert methods[0].is_list is False


def test_int_filter_has_deprecated_number_methods(ast):
    methods = ast.read_filter("Int", False).methods
    assert [m.name for m in methods] == ["Lt", "Gt", "LT", "LTE", "GT", "GTE"]
    assert [m.deprecated for m in methods[2:]] == ["Lt", "Lte", "Gt", "Gte"]


def test_enum_filter_accepts_enum_types(ast):
    methods = ast.read_filter("Role", False).methods
    assert len(methods) == 1
    assert methods[0].type == "Role"
    assert methods[0].is_list is True


def test_read_filter_strips_suffixes(ast):
    assert ast.read_filter("StringNullableFilter", False) is ast.read_filter("String", False)
    assert ast.read_filter("IntReadFilter", False) is ast.read_filter("Int", False)
    assert ast.read_filter("Unknown", False) is None
    assert ast.read_filter("Int", True) is None


def test_relevance_adds_pseudo_field(ast):
    user = ast.models[0]
    pseudo = user.fields[-1]
    assert pseudo.prisma is True
    assert pseudo.name == "relevance"
    assert pseudo.kind == dmmf.FieldKind.SCALAR
    assert pseudo.type == "UserOrderByRelevanceInput"
    assert [f.prisma for f in user.fields[:-1]] == [False, False, False]
    assert all(not f.prisma for f in ast.models[1].fields)


def test_model_fields_keep_dmmf_data(ast):
    first = ast.models[0].fields[0]
    assert isinstance(first, Field)
    assert first.is_id is True
    assert first.type == "String"
    assert ast.models[0].old_model.name == "User"


def test_write_filters(ast):
    assert [f.name for f in ast.write_filters] == ["Int", "StringList"]
    assert [m.name for m in ast.write_filter("Int", False).methods] == ["Increment", "Decrement"]
    push = ast.write_filter("String", True).methods
    assert push == [Method(name="Push", action="push", is_list=True, type="String")]
    assert ast.write_filter("String", False) is None


def test_unique_index_without_name(ast):
    index = ast.models[0].indexes[0]
    assert index.internal_name == "firstName_lastName"
    assert index.name == "FirstNameLastName"
    assert index.fields == ["firstName", "lastName"]


def test_named_index_and_primary_key(ast):
    named, primary = ast.models[1].indexes
    assert named.name == "myCustomKey"
    assert named.internal_name == "myCustomKey"
    assert primary.name == "a_b"
    assert primary.internal_name == "a_b"
    assert primary.fields == ["a", "b"]


def test_to_dict_is_json_serialisable(ast):
    data = json.loads(json.dumps(ast.to_dict()))
    assert data["scalars"] == ["String", "Null", "Int"]
    assert data["readFilters"][0]["Name"] == "StringList"
    assert data["readFilters"][0]["Methods"][0]["Action"] == "has"
    user = data["models"][0]
    assert "OldModel" not in user and "old_model" not in user
    assert user["fields"][-1]["prisma"] is True
    assert user["fields"][1]["isList"] is True
    assert data["models"][1]["indexes"][1]["internalName"] == "a_b"
    assert data["orderBys"] == []


def test_empty_document():
    empty = build_ast(dmmf.Document())
    assert isinstance(empty, AST)
    assert empty.to_dict() == {
        "scalars": [],
        "enums": [],
        "models": [],
        "readFilters": [],
        "writeFilters": [],
        "orderBys": [],
    }
    assert empty.write_filter("Int", False) is None


def test_enum_without_filter_is_skipped():
    doc = dmmf.parse_document(
        {"schema": {"enumTypes": {"model": [{"name": "Kind", "values": ["A"]}]}}}
    )
    result = build_ast(doc)
    assert [e.name for e in result.enums] == ["Kind"]
    assert result.read_filters == []