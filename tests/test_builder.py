import base64
import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from prismaclient.runtime.builder import (
    Field,
    Input,
    Output,
    Query,
    encode_value,
    new_query,
    transform_equals,
)
from prismaclient.runtime.values import PrismaError


class FakeEngine:
    def __init__(self, response=None):
        self.payloads = []
        self.response = response

    def connect(self):
        pass

    def disconnect(self):
        pass

    def do(self, payload):
        self.payloads.append(payload)
        return self.response

    def batch(self, payload):
        self.payloads.append(payload)
        return self.response


def _query(fields, outputs=None):
    return Query(
        operation="query",
        name="test",
        method="findMany",
        model="User",
        inputs=[Input(name="where", fields=fields)],
        outputs=outputs if outputs is not None else [Output(name="id")],
    )


def test_build_simple_query():
    query = _query([Field(name="id", value="123")])
    assert query.build() == 'query test{result: findManyUser(where:{id:"123",},) {id }}'


def test_build_wraps_inner():
    query = _query([Field(name="id", value="123")])
    built = query.build()
    assert built.startswith("query test{result: ")
    assert built.endswith("}")
    assert query.build_inner() in built


def test_build_inner_without_inputs_or_outputs():
    query = Query(method="findMany", model="Post")
    assert query.build_inner() == "findManyPost "


def test_input_value_is_encoded():
    query = Query(method="executeRaw", inputs=[Input(name="query", value="SELECT 1")])
    assert query.build_inner().startswith("executeRaw(query:" + encode_value("SELECT 1"))


def test_duplicate_subselections_are_merged():
    separate = _query([
        Field(name="a", fields=[Field(name="x", value=1)]),
        Field(name="a", fields=[Field(name="y", value=2)]),
    ])
    merged = _query([Field(name="a", fields=[Field(name="x", value=1), Field(name="y", value=2)])])
    assert separate.build() == merged.build()


def test_merge_does_not_mutate_input():
    inner = [Field(name="x", value=1)]
    fields = [Field(name="a", fields=inner), Field(name="a", fields=[Field(name="y", value=2)])]
    _query(fields).build()
    assert fields[0].fields == [Field(name="x", value=1)]


def test_duplicate_value_fields_are_kept():
    query = _query([Field(name="b", value="one"), Field(name="b", value="two")])
    built = query.build()
    assert built.count("b:") == 2
    assert '"one"' in built and '"two"' in built


def test_wrap_list_input():
    query = _query([])
    query.inputs = [Input(name="data", wrap_list=True, fields=[Field(name="id", value="a")])]
    inner = query.build_inner()
    assert "(data:[{id:" + encode_value("a") + "},],)" in inner


def test_list_field_wraps_in_brackets():
    query = _query([Field(name="ids", list=True, value="a")])
    assert "ids:[" + encode_value("a") + "]" in query.build()


def test_nested_outputs():
    outputs = [Output(name="posts", inputs=[Input(name="take", value=2)], outputs=[Output(name="id")])]
    query = _query([Field(name="id", value="1")], outputs=outputs)
    assert query.build_inner().endswith("{posts (take:2,){id }}")


def test_exec_sends_payload():
    engine = FakeEngine(response={"data": {"result": 1}})
    query = _query([Field(name="id", value="1")])
    query.engine = engine
    assert query.exec() == {"data": {"result": 1}}
    assert engine.payloads == [{"query": query.build(), "variables": {}}]


def test_do_without_engine_raises():
    with pytest.raises(PrismaError, match="Connect"):
        new_query().do({"query": ""})


def test_new_query_has_start_time():
    first = new_query()
    second = new_query()
    assert second.start >= first.start
    assert first.engine is None


def test_transform_equals():
    fields = [
        Field(name="email", fields=[Field(name="equals", value="a")]),
        Field(name="name", fields=[Field(name="contains", value="b")]),
        Field(name="age", value=3),
    ]
    result = transform_equals(fields)
    assert result[0].value == "a"
    assert result[0].fields is None
    assert result[1] == fields[1]
    assert result[2] == fields[2]


def test_encode_value_escapes_html():
    assert encode_value("<a&b>") == '"\\u003ca\\u0026b\\u003e"'


def test_encode_value_integral_float():
    assert encode_value(10.0) == "10"
    assert json.loads(encode_value(2.5)) == 2.5


def test_encode_value_sorts_keys():
    assert encode_value({"b": 1, "a": [True, None]}) == '{"a":[true,null],"b":1}'


def test_encode_value_bytes_round_trip():
    assert base64.b64decode(json.loads(encode_value(b"hi"))) == b"hi"


def test_encode_value_datetime_round_trip():
    moment = datetime(2021, 9, 22, 9, 32, 31, 706000, tzinfo=timezone.utc)
    text = json.loads(encode_value(moment))
    assert text.endswith("Z")
    assert datetime.fromisoformat(text.replace("Z", "+00:00")) == moment


def test_encode_value_decimal():
    assert json.loads(encode_value(Decimal("1.50"))) == "1.50"


def test_encode_value_rejects_unknown():
    with pytest.raises(TypeError):
        encode_value(object())
    with pytest.raises(ValueError):
        encode_value(float("nan"))