import json
from datetime import datetime, timezone

import pytest

from prismaclient.runtime.raw import Raw
from prismaclient.runtime.transaction import TX, TransactionError
from prismaclient.runtime.values import BatchResult, PrismaError


class FakeEngine:
    def __init__(self, response=None, batch_response=None, error=None):
        self.response = response
        self.batch_response = batch_response
        self.error = error
        self.payloads = []

    def connect(self):
        pass

    def disconnect(self):
        pass

    def do(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.response

    def batch(self, payload):
        self.payloads.append(payload)
        return self.batch_response


def inputs(query):
    return {i.name: i.value for i in query.inputs}


def test_query_raw_builds_mutation():
    q = Raw(FakeEngine()).query_raw("SELECT 1", "a", 1).extract_query()
    assert q.operation == "mutation"
    assert q.method == "queryRaw"
    assert inputs(q) == {"query": "SELECT 1", "parameters": '["a",1]'}
    assert q.build() == 'mutation {result: queryRaw(query:"SELECT 1",parameters:"[\\"a\\",1]",) }'


def test_execute_raw_method_and_empty_params():
    q = Raw(FakeEngine()).execute_raw("DELETE FROM t").extract_query()
    assert q.method == "executeRaw"
    assert json.loads(inputs(q)["parameters"]) == []


def test_datetime_parameter_is_tagged():
    when = datetime(2021, 9, 22, 9, 32, 31, 706000, tzinfo=timezone.utc)
    q = Raw(FakeEngine()).query_raw("SELECT $1", when, "x").extract_query()
    assert json.loads(inputs(q)["parameters"]) == [
        {"prisma__type": "date", "prisma__value": "2021-09-22T09:32:31.706Z"},
        "x",
    ]


def test_query_exec_returns_engine_result():
    rows = [{"id": "123", "email": "john@example.com"}]
    engine = FakeEngine(response=rows)
    q = Raw(engine).query_raw('SELECT * FROM "User"')
    assert q.exec() == rows
    assert engine.payloads == [{"query": q.extract_query().build(), "variables": {}}]


def test_execute_exec_returns_count():
    engine = FakeEngine(response=1)
    result = Raw(engine).execute_raw("UPDATE x SET a = $1", "new-email").exec()
    assert result == BatchResult(count=1)


def test_exec_errors_are_wrapped():
    engine = FakeEngine(error=RuntimeError("down"))
    with pytest.raises(PrismaError, match="could not send raw query: down"):
        Raw(engine).query_raw("SELECT 1").exec()
    with pytest.raises(PrismaError, match="could not send raw query"):
        Raw().execute_raw("SELECT 1").exec()


def test_tx_copies_query_with_result_queue():
    exec_ = Raw(FakeEngine()).query_raw("SELECT 1")
    tx = exec_.tx()
    assert exec_.extract_query().tx_result is None
    assert tx.extract_query().tx_result is not None
    assert tx.extract_query().build() == exec_.extract_query().build()


def test_execute_raw_in_transaction():
    engine = FakeEngine(batch_response={"batchResult": [{"data": {"result": 1}}]})
    raw = Raw(engine)
    tx = raw.execute_raw('UPDATE "User" SET email = $1 WHERE id = $2', "new-email", "123").tx()
    TX(engine).transaction(tx).exec()
    assert tx.result() == BatchResult(count=1)
    assert tx.result() == BatchResult(count=1)


def test_query_raw_in_transaction():
    rows = [{"id": "123", "email": "john@example.com"}]
    engine = FakeEngine(batch_response={"batchResult": [{"data": {"result": rows}}]})
    tx = Raw(engine).query_raw('SELECT * FROM "User"').tx()
    TX(engine).transaction(tx).exec()
    assert tx.result() == rows


def test_result_before_transaction_raises():
    tx = Raw(FakeEngine()).execute_raw("SELECT 1").tx()
    with pytest.raises(TransactionError, match="result not fetched"):
        tx.result()
    qtx = Raw(FakeEngine()).query_raw("SELECT 1").tx()
    with pytest.raises(TransactionError):
        qtx.result()