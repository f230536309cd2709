"""Raw SQL queries and statements sent through the query engine."""

from __future__ import annotations

import dataclasses
import queue
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from prismaclient.runtime.builder import Engine, Input, Query, encode_value, new_query
from prismaclient.runtime.transaction import Result, TransactionError
from prismaclient.runtime.values import BatchResult, PrismaError


def _encode_params(params: tuple[Any, ...]) -> str:
    encoded = []
    for param in params:
        if isinstance(param, datetime):
            encoded.append(
                '{"prisma__type":"date","prisma__value":' + encode_value(param) + "}"
            )
        else:
            encoded.append(encode_value(param))
    return "[" + ",".join(encoded) + "]"


def _raw(engine: Engine | None, action: str, query: str, params: tuple[Any, ...]) -> Query:
    q = new_query()
    q.engine = engine
    q.operation = "mutation"
    q.method = action
    q.inputs.append(Input(name="query", value=query))
    q.inputs.append(Input(name="parameters", value=_encode_params(params)))
    return q


def _for_tx(query: Query) -> Query:
    return dataclasses.replace(query, tx_result=queue.Queue())


def _send(query: Query) -> Any:
    try:
        return query.exec()
    except Exception as exc:
        raise PrismaError(f"could not send raw query: {exc}") from exc


def _count(value: Any) -> BatchResult:
    if isinstance(value, bool) or not isinstance(value, int):
        raise PrismaError(f"unexpected raw execute result: {value!r}")
    return BatchResult(count=value)


@dataclass
class TxQueryResult:
    """A raw query taking part in a transaction."""

    query: Query
    _result: Result = field(default_factory=Result, repr=False)

    def extract_query(self) -> Query:
        return self.query

    def is_tx(self) -> None:
        """Mark this object as usable in a transaction."""

    def result(self) -> Any:
        """The rows returned once the transaction has run."""
        return self._result.get(self.query.tx_result)


@dataclass
class QueryExec:
    """A raw query returning rows."""

    query: Query

    def extract_query(self) -> Query:
        return self.query

    def tx(self) -> TxQueryResult:
        """Prepare this query for use in a transaction."""
        return TxQueryResult(query=_for_tx(self.query))

    def exec(self) -> Any:
        """Run the query and return its rows."""
        return _send(self.query)


@dataclass
class TxExecuteResult:
    """A raw statement taking part in a transaction."""

    query: Query
    _result: Result = field(default_factory=Result, repr=False)

    def extract_query(self) -> Query:
        return self.query

    def is_tx(self) -> None:
        """Mark this object as usable in a transaction."""

    def result(self) -> BatchResult:
        """The number of affected records once the transaction has run."""
        value = self._result.get(self.query.tx_result)
        try:
            return _count(value)
        except PrismaError as exc:
            raise TransactionError(str(exc)) from exc


@dataclass
class ExecuteExec:
    """A raw statement returning the number of affected records."""

    query: Query

    def extract_query(self) -> Query:
        return self.query

    def tx(self) -> TxExecuteResult:
        """Prepare this statement for use in a transaction."""
        return TxExecuteResult(query=_for_tx(self.query))

    def exec(self) -> BatchResult:
        """Run the statement and return the number of affected records."""
        return _count(_send(self.query))


@dataclass
class Raw:
    """Entry point for raw queries on an engine."""

    engine: Engine | None = None

    def query_raw(self, query: str, *args: Any) -> QueryExec:
        """Prepare a raw query with positional parameters."""
        return QueryExec(query=_raw(self.engine, "queryRaw", query, args))

    def execute_raw(self, query: str, *args: Any) -> ExecuteExec:
        """Prepare a raw statement with positional parameters."""
        return ExecuteExec(query=_raw(self.engine, "executeRaw", query, args))