"""Running several queries as one transaction and reading their results."""

from __future__ import annotations

import copy
import queue
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from prismaclient.runtime.builder import Engine, Query
from prismaclient.runtime.values import PrismaError

# Marks a result queue whose transaction has finished.
_CLOSED = object()
_MISSING = object()


class TransactionError(PrismaError):
    """Raised when a transaction fails or its result is not available."""


class Result:
    """Reads one query's result from its queue once and caches it."""

    def __init__(self) -> None:
        self._cache: Any = _MISSING

    def get(self, source: queue.Queue[Any] | None) -> Any:
        """Return the result delivered to ``source``; raise if none was delivered."""
        if self._cache is _MISSING:
            if source is None:
                raise TransactionError("result not fetched")
            try:
                data = source.get_nowait()
            except queue.Empty:
                raise TransactionError("result not fetched") from None
            if data is _CLOSED:
                # keep the queue closed for any other reader
                source.put(_CLOSED)
                raise TransactionError("result not fetched")
            self._cache = data
        return copy.deepcopy(self._cache)


@runtime_checkable
class TxParam(Protocol):
    """A query that can take part in a transaction."""

    def is_tx(self) -> None: ...

    def extract_query(self) -> Query: ...


def _message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("error") or error.get("message") or "")
    return str(error)


@dataclass
class TransactionExec:
    """A prepared transaction, ready to be sent to the engine."""

    queries: Sequence[TxParam] = ()
    engine: Engine | None = None
    requests: list[dict[str, Any]] = field(default_factory=list)

    def exec(self) -> None:
        """Send all queries as one transaction and hand each its result."""
        try:
            self._run()
        finally:
            for param in self.queries:
                channel = param.extract_query().tx_result
                if channel is not None:
                    channel.put(_CLOSED)

    def _run(self) -> None:
        if self.engine is None:
            raise PrismaError(
                "client.Prisma.Connect() needs to be called before sending queries"
            )
        payload = {"batch": self.requests, "transaction": True}
        try:
            response = self.engine.batch(payload)
        except Exception as exc:
            raise TransactionError(f"could not send raw query: {exc}") from exc
        response = response or {}
        errors = response.get("errors") or []
        if errors:
            raise TransactionError(f"pql error: {_message(errors[0])}")
        for param, inner in zip(self.queries, response.get("batchResult") or []):
            inner = inner or {}
            inner_errors = inner.get("errors") or []
            if inner_errors:
                raise TransactionError(f"pql error: {_message(inner_errors[0])}")
            channel = param.extract_query().tx_result
            if channel is not None:
                channel.put((inner.get("data") or {}).get("result"))


@dataclass
class TX:
    """Creates transactions on an engine."""

    engine: Engine | None = None

    def transaction(self, *args: TxParam) -> TransactionExec:
        """Prepare a transaction running the given queries in order."""
        requests = [
            {"query": param.extract_query().build(), "variables": {}} for param in args
        ]
        return TransactionExec(queries=tuple(args), engine=self.engine, requests=requests)