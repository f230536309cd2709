"""Connecting to and disconnecting from the query engine."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

from prismaclient.runtime.builder import Engine


@dataclass
class Lifecycle:
    """Controls the connection of a client to its engine.

    Usable as a context manager, which connects on entry and disconnects on exit.
    """

    engine: Engine

    def connect(self) -> None:
        """Connect to the query engine; required before accessing data."""
        self.engine.connect()

    def disconnect(self) -> None:
        """Disconnect from the query engine."""
        self.engine.disconnect()

    def __enter__(self) -> Lifecycle:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.disconnect()