"""Protocol definitions for data access."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol


class DatabaseProtocol(Protocol):
    """Async database interface used by the repositories."""

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> Any: ...

    async def execute_many(self, sql: str, params_seq: list[tuple[Any, ...]]) -> None: ...

    async def fetch_all(self, sql: str, params: tuple[Any, ...] = ()) -> list[Any]: ...

    async def fetch_one(self, sql: str, params: tuple[Any, ...] = ()) -> Any | None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    def transaction(self) -> AbstractAsyncContextManager[None]: ...
