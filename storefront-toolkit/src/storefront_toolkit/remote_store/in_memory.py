"""
In-memory 'RemoteStore'.

Keeps rows per table in insertion order. Every inserted row receives a 'lid'
primary key and a strictly increasing 'created_at' timestamp unless the caller
supplies them. Failures can be injected per operation with 'fail_next', which
is how the demo scenarios and tests exercise the rollback paths.
"""

from collections import defaultdict
from typing import Any, Literal

from loguru import logger

from storefront_toolkit.remote_store.base import RemoteStore, Row, StoreError, StoreResult
from storefront_toolkit.utils.database import generate_uid
from storefront_toolkit.utils.time import get_current_timestamp

Operation = Literal["select", "insert", "delete"]


def _matches(row: Row, filters: dict[str, Any]) -> bool:
    return all(row.get(column) == value for column, value in filters.items())


class InMemoryRemoteStore(RemoteStore):
    def __init__(self, primary_key: str = "lid") -> None:
        self.primary_key = primary_key
        self.tables: dict[str, list[Row]] = defaultdict(list)
        self._failures: dict[Operation, list[tuple[str, bool]]] = defaultdict(list)
        self._last_timestamp = 0

    def fail_next(self, operation: Operation, error: str = "remote store unavailable", raises: bool = False) -> None:
        """Make the next 'operation' call fail.

        With 'raises=False' the call returns a 'StoreResult' carrying 'error';
        with 'raises=True' it raises 'StoreError' like a broken transport would.
        """
        self._failures[operation].append((error, raises))

    def _take_failure(self, operation: Operation, table: str) -> StoreResult | None:
        if not self._failures[operation]:
            return None
        error, raises = self._failures[operation].pop(0)
        logger.debug(f"Injected {operation} failure on '{table}': {error}")
        if raises:
            raise StoreError(error, table=table)
        return StoreResult(error=error)

    def _next_timestamp(self) -> int:
        self._last_timestamp = max(get_current_timestamp(), self._last_timestamp + 1)
        return self._last_timestamp

    async def select(
        self,
        table: str,
        filters: dict[str, Any],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> StoreResult:
        failure = self._take_failure("select", table)
        if failure is not None:
            return failure
        rows = [dict(row) for row in self.tables[table] if _matches(row, filters)]
        if order_by is not None:
            rows.sort(key=lambda row: row.get(order_by) or 0, reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return StoreResult(data=rows)

    async def insert(self, table: str, row: Row) -> StoreResult:
        failure = self._take_failure("insert", table)
        if failure is not None:
            return failure
        stored = dict(row)
        stored.setdefault(self.primary_key, generate_uid())
        stored.setdefault("created_at", self._next_timestamp())
        self.tables[table].append(stored)
        return StoreResult(data=[dict(stored)])

    async def delete(self, table: str, filters: dict[str, Any]) -> StoreResult:
        if not filters:
            raise ValueError("delete requires at least one filter")
        failure = self._take_failure("delete", table)
        if failure is not None:
            return failure
        removed = [row for row in self.tables[table] if _matches(row, filters)]
        self.tables[table] = [row for row in self.tables[table] if not _matches(row, filters)]
        return StoreResult(data=[dict(row) for row in removed])
