"""
Remote store abstractions and result model.

The storefront persists its rows in a hosted backend-as-a-service reached
through a small predicate-based query/command interface. 'RemoteStore' captures
exactly that surface: equality-filtered 'select', 'insert' and 'delete' on a
named table. Results come back as a 'StoreResult' with either 'data' or an
'error' string, mirroring the '(data, error)' shape of hosted database clients.
Transports may also raise; callers in this package treat both as failure.

Concrete implementations: 'InMemoryRemoteStore'.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

Row = dict[str, Any]


class StoreError(Exception):
    """A remote query or command failed."""

    def __init__(self, message: str, table: str | None = None) -> None:
        super().__init__(message)
        self.table = table


class StoreResult(BaseModel):
    """The '(data, error)' pair returned by every 'RemoteStore' call."""

    data: list[Row] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self, table: str | None = None) -> "StoreResult":
        """Raise 'StoreError' if the call reported an error, otherwise return self."""
        if self.error is not None:
            raise StoreError(self.error, table=table)
        return self

    def first(self) -> Row | None:
        return self.data[0] if self.data else None


class RemoteStore(ABC):
    """
    Abstract base class for the hosted row store.

    'filters' are column-equality predicates combined with AND. A filter value
    of None matches rows whose column is null or missing.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: dict[str, Any],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> StoreResult:
        """Return rows of 'table' matching 'filters', optionally ordered and limited."""
        pass

    @abstractmethod
    async def insert(self, table: str, row: Row) -> StoreResult:
        """Insert 'row' and return it as stored (with generated columns filled in)."""
        pass

    @abstractmethod
    async def delete(self, table: str, filters: dict[str, Any]) -> StoreResult:
        """Delete rows of 'table' matching 'filters' and return the removed rows."""
        pass
