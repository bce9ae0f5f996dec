"""Host connection interfaces consumed by dbkit."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from types import TracebackType
from typing import Any, Protocol

from dbkit.types import SqlValue


class HostCursor(Protocol):
    """The DB-API shaped result a host returns for one statement."""

    @property
    def description(self) -> Sequence[Sequence[Any]] | None: ...

    @property
    def lastrowid(self) -> int | None: ...

    @property
    def rowcount(self) -> int: ...

    def fetchall(self) -> list[Any]: ...


class HostTransaction(ABC):
    """Abstract host transaction.

    Used as an async context manager: a clean exit commits, an exception
    rolls back and propagates.
    """

    @abstractmethod
    async def execute(
        self, sql: str, parameters: Sequence[SqlValue] = ()
    ) -> HostCursor:
        """Execute one statement inside the transaction.

        Args:
            sql: SQL text
            parameters: Positional parameters

        Returns:
            Host cursor for the statement

        Raises:
            HostExecutionError: If the host rejects the statement
        """
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Commit the transaction."""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Rollback the transaction."""
        pass

    async def __aenter__(self) -> "HostTransaction":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()


UpgradeBody = Callable[[HostTransaction], Awaitable[None]]


class HostConnection(ABC):
    """Abstract host connection to one named, versioned database."""

    def __init__(
        self, name: str, version: str, estimated_size: int | None = None
    ) -> None:
        """Initialize host connection.

        Args:
            name: Database name
            version: Version to create the database with
            estimated_size: Estimated size in bytes (advisory)
        """
        self.name = name
        self.requested_version = version
        self.estimated_size = estimated_size

    @abstractmethod
    async def connect(self) -> None:
        """Open or create the database."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the database."""
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if connection is active."""
        pass

    @property
    @abstractmethod
    def version(self) -> str:
        """Version currently stored by the host."""
        pass

    @abstractmethod
    async def begin_transaction(self) -> HostTransaction:
        """Begin a new transaction.

        Returns:
            Transaction object
        """
        pass

    @abstractmethod
    async def change_version(
        self,
        from_version: str,
        to_version: str,
        upgrade: UpgradeBody | None = None,
    ) -> None:
        """Atomically run ``upgrade`` and move the stored version.

        Args:
            from_version: Version the caller believes is stored
            to_version: Version to store on success
            upgrade: Body executed inside the version-change transaction

        Raises:
            HostExecutionError: If the stored version does not match
                ``from_version`` or the upgrade body fails; nothing is
                committed in that case
        """
        pass

    async def __aenter__(self) -> "HostConnection":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.disconnect()


class ConnectionOpener(ABC):
    """Abstract factory for host connections."""

    @abstractmethod
    async def open(
        self, name: str, version: str, estimated_size: int | None = None
    ) -> HostConnection:
        """Open or create a database and return a connected handle.

        Raises:
            HostExecutionError: If the host cannot open the database
        """
        pass
