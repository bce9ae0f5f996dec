"""Exceptions raised by dbkit."""

from typing import Any


class DatabaseError(Exception):
    """Base exception for dbkit errors."""

    code: Any = None

    @property
    def message(self) -> str:
        return str(self)


class InvalidArgumentError(DatabaseError, ValueError):
    """Raised when a builder receives input that would produce malformed SQL."""

    pass


class ConnectionUnavailableError(DatabaseError):
    """Raised when the database handle is closed or was never opened."""

    pass


class HostExecutionError(DatabaseError):
    """Raised when the host rejects a transaction or version change."""

    def __init__(self, message: str, code: Any = None) -> None:
        super().__init__(message)
        self.code = code


class DocumentLoadError(DatabaseError):
    """Raised when a schema or data document cannot be loaded or parsed."""

    pass


class UnsupportedOperationError(DatabaseError):
    """Raised for operations the host cannot perform at all."""

    pass
