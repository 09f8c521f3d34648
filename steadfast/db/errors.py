"""
Exception types raised by the persistence layer.
"""

from typing import Any, Optional, Sequence

from steadfast.config import ERROR_MESSAGES


class SteadfastError(Exception):
    """Base class for all Steadfast errors."""


class StorageError(SteadfastError):
    """Base class for errors coming from the embedded database."""


class NotOpenError(StorageError):
    """An operation was attempted before the database was opened."""

    def __init__(self, message: str = ERROR_MESSAGES["not_open"]):
        super().__init__(message)


class SqlExecutionError(StorageError):
    """The database engine rejected a statement."""

    def __init__(
        self,
        statement: str,
        params: Sequence[Any] = (),
        cause: Optional[BaseException] = None,
    ):
        self.statement = " ".join(statement.split())
        self.params = tuple(params)
        self.cause = cause
        message = ERROR_MESSAGES["sql_error"].format(error=cause)
        super().__init__(f"{message} | SQL: {self.statement} | Params: {self.params}")


class RowDecodeError(StorageError):
    """A stored row could not be mapped onto its entity."""

    def __init__(self, entity: str, field: str, value: Any, reason: str = ""):
        self.entity = entity
        self.field = field
        self.value = value
        detail = f": {reason}" if reason else ""
        super().__init__(f"Malformed {entity} row, field {field!r}={value!r}{detail}")


class NotFoundError(SteadfastError, LookupError):
    """An update targeted an entity that does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        message = ERROR_MESSAGES["not_found"].format(entity=entity, entity_id=entity_id)
        super().__init__(message)
