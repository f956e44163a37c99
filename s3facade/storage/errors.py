"""Errors raised or returned by storage operations."""
from typing import Optional, Sequence

from botocore.exceptions import ClientError
from pydantic import ValidationError


class StorageError(RuntimeError):
    """Base class for every error this package produces."""


class MissingParameterError(StorageError, ValueError):
    """A required request field is absent or empty."""

    def __init__(self, fields: Sequence[str], request_name: str = "request"):
        self.fields = tuple(fields)
        super().__init__(f"{request_name} has missing data: {', '.join(self.fields)}")


class InvalidParameterError(StorageError, ValueError):
    """A request or config field has a value of the wrong type or range.

    ``fields`` holds the dotted location of every rejected value.
    """

    def __init__(self, fields: Sequence[str], request_name: str = "request", detail: str = ""):
        self.fields = tuple(fields)
        message = f"{request_name} has invalid data: {', '.join(self.fields)}"
        super().__init__(f"{message} ({detail})" if detail else message)

    @classmethod
    def from_validation_error(cls, exc: ValidationError, request_name: str = "request") -> "InvalidParameterError":
        fields = [".".join(str(part) for part in err["loc"]) or "<root>" for err in exc.errors()]
        detail = "; ".join(err["msg"] for err in exc.errors())
        return cls(fields, request_name, detail)


class StorageConnectionError(StorageError, ConnectionError):
    """The client could not be built, failed its liveness check, or is absent."""


class DelegatedOperationError(StorageError):
    """The underlying storage call failed.

    The original exception is kept as ``__cause__``; for botocore
    ``ClientError`` the S3 error code is exposed as ``code``.
    """

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.code: Optional[str] = None
        if isinstance(cause, ClientError):
            self.code = cause.response.get("Error", {}).get("Code")
        super().__init__(f"Failed to {operation}: {cause}")
        self.__cause__ = cause
