from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class DdbError(Exception):
    """A classified DynamoDB failure.

    Raised by `ddb_call` in place of raw botocore errors. The proposal store
    turns these into domain errors, so they never reach an HTTP handler.
    """

    message: str
    operation: str | None = None
    table_name: str | None = None
    key: dict[str, Any] | None = None
    aws_request_id: str | None = None
    retryable: bool = False
    cause: Exception | None = None

    kind = "internal"

    def __str__(self) -> str:
        return self.message

    def log_fields(self) -> dict[str, Any]:
        fields = {
            "ddb_error": self.kind,
            "operation": self.operation,
            "table": self.table_name,
            "aws_request_id": self.aws_request_id,
            "retryable": self.retryable,
        }
        return {k: v for k, v in fields.items() if v is not None}


@dataclass(slots=True)
class DdbConflict(DdbError):
    """A condition expression did not hold (lost race or duplicate key)."""

    kind = "conflict"


@dataclass(slots=True)
class DdbValidation(DdbError):
    kind = "validation"


@dataclass(slots=True)
class DdbThrottled(DdbError):
    kind = "throttled"


@dataclass(slots=True)
class DdbUnavailable(DdbError):
    kind = "unavailable"


@dataclass(slots=True)
class DdbInternal(DdbError):
    pass
