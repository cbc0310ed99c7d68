from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ProposalError(Exception):
    """Base error for proposal operations.

    Rendered into problem-details responses by the app's exception handler;
    `status_code` picks the HTTP status.
    """

    message: str

    status_code = 500

    def __str__(self) -> str:
        return self.message

    def extensions(self) -> dict[str, Any] | None:
        return None


@dataclass(slots=True)
class ProposalValidationError(ProposalError):
    errors: list[dict[str, Any]] = field(default_factory=list)

    status_code = 422

    @property
    def fields(self) -> list[str]:
        return [str(e.get("field") or "") for e in self.errors]


@dataclass(slots=True)
class ProposalNotFoundError(ProposalError):
    proposal_id: str | None = None

    status_code = 404


@dataclass(slots=True)
class InvalidTransitionError(ProposalError):
    current_status: str | None = None
    target_status: str | None = None

    status_code = 409

    def extensions(self) -> dict[str, Any] | None:
        ext = {"currentStatus": self.current_status, "targetStatus": self.target_status}
        return {k: v for k, v in ext.items() if v is not None} or None


@dataclass(slots=True)
class StoreUnavailableError(ProposalError):
    operation: str | None = None
    cause: Exception | None = None

    status_code = 503

    def extensions(self) -> dict[str, Any] | None:
        return {"operation": self.operation} if self.operation else None
