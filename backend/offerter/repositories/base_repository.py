"""
Proposal store interface.

The DynamoDB repository and the in-process store both implement it; callers
depend only on this contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ProposalStore(ABC):
    """Persistence gateway for proposal records."""

    @abstractmethod
    def create(self, record: dict[str, Any]) -> str:
        """Persist a new record; assigns and returns its id and stamps createdAt."""

    @abstractmethod
    def get_by_id(self, proposal_id: str) -> dict[str, Any] | None:
        """Fetch one record, or None when no record has that id."""

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[dict[str, Any]]:
        """All records owned by `owner_id`, in no particular order."""

    @abstractmethod
    def update_status(
        self,
        proposal_id: str,
        new_status: str,
        *,
        expected_status: str = "draft",
    ) -> dict[str, Any]:
        """
        Conditionally set the status.

        The write only happens while the stored status still equals
        `expected_status`; otherwise InvalidTransitionError (or
        ProposalNotFoundError) is raised and nothing changes.
        """
