from __future__ import annotations

import copy
import threading
from typing import Any

from ...domain.proposals.errors import InvalidTransitionError, ProposalNotFoundError
from ..base_repository import ProposalStore
from .proposals_repo import item_from_record, new_id, now_iso


class InMemoryProposalStore(ProposalStore):
    """
    Process-local store with the same conditional-update semantics as DynamoDB.

    Used for local development (PROPOSAL_STORE=memory) and tests. Records are
    copied on the way in and out so callers never share state with the store.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: dict[str, dict[str, Any]] = {}

    def create(self, record: dict[str, Any]) -> str:
        owner_id = str(record.get("ownerId") or "").strip()
        if not owner_id:
            raise ValueError("ownerId is required")

        proposal_id = new_id("proposal")
        created_at = now_iso()
        item = {
            **item_from_record(record),
            "id": proposal_id,
            "ownerId": owner_id,
            "createdAt": created_at,
            "updatedAt": created_at,
        }
        with self._lock:
            self._items[proposal_id] = item
        return proposal_id

    def get_by_id(self, proposal_id: str) -> dict[str, Any] | None:
        with self._lock:
            item = self._items.get(str(proposal_id or ""))
            return copy.deepcopy(item) if item else None

    def list_by_owner(self, owner_id: str) -> list[dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(it) for it in self._items.values() if it.get("ownerId") == owner_id]

    def update_status(
        self,
        proposal_id: str,
        new_status: str,
        *,
        expected_status: str = "draft",
    ) -> dict[str, Any]:
        with self._lock:
            item = self._items.get(str(proposal_id or ""))
            if item is None:
                raise ProposalNotFoundError(message="Proposal not found", proposal_id=proposal_id)
            if item.get("status") != expected_status:
                raise InvalidTransitionError(
                    message=f"Proposal is already {item.get('status')}",
                    current_status=item.get("status"),
                    target_status=new_status,
                )
            now = now_iso()
            item.update({"status": new_status, "updatedAt": now, "decidedAt": now})
            return copy.deepcopy(item)
