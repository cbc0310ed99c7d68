from __future__ import annotations

from functools import lru_cache

from ...observability.logging import get_logger
from ...settings import settings
from ..base_repository import ProposalStore
from .memory_store import InMemoryProposalStore
from .proposals_repo import DynamoProposalStore


@lru_cache(maxsize=1)
def get_proposal_store() -> ProposalStore:
    kind = settings.normalized_proposal_store
    get_logger("proposal_store").info("proposal_store_selected", store=kind)
    if kind == "memory":
        return InMemoryProposalStore()
    return DynamoProposalStore()
