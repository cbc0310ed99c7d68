"""
Proposal use cases.

Every operation receives the store and the acting owner explicitly; nothing
here reads request or session state.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from ..domain.proposals.aggregation import (
    DEFAULT_RECENT_LIMIT,
    ProposalStats,
    filter_by_status,
    recent,
    sort_by_recency,
    status_counts,
    summarize,
)
from ..domain.proposals.errors import (
    InvalidTransitionError,
    ProposalNotFoundError,
    ProposalValidationError,
    StoreUnavailableError,
)
from ..domain.proposals.lifecycle import DRAFT, transition
from ..domain.proposals.schemas import validate_for_creation
from ..observability.logging import get_logger
from ..repositories.base_repository import ProposalStore
from ..settings import settings

log = get_logger("proposal_service")


def business_today() -> date:
    return datetime.now(ZoneInfo(settings.business_timezone)).date()


def create_proposal(
    store: ProposalStore,
    *,
    owner_id: str,
    payload: Any,
    today: date | None = None,
) -> dict[str, Any]:
    normalized, errors = validate_for_creation(payload, today=today or business_today())
    if errors:
        log.info(
            "proposal_validation_failed",
            owner_id=owner_id,
            fields=sorted({e["field"] for e in errors}),
        )
        raise ProposalValidationError(message="Proposal validation failed", errors=errors)

    proposal_id = store.create({**normalized, "status": DRAFT, "ownerId": owner_id})
    log.info("proposal_created", proposal_id=proposal_id, owner_id=owner_id)

    created = store.get_by_id(proposal_id)
    if created is None:
        raise StoreUnavailableError(
            message="Created proposal could not be read back",
            operation="get_by_id",
        )
    return created


def get_proposal(store: ProposalStore, proposal_id: str) -> dict[str, Any]:
    record = store.get_by_id(proposal_id)
    if record is None:
        raise ProposalNotFoundError(message="Proposal not found", proposal_id=proposal_id)
    return record


def list_proposals(
    store: ProposalStore,
    *,
    owner_id: str,
    status: str | None = None,
) -> tuple[list[dict[str, Any]], dict[str, int]]:
    """The owner's proposals, newest first, plus per-status counts of the full set."""
    records = sort_by_recency(store.list_by_owner(owner_id))
    return filter_by_status(records, status), status_counts(records)


def dashboard(
    store: ProposalStore,
    *,
    owner_id: str,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> tuple[ProposalStats, list[dict[str, Any]]]:
    records = store.list_by_owner(owner_id)
    return summarize(records), recent(records, recent_limit)


def change_status(
    store: ProposalStore,
    proposal_id: str,
    target_status: Any,
    *,
    actor_id: str | None = None,
) -> dict[str, Any]:
    current = get_proposal(store, proposal_id)

    try:
        proposed = transition(current, target_status)
        # The conditional write closes the race between two concurrent decisions.
        updated = store.update_status(
            proposal_id, proposed["status"], expected_status=DRAFT
        )
    except InvalidTransitionError as e:
        log.info(
            "proposal_transition_rejected",
            proposal_id=proposal_id,
            actor_id=actor_id,
            current_status=e.current_status,
            target_status=e.target_status,
        )
        raise

    log.info(
        "proposal_status_changed",
        proposal_id=proposal_id,
        actor_id=actor_id,
        status=updated.get("status"),
    )
    return updated
