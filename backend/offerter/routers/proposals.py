from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import ORJSONResponse

from ..auth.cognito import VerifiedUser
from ..domain.proposals.lifecycle import status_message
from ..repositories.base_repository import ProposalStore
from ..services import proposal_service
from ..services.proposal_views import proposal_to_api
from .deps import current_user, proposal_store

router = APIRouter(tags=["proposals"])


@router.get("")
def list_proposals(
    status: Literal["draft", "accepted", "rejected"] | None = Query(default=None),
    user: VerifiedUser = Depends(current_user),
    store: ProposalStore = Depends(proposal_store),
):
    records, counts = proposal_service.list_proposals(store, owner_id=user.sub, status=status)
    return {"data": [proposal_to_api(r) for r in records], "counts": counts}


@router.post("")
def create_proposal(
    body: dict[str, Any] = Body(default_factory=dict),
    user: VerifiedUser = Depends(current_user),
    store: ProposalStore = Depends(proposal_store),
):
    created = proposal_service.create_proposal(store, owner_id=user.sub, payload=body)
    return ORJSONResponse(status_code=201, content=proposal_to_api(created))


@router.get("/{proposal_id}")
def get_proposal(
    proposal_id: str,
    user: VerifiedUser = Depends(current_user),
    store: ProposalStore = Depends(proposal_store),
):
    # Any signed-in user holding the id may view it; the reviewing client is not the owner.
    return proposal_to_api(proposal_service.get_proposal(store, proposal_id))


@router.post("/{proposal_id}/status")
def change_status(
    proposal_id: str,
    body: dict[str, Any] = Body(default_factory=dict),
    user: VerifiedUser = Depends(current_user),
    store: ProposalStore = Depends(proposal_store),
):
    updated = proposal_service.change_status(
        store, proposal_id, body.get("status"), actor_id=user.sub
    )
    return {
        "proposal": proposal_to_api(updated),
        "message": status_message(updated.get("status")),
    }
