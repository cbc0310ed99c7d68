from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..auth.cognito import VerifiedUser
from ..domain.proposals.aggregation import DEFAULT_RECENT_LIMIT
from ..repositories.base_repository import ProposalStore
from ..services import proposal_service
from ..services.proposal_views import proposal_to_api
from .deps import current_user, proposal_store

router = APIRouter(tags=["dashboard"])


@router.get("")
def get_dashboard(
    recent: int = Query(default=DEFAULT_RECENT_LIMIT, ge=0, le=50),
    user: VerifiedUser = Depends(current_user),
    store: ProposalStore = Depends(proposal_store),
):
    stats, latest = proposal_service.dashboard(store, owner_id=user.sub, recent_limit=recent)
    return {"stats": stats.to_api(), "recent": [proposal_to_api(r) for r in latest]}
