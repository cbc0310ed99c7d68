from __future__ import annotations

from fastapi import HTTPException, Request

from ..auth.cognito import VerifiedUser
from ..repositories.base_repository import ProposalStore
from ..repositories.proposals.factory import get_proposal_store


def current_user(request: Request) -> VerifiedUser:
    # AuthMiddleware sets request.state.user for protected /api routes.
    user = getattr(request.state, "user", None)
    if not user or not getattr(user, "sub", None):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def proposal_store() -> ProposalStore:
    return get_proposal_store()
