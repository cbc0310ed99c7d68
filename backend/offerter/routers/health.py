from __future__ import annotations

from fastapi import APIRouter

from ..settings import settings

router = APIRouter()


@router.get("/", tags=["health"])
def health():
    return {
        "message": "Offerter API",
        "version": "1.0.0",
        "status": "running",
        "port": settings.port,
        "environment": settings.environment,
        "store": settings.normalized_proposal_store,
        "dynamodb": "configured" if settings.ddb_table_name else "missing",
        "endpoints": [
            "GET /api/catalog",
            "GET /api/proposals",
            "POST /api/proposals",
            "GET /api/proposals/{id}",
            "POST /api/proposals/{id}/status",
            "GET /api/dashboard",
        ],
    }
