from __future__ import annotations

from fastapi import APIRouter

from ..domain.proposals.catalog import CATEGORIES, PROPERTY_TYPES
from ..domain.proposals.lifecycle import STATUSES, VAT_RATE, status_label

router = APIRouter(tags=["catalog"])


@router.get("")
def get_catalog():
    """Choice lists for the proposal form."""
    return {
        "propertyTypes": list(PROPERTY_TYPES),
        "categories": list(CATEGORIES),
        "statuses": [{"value": s, "label": status_label(s)} for s in STATUSES],
        "vatRate": f"{VAT_RATE:f}",
    }
