from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Ensure `backend/` is on sys.path so `import offerter.*` works in tests.
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

# Settings are read once at import time.
os.environ.setdefault("NODE_ENV", "test")
os.environ.setdefault("PROPOSAL_STORE", "memory")


def valid_payload(**overrides):
    payload = {
        "clientName": "Anna Svensson",
        "clientEmail": "anna@example.se",
        "clientPhone": "070-123 45 67",
        "workAddress": "Storgatan 1, Stockholm",
        "amount": "1250",
        "propertyType": "Villa/Radhus",
        "category": "Elektriker",
        "subCategory": "Byte av elcentral",
        "includeMaterials": True,
        "includeVAT": True,
        "generalInfo": "Byte av gammal elcentral mot ny med jordfelsbrytare.",
        "validityPeriod": "30 dagar",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload():
    return valid_payload()
