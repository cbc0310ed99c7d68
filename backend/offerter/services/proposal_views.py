from __future__ import annotations

from typing import Any

from ..domain.proposals.lifecycle import compute_total, status_label
from ..domain.proposals.money import format_money, parse_amount


def proposal_to_api(record: dict[str, Any]) -> dict[str, Any]:
    """JSON-safe proposal: money as 2-decimal strings, derived totals and label."""
    out = dict(record)

    amount = parse_amount(record.get("amount"))
    if amount is not None and amount >= 0:
        totals = compute_total(amount, bool(record.get("includeVAT")))
        out["amount"] = format_money(amount)
        out["totals"] = {
            "net": format_money(totals.net),
            "vat": format_money(totals.vat),
            "gross": format_money(totals.gross),
        }
    else:
        out["amount"] = None if record.get("amount") is None else str(record.get("amount"))
        out["totals"] = None

    out["statusLabel"] = status_label(record.get("status"))
    return out
