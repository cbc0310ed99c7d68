"""Proposal status rules and derived pricing."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Literal

from .errors import InvalidTransitionError
from .money import ZERO, parse_amount, quantize

ProposalStatus = Literal["draft", "accepted", "rejected"]

DRAFT = "draft"
ACCEPTED = "accepted"
REJECTED = "rejected"

STATUSES: tuple[str, ...] = (DRAFT, ACCEPTED, REJECTED)
TERMINAL_STATUSES = frozenset({ACCEPTED, REJECTED})

# Fixed by law for the services quoted here; not configurable.
VAT_RATE = Decimal("0.25")

_STATUS_LABELS = {
    DRAFT: "Utkast",
    ACCEPTED: "Godkänd",
    REJECTED: "Avböjd",
}

_STATUS_MESSAGES = {
    ACCEPTED: (
        "Offert godkänd!",
        "Du har godkänt offerten. Entreprenören kommer att kontakta dig snart.",
    ),
    REJECTED: ("Offert avböjd", "Du har avböjt offerten."),
}


@dataclass(frozen=True, slots=True)
class Totals:
    net: Decimal
    vat: Decimal
    gross: Decimal


def compute_total(amount: Any, include_vat: bool) -> Totals:
    """Net/VAT/gross for an amount, each rounded half-up to 2 decimals.

    VAT is computed on the rounded net so that gross == net + vat always holds.
    """
    parsed = parse_amount(amount)
    if parsed is None or parsed < 0:
        raise ValueError(f"invalid amount: {amount!r}")

    net = quantize(parsed)
    if not include_vat:
        return Totals(net=net, vat=ZERO, gross=net)
    vat = quantize(net * VAT_RATE)
    return Totals(net=net, vat=vat, gross=net + vat)


def normalize_status(value: Any) -> str:
    return str(value or "").strip().lower()


def transition(record: dict[str, Any], target_status: Any) -> dict[str, Any]:
    """Return a copy of `record` moved to `target_status`.

    Only draft -> accepted and draft -> rejected are allowed. The caller must
    persist the result through the proposal store.
    """
    current = normalize_status(record.get("status"))
    target = normalize_status(target_status)

    if target not in TERMINAL_STATUSES:
        raise InvalidTransitionError(
            message=f"Cannot move a proposal to '{target or target_status}'",
            current_status=current or None,
            target_status=target or None,
        )
    if current != DRAFT:
        raise InvalidTransitionError(
            message=f"Proposal is already {current or 'in an unknown state'}",
            current_status=current or None,
            target_status=target,
        )

    return {**record, "status": target}


def status_label(status: Any) -> str:
    return _STATUS_LABELS.get(normalize_status(status), "Okänd")


def status_message(status: Any) -> dict[str, str] | None:
    msg = _STATUS_MESSAGES.get(normalize_status(status))
    if not msg:
        return None
    return {"title": msg[0], "description": msg[1]}
