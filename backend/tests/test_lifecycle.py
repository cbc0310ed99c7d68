from __future__ import annotations

from decimal import Decimal

import pytest

from offerter.domain.proposals.errors import InvalidTransitionError
from offerter.domain.proposals.lifecycle import (
    compute_total,
    status_label,
    status_message,
    transition,
)


@pytest.mark.parametrize("amount", ["0", "1", "1000", "1250.50", "99999.99", "0.01"])
def test_gross_with_vat_is_amount_times_1_25(amount):
    t = compute_total(Decimal(amount), True)
    assert t.gross == (Decimal(amount) * Decimal("1.25")).quantize(Decimal("0.01"))
    assert t.gross == t.net + t.vat


@pytest.mark.parametrize("amount", ["0", "1000", "1250.50"])
def test_gross_without_vat_is_amount(amount):
    t = compute_total(Decimal(amount), False)
    assert t.gross == Decimal(amount)
    assert t.vat == Decimal("0")


def test_compute_total_rounds_half_up_to_ore():
    t = compute_total("10.005", True)
    assert t.net == Decimal("10.01")
    assert t.vat == Decimal("2.50")
    assert t.gross == Decimal("12.51")


def test_compute_total_accepts_text_amounts():
    assert compute_total("1 500,50", False).gross == Decimal("1500.50")


@pytest.mark.parametrize("bad", ["-1", "abc", None, "NaN"])
def test_compute_total_rejects_invalid_amounts(bad):
    with pytest.raises(ValueError):
        compute_total(bad, True)


@pytest.mark.parametrize("target", ["accepted", "rejected"])
def test_draft_moves_once_then_is_terminal(target):
    rec = {"id": "p1", "status": "draft", "amount": Decimal("10")}
    moved = transition(rec, target)
    assert moved["status"] == target
    # the input record is not mutated
    assert rec["status"] == "draft"

    for nxt in ("accepted", "rejected", "draft"):
        with pytest.raises(InvalidTransitionError):
            transition(moved, nxt)


@pytest.mark.parametrize("current", ["accepted", "rejected"])
@pytest.mark.parametrize("target", ["accepted", "rejected", "draft", "archived"])
def test_terminal_statuses_reject_every_transition(current, target):
    with pytest.raises(InvalidTransitionError) as ei:
        transition({"status": current}, target)
    assert ei.value.current_status == current
    assert ei.value.status_code == 409


def test_draft_cannot_move_to_draft_or_unknown():
    for target in ("draft", "", None, "archived"):
        with pytest.raises(InvalidTransitionError):
            transition({"status": "draft"}, target)


def test_status_labels_and_messages():
    assert status_label("draft") == "Utkast"
    assert status_label("accepted") == "Godkänd"
    assert status_label("rejected") == "Avböjd"
    assert status_label("weird") == "Okänd"
    assert status_message("accepted")["title"] == "Offert godkänd!"
    assert status_message("rejected")["title"] == "Offert avböjd"
    assert status_message("draft") is None
