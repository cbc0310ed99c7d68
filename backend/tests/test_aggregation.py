from __future__ import annotations

import itertools
from decimal import Decimal

from offerter.domain.proposals.aggregation import (
    filter_by_status,
    recent,
    sort_by_recency,
    status_counts,
    summarize,
)


def _rec(i, status, amount, created_at=None):
    r = {"id": f"p{i}", "status": status, "amount": amount}
    if created_at is not None:
        r["createdAt"] = created_at
    return r


def test_summarize_empty_is_all_zero():
    s = summarize([])
    assert s.total_count == 0
    assert s.accepted_count == s.pending_count == s.needs_attention_count == 0
    assert s.accepted_value == Decimal("0")
    assert s.pending_value == Decimal("0")


def test_summarize_mixed_statuses():
    records = [
        _rec(1, "accepted", Decimal("1000")),
        _rec(2, "draft", Decimal("2000")),
        _rec(3, "rejected", Decimal("500")),
    ]
    s = summarize(records)
    assert s.accepted_value == Decimal("1000")
    assert s.pending_value == Decimal("2000")
    assert s.accepted_count == 1
    assert s.pending_count == 1
    assert s.needs_attention_count == 1
    assert s.total_count == 3
    assert s.to_api()["acceptedValue"] == "1000.00"
    assert s.to_api()["totalCount"] == 3


def test_summarize_is_order_independent():
    records = [
        _rec(1, "accepted", "1000.10"),
        _rec(2, "draft", 2000),
        _rec(3, "rejected", "500"),
        _rec(4, "draft", Decimal("0.45")),
    ]
    expected = summarize(records)
    for perm in itertools.permutations(records):
        assert summarize(list(perm)) == expected


def test_unparseable_amount_counts_as_zero():
    s = summarize([_rec(1, "accepted", "n/a"), _rec(2, "accepted", "10")])
    assert s.accepted_value == Decimal("10")
    assert s.accepted_count == 2


def test_filter_by_status_none_returns_input_unchanged():
    records = [_rec(1, "draft", 1), _rec(2, "accepted", 2), _rec(3, "draft", 3)]
    out = filter_by_status(records, None)
    assert out == records
    assert [r["id"] for r in filter_by_status(records, "draft")] == ["p1", "p3"]


def test_status_counts():
    records = [_rec(1, "draft", 1), _rec(2, "accepted", 2), _rec(3, "draft", 3)]
    assert status_counts(records) == {"all": 3, "draft": 2, "accepted": 1, "rejected": 0}


def test_sort_by_recency_newest_first():
    records = [
        _rec(1, "draft", 1, "2024-01-01T00:00:00Z"),
        _rec(2, "draft", 1, "2024-03-01T00:00:00Z"),
        _rec(3, "draft", 1, "2024-02-01T00:00:00Z"),
    ]
    out = sort_by_recency(records)
    assert [r["createdAt"][:10] for r in out] == ["2024-03-01", "2024-02-01", "2024-01-01"]


def test_sort_by_recency_keeps_undated_records_in_place():
    records = [
        _rec(1, "draft", 1, "2024-01-01T00:00:00Z"),
        _rec(2, "draft", 1),
        _rec(3, "draft", 1, "2024-03-01T00:00:00Z"),
        _rec(4, "draft", 1, "garbage"),
    ]
    out = sort_by_recency(records)
    assert [r["id"] for r in out] == ["p3", "p2", "p1", "p4"]


def test_sort_by_recency_is_stable_for_equal_timestamps():
    ts = "2024-05-05T10:00:00Z"
    records = [_rec(i, "draft", 1, ts) for i in range(4)]
    assert [r["id"] for r in sort_by_recency(records)] == ["p0", "p1", "p2", "p3"]


def test_recent_limits_to_n():
    records = [_rec(i, "draft", 1, f"2024-01-{i + 1:02d}T00:00:00Z") for i in range(8)]
    out = recent(records)
    assert len(out) == 5
    assert out[0]["id"] == "p7"
    assert recent(records, 0) == []


def test_oversized_stored_amount_counts_as_zero():
    s = summarize([_rec(1, "accepted", Decimal("1E+30")), _rec(2, "draft", "20")])
    assert s.accepted_value == Decimal("0")
    assert s.accepted_count == 1
    assert s.to_api()["pendingValue"] == "20.00"


def test_sub_ore_stored_amounts_sum_as_shown():
    s = summarize([_rec(1, "accepted", "10.005"), _rec(2, "accepted", "10.005")])
    assert s.to_api()["acceptedValue"] == "20.02"
