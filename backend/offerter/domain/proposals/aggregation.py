"""Dashboard statistics and list helpers over one owner's proposals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Sequence

from ...observability.logging import get_logger
from .lifecycle import ACCEPTED, DRAFT, REJECTED, normalize_status
from .money import ZERO, format_money, parse_amount, quantize

log = get_logger("proposal_aggregation")

DEFAULT_RECENT_LIMIT = 5


@dataclass(slots=True)
class ProposalStats:
    accepted_value: Decimal = ZERO
    pending_value: Decimal = ZERO
    accepted_count: int = 0
    pending_count: int = 0
    needs_attention_count: int = 0
    total_count: int = 0

    def to_api(self) -> dict[str, Any]:
        return {
            "acceptedValue": format_money(self.accepted_value),
            "pendingValue": format_money(self.pending_value),
            "acceptedCount": self.accepted_count,
            "pendingCount": self.pending_count,
            "needsAttentionCount": self.needs_attention_count,
            "totalCount": self.total_count,
        }


def _amount_or_zero(record: dict[str, Any]) -> Decimal:
    amount = parse_amount(record.get("amount"))
    if amount is None:
        # Counted as zero so one bad record cannot break the dashboard.
        log.warning(
            "proposal_amount_unparseable",
            proposal_id=record.get("id"),
            raw_amount=repr(record.get("amount")),
        )
        return ZERO
    return quantize(amount)


def summarize(records: Iterable[dict[str, Any]]) -> ProposalStats:
    stats = ProposalStats()
    for r in records:
        stats.total_count += 1
        status = normalize_status(r.get("status"))
        if status == ACCEPTED:
            stats.accepted_value += _amount_or_zero(r)
            stats.accepted_count += 1
        elif status == DRAFT:
            stats.pending_value += _amount_or_zero(r)
            stats.pending_count += 1
            # A draft is waiting on the client's decision.
            stats.needs_attention_count += 1
    return stats


def status_counts(records: Iterable[dict[str, Any]]) -> dict[str, int]:
    counts = {"all": 0, DRAFT: 0, ACCEPTED: 0, REJECTED: 0}
    for r in records:
        counts["all"] += 1
        status = normalize_status(r.get("status"))
        if status in counts:
            counts[status] += 1
    return counts


def filter_by_status(records: Sequence[dict[str, Any]], status: str | None) -> list[dict[str, Any]]:
    if status is None:
        return list(records)
    wanted = normalize_status(status)
    return [r for r in records if normalize_status(r.get("status")) == wanted]


def parse_created_at(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def sort_by_recency(records: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    """Newest first by createdAt.

    Records whose createdAt is missing or unparseable stay at their input
    index; the dated records are stably sorted into the remaining slots.
    """
    out = list(records)
    dated: list[tuple[int, datetime]] = []
    for i, r in enumerate(out):
        ts = parse_created_at(r.get("createdAt"))
        if ts is not None:
            dated.append((i, ts))

    ordered = sorted(dated, key=lambda it: it[1], reverse=True)
    originals = [out[i] for i, _ in ordered]
    for (slot, _), rec in zip(dated, originals):
        out[slot] = rec
    return out


def recent(records: Sequence[dict[str, Any]], n: int = DEFAULT_RECENT_LIMIT) -> list[dict[str, Any]]:
    if n <= 0:
        return []
    return sort_by_recency(records)[:n]
