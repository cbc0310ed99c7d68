from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from boto3.dynamodb.conditions import Key

from ...db.dynamodb.errors import DdbConflict, DdbError
from ...db.dynamodb.table import DynamoTable, get_main_table
from ...domain.proposals.errors import (
    InvalidTransitionError,
    ProposalNotFoundError,
    StoreUnavailableError,
)
from ...observability.logging import get_logger
from ..base_repository import ProposalStore

log = get_logger("proposals_repo")

_INTERNAL_KEYS = ("pk", "sk", "gsi1pk", "gsi1sk", "entityType", "proposalId")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4()}"


def proposal_key(proposal_id: str) -> dict[str, str]:
    return {"pk": f"PROPOSAL#{proposal_id}", "sk": "PROFILE"}


def owner_pk(owner_id: str) -> str:
    return f"OWNER#{owner_id}"


def owner_index_item(owner_id: str, created_at: str, proposal_id: str) -> dict[str, str]:
    return {"gsi1pk": owner_pk(owner_id), "gsi1sk": f"{created_at}#{proposal_id}"}


def record_from_item(item: dict[str, Any] | None) -> dict[str, Any] | None:
    if not item:
        return None
    out = dict(item)
    out["id"] = item.get("proposalId")
    for k in _INTERNAL_KEYS:
        out.pop(k, None)
    return out


def item_from_record(record: dict[str, Any]) -> dict[str, Any]:
    """DynamoDB-safe copy: dates become ISO strings, None values are dropped."""
    out: dict[str, Any] = {}
    for k, v in record.items():
        if v is None:
            continue
        out[k] = v.isoformat() if hasattr(v, "isoformat") else v
    return out


def _unavailable(operation: str, e: DdbError) -> StoreUnavailableError:
    log.error("proposal_store_failed", store_operation=operation, error=str(e), **e.log_fields())
    return StoreUnavailableError(
        message="Proposal storage is unavailable",
        operation=operation,
        cause=e,
    )


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except DdbError as e:
        raise _unavailable(operation, e) from e


class DynamoProposalStore(ProposalStore):
    """
    Proposals in the single main table.

    Item:        pk = PROPOSAL#<id>, sk = PROFILE
    Owner index: GSI1 with gsi1pk = OWNER#<ownerId>, gsi1sk = <createdAt>#<id>
    """

    def __init__(self, table: DynamoTable | None = None):
        self._table = table

    def _t(self) -> DynamoTable:
        return self._table if self._table is not None else get_main_table()

    def create(self, record: dict[str, Any]) -> str:
        owner_id = str(record.get("ownerId") or "").strip()
        if not owner_id:
            raise ValueError("ownerId is required")

        proposal_id = new_id("proposal")
        created_at = now_iso()
        item: dict[str, Any] = {
            **item_from_record(record),
            **proposal_key(proposal_id),
            "entityType": "Proposal",
            "proposalId": proposal_id,
            "ownerId": owner_id,
            "createdAt": created_at,
            "updatedAt": created_at,
            **owner_index_item(owner_id, created_at, proposal_id),
        }
        item.pop("id", None)

        with _storage_errors("create"):
            self._t().put_item(item=item, condition_expression="attribute_not_exists(pk)")
        return proposal_id

    def get_by_id(self, proposal_id: str) -> dict[str, Any] | None:
        pid = str(proposal_id or "").strip()
        if not pid:
            return None
        with _storage_errors("get_by_id"):
            item = self._t().get_item(key=proposal_key(pid), consistent_read=True)
        return record_from_item(item)

    def list_by_owner(self, owner_id: str) -> list[dict[str, Any]]:
        oid = str(owner_id or "").strip()
        if not oid:
            return []

        items: list[dict[str, Any]] = []
        start_key: dict[str, Any] | None = None
        with _storage_errors("list_by_owner"):
            t = self._t()
            while True:
                pg = t.query_page(
                    index_name="GSI1",
                    key_condition_expression=Key("gsi1pk").eq(owner_pk(oid)),
                    limit=200,
                    exclusive_start_key=start_key,
                )
                items.extend(pg.items)
                # A page may be empty yet still carry a LastEvaluatedKey.
                start_key = pg.last_evaluated_key
                if not start_key:
                    break

        return [r for r in (record_from_item(it) for it in items) if r]

    def update_status(
        self,
        proposal_id: str,
        new_status: str,
        *,
        expected_status: str = "draft",
    ) -> dict[str, Any]:
        now = now_iso()
        try:
            updated = self._t().update_item(
                key=proposal_key(proposal_id),
                update_expression="SET #status = :s, updatedAt = :u, decidedAt = :u",
                expression_attribute_names={"#status": "status"},
                expression_attribute_values={
                    ":s": new_status,
                    ":u": now,
                    ":expected": expected_status,
                },
                condition_expression="attribute_exists(pk) AND #status = :expected",
                return_values="ALL_NEW",
            )
        except DdbConflict:
            # Another decision won the race, or the record does not exist.
            current = self.get_by_id(proposal_id)
            if current is None:
                raise ProposalNotFoundError(
                    message="Proposal not found", proposal_id=proposal_id
                ) from None
            raise InvalidTransitionError(
                message=f"Proposal is already {current.get('status')}",
                current_status=current.get("status"),
                target_status=new_status,
            ) from None
        except DdbError as e:
            raise _unavailable("update_status", e) from e

        return record_from_item(updated) or {}
