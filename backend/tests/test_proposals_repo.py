from __future__ import annotations

from decimal import Decimal

import pytest
from botocore.exceptions import ClientError

from offerter.db.dynamodb.errors import DdbConflict, DdbThrottled
from offerter.db.dynamodb.retry import RetryPolicy, ddb_call, map_botocore_error
from offerter.db.dynamodb.table import Page
from offerter.domain.proposals.errors import (
    InvalidTransitionError,
    ProposalNotFoundError,
    StoreUnavailableError,
)
from offerter.repositories.proposals.memory_store import InMemoryProposalStore
from offerter.repositories.proposals.proposals_repo import DynamoProposalStore


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "Op")


class FakeTable:
    """Just enough of DynamoTable to exercise the repository."""

    def __init__(self, page_size: int = 2):
        self.items: dict[tuple[str, str], dict] = {}
        self.page_size = page_size
        self.queries: list[dict] = []
        self.fail_with: Exception | None = None
        # Serve an empty page that still carries a LastEvaluatedKey first.
        self.leading_empty_page = False

    def _k(self, key):
        return (key["pk"], key["sk"])

    def put_item(self, *, item, condition_expression=None, **_):
        if self.fail_with:
            raise self.fail_with
        k = self._k(item)
        if condition_expression == "attribute_not_exists(pk)" and k in self.items:
            raise DdbConflict(message="conditional check failed", operation="PutItem")
        self.items[k] = dict(item)
        return {}

    def get_item(self, *, key, consistent_read=False):
        if self.fail_with:
            raise self.fail_with
        it = self.items.get(self._k(key))
        return dict(it) if it else None

    def update_item(
        self,
        *,
        key,
        update_expression,
        expression_attribute_names,
        expression_attribute_values,
        condition_expression=None,
        return_values="ALL_NEW",
    ):
        it = self.items.get(self._k(key))
        if it is None or it.get("status") != expression_attribute_values[":expected"]:
            raise DdbConflict(message="conditional check failed", operation="UpdateItem")
        it["status"] = expression_attribute_values[":s"]
        it["updatedAt"] = expression_attribute_values[":u"]
        it["decidedAt"] = expression_attribute_values[":u"]
        return dict(it)

    def query_page(self, *, key_condition_expression, index_name=None, limit=100, exclusive_start_key=None, **_):
        if self.fail_with:
            raise self.fail_with
        self.queries.append({"index_name": index_name, "exclusive_start_key": exclusive_start_key})
        if self.leading_empty_page and exclusive_start_key is None:
            return Page(items=[], last_evaluated_key={"offset": 0})
        wanted = key_condition_expression.get_expression()["values"][1]
        matching = sorted(
            (it for it in self.items.values() if it.get("gsi1pk") == wanted),
            key=lambda it: it["gsi1sk"],
            reverse=True,
        )
        start = (exclusive_start_key or {}).get("offset", 0)
        chunk = matching[start : start + self.page_size]
        more = start + self.page_size < len(matching)
        return Page(
            items=[dict(it) for it in chunk],
            last_evaluated_key={"offset": start + self.page_size} if more else None,
        )


def _record(owner="owner-1", **kw):
    rec = {
        "clientName": "Anna",
        "amount": Decimal("100"),
        "status": "draft",
        "ownerId": owner,
        "includeVAT": False,
        "startDate": None,
    }
    rec.update(kw)
    return rec


def test_create_writes_keys_and_strips_them_on_read():
    table = FakeTable()
    store = DynamoProposalStore(table=table)

    pid = store.create(_record())
    assert pid.startswith("proposal_")

    (item,) = table.items.values()
    assert item["pk"] == f"PROPOSAL#{pid}"
    assert item["sk"] == "PROFILE"
    assert item["gsi1pk"] == "OWNER#owner-1"
    assert item["gsi1sk"].endswith(f"#{pid}")
    assert "startDate" not in item

    got = store.get_by_id(pid)
    assert got["id"] == pid
    assert got["createdAt"]
    for k in ("pk", "sk", "gsi1pk", "gsi1sk", "entityType", "proposalId"):
        assert k not in got


def test_create_requires_owner():
    with pytest.raises(ValueError):
        DynamoProposalStore(table=FakeTable()).create(_record(owner=""))


def test_get_by_id_missing_returns_none():
    store = DynamoProposalStore(table=FakeTable())
    assert store.get_by_id("proposal_nope") is None
    assert store.get_by_id("") is None


def test_list_by_owner_follows_pages_and_scopes_to_owner():
    table = FakeTable(page_size=2)
    store = DynamoProposalStore(table=table)
    mine = {store.create(_record()) for _ in range(5)}
    store.create(_record(owner="someone-else"))

    out = store.list_by_owner("owner-1")
    assert {r["id"] for r in out} == mine
    assert len(table.queries) == 3
    assert all(q["index_name"] == "GSI1" for q in table.queries)


def test_list_by_owner_keeps_paging_past_an_empty_page():
    table = FakeTable(page_size=2)
    table.leading_empty_page = True
    store = DynamoProposalStore(table=table)
    mine = {store.create(_record()) for _ in range(3)}

    out = store.list_by_owner("owner-1")
    assert {r["id"] for r in out} == mine
    assert table.queries[0]["exclusive_start_key"] is None
    assert len(table.queries) == 3


def test_update_status_is_conditional_on_draft():
    table = FakeTable()
    store = DynamoProposalStore(table=table)
    pid = store.create(_record())

    updated = store.update_status(pid, "accepted")
    assert updated["status"] == "accepted"
    assert updated["decidedAt"]

    with pytest.raises(InvalidTransitionError) as ei:
        store.update_status(pid, "rejected")
    assert ei.value.current_status == "accepted"
    assert store.get_by_id(pid)["status"] == "accepted"


def test_update_status_missing_record_is_not_found():
    store = DynamoProposalStore(table=FakeTable())
    with pytest.raises(ProposalNotFoundError):
        store.update_status("proposal_missing", "accepted")


def test_storage_failures_become_store_unavailable():
    table = FakeTable()
    table.fail_with = DdbThrottled(message="throttled", operation="GetItem", retryable=True)
    store = DynamoProposalStore(table=table)
    with pytest.raises(StoreUnavailableError) as ei:
        store.get_by_id("proposal_x")
    assert ei.value.operation == "get_by_id"
    assert ei.value.status_code == 503


def test_memory_store_has_same_conditional_semantics():
    store = InMemoryProposalStore()
    pid = store.create(_record())
    rec = store.get_by_id(pid)
    rec["status"] = "tampered"
    assert store.get_by_id(pid)["status"] == "draft"

    assert store.update_status(pid, "rejected")["status"] == "rejected"
    with pytest.raises(InvalidTransitionError):
        store.update_status(pid, "accepted")
    with pytest.raises(ProposalNotFoundError):
        store.update_status("proposal_missing", "accepted")


def test_conditional_check_failure_maps_to_conflict():
    err = map_botocore_error(
        operation="UpdateItem",
        table_name="t",
        key={"pk": "x"},
        exc=_client_error("ConditionalCheckFailedException"),
    )
    assert isinstance(err, DdbConflict)
    assert not err.retryable
    assert err.log_fields()["ddb_error"] == "conflict"
    assert err.log_fields()["table"] == "t"


def test_ddb_call_retries_throttling_then_succeeds(monkeypatch):
    monkeypatch.setattr("offerter.db.dynamodb.retry.time.sleep", lambda _s: None)
    calls = {"n": 0}

    def op():
        calls["n"] += 1
        if calls["n"] < 3:
            raise _client_error("ProvisionedThroughputExceededException")
        return "ok"

    assert ddb_call("GetItem", op, retry_policy=RetryPolicy(max_attempts=4)) == "ok"
    assert calls["n"] == 3


def test_ddb_call_does_not_retry_conflicts():
    calls = {"n": 0}

    def op():
        calls["n"] += 1
        raise _client_error("ConditionalCheckFailedException")

    with pytest.raises(DdbConflict):
        ddb_call("PutItem", op)
    assert calls["n"] == 1

