from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .client import table_resource
from .errors import DdbInternal
from .retry import ddb_call


@dataclass(slots=True)
class Page:
    items: list[dict[str, Any]]
    last_evaluated_key: dict[str, Any] | None


class DynamoTable:
    def __init__(self, *, table_name: str):
        self.table_name = str(table_name)
        self._table = table_resource(self.table_name)

    def get_item(self, *, key: dict[str, Any], consistent_read: bool = False) -> dict[str, Any] | None:
        def _op():
            resp = self._table.get_item(Key=key, ConsistentRead=bool(consistent_read))
            return resp.get("Item")

        return ddb_call("GetItem", _op, table_name=self.table_name, key=key)

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        def _op():
            kwargs: dict[str, Any] = {"Item": item}
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression
            if expression_attribute_names:
                kwargs["ExpressionAttributeNames"] = expression_attribute_names
            if expression_attribute_values:
                kwargs["ExpressionAttributeValues"] = expression_attribute_values
            return self._table.put_item(**kwargs)

        return ddb_call("PutItem", _op, table_name=self.table_name)

    def update_item(
        self,
        *,
        key: dict[str, Any],
        update_expression: str,
        expression_attribute_names: dict[str, str] | None,
        expression_attribute_values: dict[str, Any],
        condition_expression: str | None = None,
        return_values: str = "ALL_NEW",
    ) -> dict[str, Any] | None:
        def _op():
            kwargs: dict[str, Any] = {
                "Key": key,
                "UpdateExpression": update_expression,
                "ExpressionAttributeValues": expression_attribute_values,
                "ReturnValues": return_values,
            }
            if expression_attribute_names:
                kwargs["ExpressionAttributeNames"] = expression_attribute_names
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression
            resp = self._table.update_item(**kwargs)
            return resp.get("Attributes")

        return ddb_call("UpdateItem", _op, table_name=self.table_name, key=key)

    def query_page(
        self,
        *,
        key_condition_expression: Any,
        index_name: str | None = None,
        limit: int = 100,
        scan_index_forward: bool = False,
        exclusive_start_key: dict[str, Any] | None = None,
    ) -> Page:
        lim = max(1, min(500, int(limit or 100)))

        def _op():
            kwargs: dict[str, Any] = {
                "KeyConditionExpression": key_condition_expression,
                "ScanIndexForward": bool(scan_index_forward),
                "Limit": lim,
            }
            if index_name:
                kwargs["IndexName"] = index_name
            # ExclusiveStartKey must be omitted entirely on the first page.
            if exclusive_start_key:
                kwargs["ExclusiveStartKey"] = exclusive_start_key
            return self._table.query(**kwargs)

        resp = ddb_call("Query", _op, table_name=self.table_name)
        return Page(
            items=resp.get("Items") or [],
            last_evaluated_key=resp.get("LastEvaluatedKey") or None,
        )


def get_main_table() -> DynamoTable:
    from ...settings import settings

    if not settings.ddb_table_name:
        raise DdbInternal(message="DDB_TABLE_NAME is not set", operation="Config")
    return DynamoTable(table_name=settings.ddb_table_name)
