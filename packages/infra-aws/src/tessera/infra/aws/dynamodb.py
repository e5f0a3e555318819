"""DynamoDB helpers shared by the tenant and registration repositories.

- Numeric conversion at the boundary: DynamoDB rejects ``float`` and
  returns ``Decimal``; callers only ever see ``int``/``float``.
- ``SET`` update expressions with placeholder names and values, so
  caller-supplied attribute names never collide with reserved words.
- Page-at-a-time scans with an opaque continuation token.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from botocore.exceptions import ClientError

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def to_dynamo(value: Any) -> Any:
    """Convert a JSON-like value into something the DynamoDB resource accepts."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, Mapping):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    """Convert a value read from DynamoDB back into plain JSON types."""
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, Mapping):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [from_dynamo(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted(from_dynamo(v) for v in value)
    return value


def build_update_expression(
    attributes: Mapping[str, Any],
) -> tuple[str, dict[str, str], dict[str, Any]]:
    """Build a ``SET`` expression assigning every attribute.

    Returns:
        ``(update_expression, expression_attribute_names, expression_attribute_values)``

    Raises:
        ValueError: If ``attributes`` is empty.

    Example:
        >>> build_update_expression({"tenantId": "t-1"})
        ('SET #f0 = :v0', {'#f0': 'tenantId'}, {':v0': 't-1'})
    """
    if not attributes:
        msg = "At least one attribute is required for an update"
        raise ValueError(msg)

    names: dict[str, str] = {}
    values: dict[str, Any] = {}
    assignments: list[str] = []
    for idx, (name, value) in enumerate(attributes.items()):
        names[f"#f{idx}"] = name
        values[f":v{idx}"] = to_dynamo(value)
        assignments.append(f"#f{idx} = :v{idx}")
    return "SET " + ", ".join(assignments), names, values


def is_conditional_check_failure(exc: ClientError) -> bool:
    """True when a conditional write was rejected by its precondition."""
    return exc.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED


def scan_page(
    table: Any,
    key_name: str,
    *,
    limit: int,
    next_token: str | None = None,
) -> tuple[list[dict[str, Any]], str | None]:
    """Read one page of an unordered table scan.

    The continuation token is the partition key of the last evaluated
    item, so it only works for tables with a single-attribute key.

    Returns:
        ``(items, next_token)``; ``next_token`` is ``None`` on the last page.
    """
    kwargs: dict[str, Any] = {"Limit": limit}
    if next_token:
        kwargs["ExclusiveStartKey"] = {key_name: next_token}
    response = table.scan(**kwargs)
    items = [from_dynamo(item) for item in response.get("Items", [])]
    last_key = response.get("LastEvaluatedKey") or {}
    return items, last_key.get(key_name)


def table_health_check(table: Any) -> Any:
    """Return a blocking check that fails when ``table`` is unreachable."""

    def check() -> None:
        table.meta.client.describe_table(TableName=table.name)

    return check
