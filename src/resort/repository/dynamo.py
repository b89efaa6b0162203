from decimal import Decimal
from typing import Iterator, List

from botocore.exceptions import ClientError


def to_decimal(value) -> Decimal:
    return Decimal(str(value))


def conditional_check_failures(err: ClientError) -> List[int]:
    """Indexes of transaction items whose condition failed."""
    error = err.response.get("Error", {})
    if error.get("Code") == "ConditionalCheckFailedException":
        return [0]
    if error.get("Code") != "TransactionCanceledException":
        return []
    reasons = err.response.get("CancellationReasons", [])
    return [
        index
        for index, reason in enumerate(reasons)
        if reason.get("Code") == "ConditionalCheckFailed"
    ]


def scan_all(table, **kwargs) -> Iterator[dict]:
    resp = table.scan(**kwargs)
    yield from resp.get("Items", [])
    while "LastEvaluatedKey" in resp:
        resp = table.scan(ExclusiveStartKey=resp["LastEvaluatedKey"], **kwargs)
        yield from resp.get("Items", [])


def query_all(table, **kwargs) -> Iterator[dict]:
    resp = table.query(**kwargs)
    yield from resp.get("Items", [])
    while "LastEvaluatedKey" in resp:
        resp = table.query(ExclusiveStartKey=resp["LastEvaluatedKey"], **kwargs)
        yield from resp.get("Items", [])
