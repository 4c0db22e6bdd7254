import json
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from boto3.dynamodb.types import TypeSerializer

from utils.aws_clients import get_dynamodb_client
from utils.message_body import body_text, flatten_body
from utils.observability import (
    elapsed_ms,
    get_logger,
    log_exception,
    log_json,
    message_fields,
)

logger = get_logger(__name__)

DEFAULT_TABLE_NAME = "SqsMessages"

_SERIALIZER = TypeSerializer()


def table_name_from_env() -> str:
    return os.environ.get("DYNAMODB_TABLE_NAME") or DEFAULT_TABLE_NAME


def to_attribute_value(value: Any) -> Dict[str, Any]:
    return _SERIALIZER.serialize(value)


def build_item(
    record: Dict[str, Any], now: Optional[datetime] = None
) -> Dict[str, Dict[str, Any]]:
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    raw_body = body_text(record.get("body"))
    item = {
        "MessageId": {"S": record.get("messageId") or ""},
        "ReceiptHandle": {"S": record.get("receiptHandle") or ""},
        "Body": {"S": raw_body},
        "Md5OfBody": {"S": record.get("md5OfBody") or ""},
        "Timestamp": {"S": timestamp},
    }

    message_attributes = record.get("messageAttributes")
    if message_attributes:
        item["MessageAttributes"] = {
            "S": json.dumps(message_attributes, default=str)
        }

    item.update(flatten_body(record.get("body"), to_attribute=to_attribute_value))
    return item


def put_message(
    record: Dict[str, Any],
    *,
    table_name: Optional[str] = None,
    client=None,
) -> Dict[str, Any]:
    table = table_name or table_name_from_env()
    dynamodb = client or get_dynamodb_client()
    fields = message_fields(record.get("messageId"), "dynamodb", table=table)
    item = build_item(record)
    put_start = time.time()
    try:
        dynamodb.put_item(TableName=table, Item=item)
    except Exception:
        log_exception(
            logger,
            "dynamodb_put_failed",
            duration_ms=elapsed_ms(put_start),
            **fields,
        )
        raise
    log_json(
        logger,
        "info",
        "dynamodb_put_ok",
        duration_ms=elapsed_ms(put_start),
        attribute_count=len(item),
        **fields,
    )
    return item
