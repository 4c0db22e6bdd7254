import json
import math
import time
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from utils.azure_clients import get_cosmos_container
from utils.message_body import body_text, flatten_body
from utils.observability import (
    elapsed_ms,
    get_logger,
    log_exception,
    log_json,
    message_fields,
)

logger = get_logger(__name__)

MAX_INT_DIGITS = 19


def to_document_value(value: Any) -> Any:
    # the Cosmos SDK serializes with the json module, which rejects Decimal
    if isinstance(value, Decimal):
        if value.adjusted() < MAX_INT_DIGITS and value == value.to_integral_value():
            return int(value)
        as_float = float(value)
        if math.isfinite(as_float):
            return as_float
        return str(value)
    return value


def _application_properties(message) -> Optional[Dict[str, Any]]:
    properties = getattr(message, "application_properties", None)
    if not properties:
        properties = getattr(message, "user_properties", None)
    return properties or None


def build_document(message, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Build the Cosmos DB document for one Service Bus message.

    Metadata goes under fixed field names, the raw body under ``Body`` and,
    when the body parses as JSON, its flattened leaves under ``BodyJson.*``.
    """
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    raw = message.get_body()
    message_id = getattr(message, "message_id", None) or ""
    time_to_live = getattr(message, "time_to_live", None)
    document = {
        "id": message_id or str(uuid.uuid4()),
        "MessageId": message_id,
        "Body": body_text(raw),
        "ContentType": getattr(message, "content_type", None) or "",
        "CorrelationId": getattr(message, "correlation_id", None) or "",
        "Label": getattr(message, "label", None) or "",
        "TimeToLive": time_to_live.total_seconds() if time_to_live else 0.0,
        "Timestamp": timestamp,
    }

    properties = _application_properties(message)
    if properties:
        document["ApplicationProperties"] = json.dumps(properties, default=str)

    document.update(flatten_body(raw, to_attribute=to_document_value))
    return document


def create_message_document(message, *, container=None) -> Dict[str, Any]:
    target = container or get_cosmos_container()
    document = build_document(message)
    fields = message_fields(document["MessageId"], "cosmos", document_id=document["id"])
    create_start = time.time()
    try:
        target.create_item(body=document)
    except Exception:
        log_exception(
            logger,
            "cosmos_create_failed",
            duration_ms=elapsed_ms(create_start),
            **fields,
        )
        raise
    log_json(
        logger,
        "info",
        "cosmos_create_ok",
        duration_ms=elapsed_ms(create_start),
        field_count=len(document),
        **fields,
    )
    return document
