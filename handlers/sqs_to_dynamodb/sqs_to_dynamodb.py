from typing import Any, Dict, List

from utils.dynamodb_store import put_message
from utils.observability import emit_metric, get_logger, log_exception, log_json

logger = get_logger(__name__)

COMPONENT = "sqs_to_dynamodb"


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    records = event.get("Records") or []
    if not records:
        log_json(logger, "warning", "sqs_no_records")
        return {"batchItemFailures": []}

    log_json(logger, "info", "sqs_records_received", count=len(records))
    failures: List[Dict[str, str]] = []
    for record in records:
        message_id = record.get("messageId")
        log_json(logger, "info", "sqs_record_processing", message_id=message_id)
        try:
            put_message(record)
        except Exception:
            log_exception(logger, "sqs_record_failed", message_id=message_id)
            failures.append({"itemIdentifier": message_id})
            continue
        log_json(logger, "info", "sqs_record_processed", message_id=message_id)

    forwarded = len(records) - len(failures)
    emit_metric("MessagesForwarded", forwarded, component=COMPONENT)
    if failures:
        emit_metric("MessageForwardFailure", len(failures), component=COMPONENT)
    log_json(
        logger,
        "info",
        "sqs_records_completed",
        forwarded=forwarded,
        failed=len(failures),
    )
    return {"batchItemFailures": failures}
