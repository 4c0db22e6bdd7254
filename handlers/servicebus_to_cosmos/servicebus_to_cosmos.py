from utils.cosmos_store import create_message_document
from utils.observability import emit_metric, get_logger, log_exception, log_json

logger = get_logger(__name__)

COMPONENT = "servicebus_to_cosmos"


def process_message(message) -> None:
    """Write one Service Bus message to Cosmos DB.

    Failures are logged and re-raised so the Functions host abandons the
    message and Service Bus redelivers it; success lets the host complete it.
    """
    if message is None:
        log_json(logger, "warning", "servicebus_no_message")
        return

    message_id = getattr(message, "message_id", None)
    log_json(logger, "info", "servicebus_message_processing", message_id=message_id)
    try:
        create_message_document(message)
    except Exception:
        emit_metric("MessageForwardFailure", 1, component=COMPONENT)
        log_exception(logger, "servicebus_message_failed", message_id=message_id)
        raise
    emit_metric("MessagesForwarded", 1, component=COMPONENT)
    log_json(logger, "info", "servicebus_message_processed", message_id=message_id)
