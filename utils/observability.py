import json
import logging
import os
import time
from typing import Any, Dict, Optional

METRIC_NAMESPACE = "MessageForwarder"
SERVICE_NAME = "message-forwarder"


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())
    return logger


def log_json(logger: logging.Logger, level: str, msg: str, **fields: Any) -> None:
    payload = {"msg": msg, **fields}
    if level.lower() == "exception":
        logger.exception(json.dumps(payload, default=str))
        return
    level_value = logging._nameToLevel.get(level.upper(), logging.INFO)
    logger.log(level_value, json.dumps(payload, default=str))


def log_exception(logger: logging.Logger, msg: str, **fields: Any) -> None:
    log_json(logger, "exception", msg, **fields)


def message_fields(message_id: Optional[str], store: str, **extra: Any) -> Dict[str, Any]:
    # common fields for every per-message log line
    return {"message_id": message_id, "store": store, **extra}


def emit_metric(
    name: str,
    value: float = 1,
    unit: str = "Count",
    component: Optional[str] = None,
    dims: Optional[Dict[str, str]] = None,
) -> None:
    dimensions = {"Service": SERVICE_NAME}
    if component:
        dimensions["Component"] = component
    stage = os.environ.get("STAGE")
    if stage:
        dimensions["Stage"] = stage
    if dims:
        dimensions.update(dims)
    metric = {
        "_aws": {
            "Timestamp": int(time.time() * 1000),
            "CloudWatchMetrics": [
                {
                    "Namespace": METRIC_NAMESPACE,
                    "Dimensions": [list(dimensions.keys())],
                    "Metrics": [{"Name": name, "Unit": unit}],
                }
            ],
        },
        **dimensions,
        name: value,
    }
    print(json.dumps(metric))


def elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)
