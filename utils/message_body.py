import json
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Union

from utils.flatten import FlatValue, flatten
from utils.observability import get_logger, log_json

logger = get_logger(__name__)

BODY_JSON_PREFIX = "BodyJson"


class InvalidJsonBody(ValueError):
    pass


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def body_text(body: Union[str, bytes, None]) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def parse_json_body(body: Union[str, bytes]) -> Any:
    try:
        text = body.decode("utf-8") if isinstance(body, bytes) else body
        return json.loads(
            text,
            parse_float=Decimal,
            parse_int=Decimal,
            parse_constant=_reject_constant,
        )
    except (ValueError, TypeError, RecursionError) as exc:
        raise InvalidJsonBody(str(exc)) from exc


def flatten_body(
    body: Union[str, bytes, None],
    prefix: str = BODY_JSON_PREFIX,
    to_attribute: Optional[Callable[[FlatValue], Any]] = None,
) -> Dict[str, Any]:
    if body is None:
        log_json(logger, "info", "message_body_not_json", reason="empty body")
        return {}
    try:
        payload = parse_json_body(body)
    except InvalidJsonBody as exc:
        log_json(logger, "info", "message_body_not_json", reason=str(exc))
        return {}
    return flatten(payload, prefix, to_attribute)
