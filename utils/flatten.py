import json
import os
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from utils.observability import get_logger, log_json

logger = get_logger(__name__)

FlatValue = Union[str, Decimal, bool, None]

DEFAULT_MAX_DEPTH = 64


def _max_depth_from_env() -> int:
    raw = os.environ.get("FLATTEN_MAX_DEPTH")
    if not raw:
        return DEFAULT_MAX_DEPTH
    try:
        return int(raw)
    except ValueError:
        log_json(logger, "warning", "flatten_max_depth_invalid", value=raw)
        return DEFAULT_MAX_DEPTH


def _number(value: Union[int, float, Decimal]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _encode_scalar(value: Any) -> str:
    if value is None or isinstance(value, (bool, str)):
        return json.dumps(value)
    if isinstance(value, (int, float, Decimal)):
        return str(_number(value))
    raise TypeError(f"Unsupported JSON value type: {type(value).__name__}")


def encode_json(value: Any) -> str:
    """Serialize a parsed JSON value back to compact JSON text.

    Decimals are written in their literal form, so numbers parsed with
    ``parse_float=Decimal`` survive unchanged. Iterative, so nesting depth is
    not limited by the interpreter stack.
    """
    chunks: List[str] = []
    pending: List[Tuple[bool, Any]] = [(False, value)]
    while pending:
        is_text, item = pending.pop()
        if is_text:
            chunks.append(item)
        elif isinstance(item, dict):
            pending.append((True, "}"))
            entries = list(item.items())
            for index in range(len(entries) - 1, -1, -1):
                key, child = entries[index]
                pending.append((False, child))
                key_text = json.dumps(str(key)) + ":"
                pending.append((True, key_text if index == 0 else "," + key_text))
            pending.append((True, "{"))
        elif isinstance(item, list):
            pending.append((True, "]"))
            for index in range(len(item) - 1, -1, -1):
                pending.append((False, item[index]))
                if index:
                    pending.append((True, ","))
            pending.append((True, "["))
        else:
            chunks.append(_encode_scalar(item))
    return "".join(chunks)


def _identity(value: FlatValue) -> Any:
    return value


def flatten(
    value: Any,
    prefix: str,
    to_attribute: Optional[Callable[[FlatValue], Any]] = None,
    max_depth: Optional[int] = None,
) -> Dict[str, Any]:
    """Flatten a parsed JSON value into ``{dotted.path: value}``.

    Objects are walked depth-first in key order and contribute no entry of
    their own. Arrays are terminal and stored as one compact JSON string.
    Scalars map to ``str``, ``Decimal``, ``bool`` or ``None`` and are passed
    through ``to_attribute`` when given, so each store can wrap them in its
    native attribute type. Objects nested deeper than ``max_depth`` are
    serialized like arrays.
    """
    if not prefix:
        raise ValueError("prefix must be a non-empty string")
    convert = to_attribute or _identity
    limit = _max_depth_from_env() if max_depth is None else max_depth
    attributes: Dict[str, Any] = {}
    _walk(value, prefix, 0, limit, convert, attributes)
    return attributes


def _emit(attributes: Dict[str, Any], path: str, value: Any) -> None:
    # first writer wins; a dotted key can shadow a nested path
    if path in attributes:
        log_json(logger, "warning", "flatten_path_collision", path=path)
        return
    attributes[path] = value


def _walk(
    node: Any,
    path: str,
    depth: int,
    max_depth: int,
    convert: Callable[[FlatValue], Any],
    attributes: Dict[str, Any],
) -> None:
    if isinstance(node, dict):
        if depth >= max_depth:
            _emit(attributes, path, convert(encode_json(node)))
            return
        for key, child in node.items():
            _walk(child, f"{path}.{key}", depth + 1, max_depth, convert, attributes)
    elif isinstance(node, list):
        _emit(attributes, path, convert(encode_json(node)))
    elif node is None or isinstance(node, (str, bool)):
        _emit(attributes, path, convert(node))
    elif isinstance(node, (int, float, Decimal)):
        _emit(attributes, path, convert(_number(node)))
    else:
        raise TypeError(f"Unsupported JSON value type: {type(node).__name__}")
