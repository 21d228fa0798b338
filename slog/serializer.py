"""
Safe JSON serialization for log records.

Exceptions are rendered as {"name", "message", "stack"} and reference cycles
are replaced with "[Circular]". safe_dumps() returns a string for any input.
"""

import json
import traceback
from typing import Any, Dict, Mapping, Set

CIRCULAR = '[Circular]'
UNSERIALIZABLE = '[Unserializable]'


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return f'<unprintable {type(value).__name__}>'


def format_stack(exc: BaseException) -> str:
    """Traceback text for an exception (header line only if never raised)"""
    return ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def error_to_dict(exc: BaseException) -> Dict[str, str]:
    """Render an exception as a plain JSON object"""
    return {
        'name': type(exc).__name__,
        'message': _safe_str(exc),
        'stack': format_stack(exc),
    }


def _default(value: Any) -> Any:
    # json.dumps hook for values it cannot encode natively
    if isinstance(value, BaseException):
        return error_to_dict(value)
    if isinstance(value, Mapping):
        return dict(value)
    return _safe_str(value)


def _key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, (bool, int, float)):
        return json.dumps(key)
    return _safe_str(key)


def _sanitize(value: Any, ancestors: Set[int]) -> Any:
    """Copy `value` into plain JSON types, cutting cycles along the current path"""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, BaseException):
        return error_to_dict(value)
    if not isinstance(value, (Mapping, list, tuple)):
        return _safe_str(value)

    marker = id(value)
    if marker in ancestors:
        return CIRCULAR
    ancestors.add(marker)
    try:
        if isinstance(value, Mapping):
            return {_key(k): _sanitize(v, ancestors) for k, v in value.items()}
        return [_sanitize(item, ancestors) for item in value]
    finally:
        ancestors.discard(marker)


def _fallback(obj: Any) -> Any:
    """Keep top-level scalars of a mapping, replace everything else"""
    if not isinstance(obj, Mapping):
        return UNSERIALIZABLE
    scalars = (str, int, float, bool, type(None))
    return {
        _key(k): v if isinstance(v, scalars) else UNSERIALIZABLE
        for k, v in obj.items()
    }


def safe_dumps(obj: Any) -> str:
    """
    Serialize a record to JSON without raising.

    The fast path hands the value straight to json.dumps. If that fails
    (reference cycle, unencodable keys, nesting too deep) the value is copied
    with cycle detection and serialized again. Values that still cannot be
    encoded are replaced with "[Unserializable]".

    Args:
        obj: Value to serialize, usually a record dict

    Returns:
        JSON text
    """
    try:
        return json.dumps(obj, default=_default)
    except (ValueError, TypeError, RecursionError):
        pass

    try:
        return json.dumps(_sanitize(obj, set()), default=_default)
    except (ValueError, TypeError, RecursionError):
        return json.dumps(_fallback(obj))
