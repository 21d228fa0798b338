"""
Record construction: reserved fields, inherited fields, message and args.
"""

import json
import time
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from slog.levels import LEVEL_NAMES, LogLevel

RESERVED_KEYS = frozenset(['ts', 'level'])

Message = Union[str, Mapping[str, Any], None]


def now_ms() -> int:
    """Current time in milliseconds since the epoch"""
    return int(time.time() * 1000)


def strip_reserved(fields: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Copy of `fields` without the reserved keys"""
    if not fields:
        return {}
    return {k: v for k, v in fields.items() if k not in RESERVED_KEYS}


def message_fields(msg: Message) -> Dict[str, Any]:
    """
    Fields contributed by a log message.

    A mapping contributes its keys (reserved keys dropped), a string becomes
    {"msg": ...} and anything else contributes nothing.
    """
    if isinstance(msg, Mapping):
        return strip_reserved(msg)
    if isinstance(msg, str):
        return {'msg': msg}
    return {}


def build_record(
    level: LogLevel,
    msg: Message,
    args: Sequence[Any] = (),
    init: Optional[Mapping[str, Any]] = None,
    ts: Optional[int] = None
) -> Dict[str, Any]:
    """
    Build the flat record for one log call.

    Later sources win on key collision: inherited fields, then message
    fields, then args. `ts` and `level` are always the logger's own values.

    Args:
        level: Level of the call
        msg: String, mapping or None
        args: Extra positional arguments; stored under "args" only if non-empty
        init: Fields inherited from the logger
        ts: Timestamp in ms (default: now)

    Returns:
        Record dict ready for serialization
    """
    record: Dict[str, Any] = {
        'ts': now_ms() if ts is None else ts,
        'level': level.value,
    }
    record.update(strip_reserved(init))
    record.update(message_fields(msg))
    if args:
        record['args'] = list(args)
    return record


def validate_record(line: str) -> bool:
    """
    Validate that a line is a well-formed slog record.

    Args:
        line: One line of output

    Returns:
        True if it is a JSON object with an integer "ts" and a known "level"
    """
    try:
        data = json.loads(line)
    except (json.JSONDecodeError, TypeError):
        return False

    if not isinstance(data, dict):
        return False

    ts = data.get('ts')
    if not isinstance(ts, int) or isinstance(ts, bool):
        return False

    return data.get('level') in LEVEL_NAMES
