"""
JsonLog: structured logger that writes one JSON line per record.
"""

import asyncio
import concurrent.futures
import inspect
import logging
import threading
from dataclasses import dataclass, field
from functools import partial
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Protocol, Set, Union

from slog.errors import ArgumentError, AsyncSinkError, ConfigurationError
from slog.levels import LEVEL_NAMES, LogLevel, is_enabled, parse_level
from slog.record import Message, build_record, now_ms
from slog.serializer import format_stack, safe_dumps
from slog.sinks import console_sink

_log = logging.getLogger(__name__)

Sink = Callable[[str], Any]
LevelLike = Union[str, LogLevel]

# Strong references to in-flight sink tasks until they finish
_pending: Set[asyncio.Future] = set()


class Log(Protocol):
    """Interface shared by slog loggers"""

    def child(self, fields: Mapping[str, Any]) -> 'Log': ...
    def prefix(self, fields: Mapping[str, Any]) -> 'Log': ...
    def trace(self, msg: Message = None, *args: Any) -> None: ...
    def debug(self, msg: Message = None, *args: Any) -> None: ...
    def info(self, msg: Message = None, *args: Any) -> None: ...
    def warn(self, msg: Message = None, *args: Any) -> None: ...
    def error(self, msg: Message = None, *args: Any) -> None: ...
    def log(self, level: LevelLike, msg: Message = None, *args: Any) -> None: ...


@dataclass(frozen=True)
class LoggerConfig:
    """Effective configuration of a JsonLog"""
    level: Optional[LogLevel] = None
    init: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    func: Optional[Sink] = None
    throw_on_error: bool = False


class JsonLog:
    """
    Structured logger writing JSON records to the console or a custom function.

    Output format (one line per call):
    {"ts": 1760832000123, "level": "INFO", "msg": "User logged in", ...fields}

    Loggers are immutable. child()/prefix() return a new logger whose
    inherited fields are this logger's fields overlaid by the given ones.

    Example:
        log = JsonLog(level='DEBUG', init={'service': 'api'})
        req_log = log.child({'request_id': 'abc123'})
        req_log.info('handled', {'status': 200})
    """

    def __init__(
        self,
        level: Optional[LevelLike] = None,
        init: Optional[Mapping[str, Any]] = None,
        func: Optional[Sink] = None,
        throw_on_error: bool = False
    ):
        """
        Args:
            level: Minimum level to emit (default: emit everything). An
                unknown level falls back to INFO unless throw_on_error is set.
            init: Fields added to every record
            func: Output function receiving the JSON line; may return an
                awaitable, which is scheduled and not waited for
            throw_on_error: Raise ConfigurationError for an unknown level

        Raises:
            ConfigurationError: Unknown level with throw_on_error, or init /
                func of the wrong type
        """
        effective = None
        if level is not None:
            effective = parse_level(level)
            if effective is None:
                if throw_on_error:
                    raise ConfigurationError(
                        f'Invalid level: {level!r}. Must be one of {list(LEVEL_NAMES)}',
                        kind='level'
                    )
                effective = LogLevel.INFO

        if init is not None and not isinstance(init, Mapping):
            raise ConfigurationError(
                f'init must be a mapping, got {type(init).__name__}',
                kind='init'
            )

        if func is not None and not callable(func):
            raise ConfigurationError(
                f'func must be callable, got {type(func).__name__}',
                kind='func'
            )

        self.config = LoggerConfig(
            level=effective,
            init=MappingProxyType(dict(init or {})),
            func=func,
            throw_on_error=bool(throw_on_error)
        )

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> 'JsonLog':
        """
        Build a logger from an options mapping.

        Recognized keys: level, init (or prefix), func, throw_on_error (or
        throwOnError). Other keys are ignored.
        """
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise ConfigurationError(
                f'options must be a mapping, got {type(options).__name__}',
                kind='options'
            )

        init = options.get('init')
        if init is None:
            init = options.get('prefix')

        throw_on_error = options.get('throw_on_error', options.get('throwOnError', False))

        return cls(
            level=options.get('level'),
            init=init,
            func=options.get('func'),
            throw_on_error=bool(throw_on_error)
        )

    @property
    def level(self) -> Optional[LogLevel]:
        return self.config.level

    @property
    def fields(self) -> Mapping[str, Any]:
        return self.config.init

    def child(self, fields: Mapping[str, Any]) -> 'JsonLog':
        """
        Derive a logger with additional inherited fields.

        Args:
            fields: Fields overlaid on this logger's fields (shallow, caller wins)

        Returns:
            New logger with the same level, func and throw_on_error

        Raises:
            ArgumentError: fields is None or not a mapping
        """
        if fields is None:
            raise ArgumentError('child() requires a fields mapping')
        if not isinstance(fields, Mapping):
            raise ArgumentError(f'child() fields must be a mapping, got {type(fields).__name__}')

        return type(self)(
            level=self.config.level,
            init={**self.config.init, **fields},
            func=self.config.func,
            throw_on_error=self.config.throw_on_error
        )

    def prefix(self, fields: Mapping[str, Any]) -> 'JsonLog':
        """Alias for child()"""
        return self.child(fields)

    def trace(self, msg: Message = None, *args: Any) -> None:
        self.log(LogLevel.TRACE, msg, *args)

    def debug(self, msg: Message = None, *args: Any) -> None:
        self.log(LogLevel.DEBUG, msg, *args)

    def info(self, msg: Message = None, *args: Any) -> None:
        self.log(LogLevel.INFO, msg, *args)

    def warn(self, msg: Message = None, *args: Any) -> None:
        self.log(LogLevel.WARNING, msg, *args)

    warning = warn

    def error(self, msg: Message = None, *args: Any) -> None:
        self.log(LogLevel.ERROR, msg, *args)

    def log(self, level: LevelLike, msg: Message = None, *args: Any) -> None:
        """
        Emit one record.

        Records below the configured level are dropped without being built.
        Exceptions raised synchronously by func propagate; failures of an
        awaitable returned by func are reported on the console instead.
        An awaitable returned while no event loop is running in this thread
        is run to completion on a new daemon thread, one per call.

        Args:
            level: Record level
            msg: String (stored as "msg"), mapping of fields, or None
            *args: Extra values stored in order under "args"
        """
        resolved = parse_level(level)
        if resolved is None:
            if self.config.throw_on_error:
                raise ArgumentError(f'Invalid level: {level!r}. Must be one of {list(LEVEL_NAMES)}')
            resolved = LogLevel.INFO

        if not is_enabled(resolved, self.config.level):
            return

        record = build_record(resolved, msg, args, self.config.init)
        line = safe_dumps(record)

        if self.config.func is None:
            console_sink(line)
            return

        result = self.config.func(line)
        if _is_pending(result):
            _watch(result, record)

    def __repr__(self) -> str:
        level = self.config.level.value if self.config.level else None
        return f'JsonLog(level={level!r}, fields={dict(self.config.init)!r})'


def _is_pending(result: Any) -> bool:
    return isinstance(result, concurrent.futures.Future) or inspect.isawaitable(result)


def _watch(result: Any, record: dict) -> None:
    """Attach failure reporting to a sink result without waiting for it"""
    if isinstance(result, concurrent.futures.Future) or asyncio.isfuture(result):
        result.add_done_callback(partial(_on_done, record))
        return

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is not None:
        task = asyncio.ensure_future(result)
        _pending.add(task)
        task.add_done_callback(_pending.discard)
        task.add_done_callback(partial(_on_done, record))
        return

    # No loop in this thread: drive the awaitable on its own
    threading.Thread(target=_drive, args=(result, record), daemon=True).start()


async def _await(awaitable: Any) -> Any:
    return await awaitable


def _drive(awaitable: Any, record: dict) -> None:
    try:
        asyncio.run(_await(awaitable))
    except asyncio.CancelledError:
        return
    except Exception as e:
        report_async_failure(AsyncSinkError(e, record))


def _on_done(record: dict, future: Any) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        report_async_failure(AsyncSinkError(exc, record))


def report_async_failure(error: AsyncSinkError) -> None:
    """
    Write an ERROR record describing a failed async sink to the console.

    Never raises: if the console sink fails as well the failure is only
    logged at debug level.
    """
    record = {
        'ts': now_ms(),
        'level': LogLevel.ERROR.value,
        'msg': 'async func error',
        'error': str(error.cause),
        'stack': format_stack(error.cause),
        'source': error.record,
    }
    try:
        console_sink(safe_dumps(record))
    except Exception:
        _log.debug('Console sink failed while reporting %r', error, exc_info=True)
