"""
Bridge from the standard logging module to JsonLog.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from slog.levels import LogLevel
from slog.logger import JsonLog, LevelLike, Log
from slog.sinks import file_sink


def level_for(levelno: int) -> LogLevel:
    """Map a stdlib numeric level to a LogLevel"""
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARNING
    if levelno >= logging.INFO:
        return LogLevel.INFO
    if levelno >= logging.DEBUG:
        return LogLevel.DEBUG
    return LogLevel.TRACE


class JsonLogHandler(logging.Handler):
    """
    logging.Handler that forwards stdlib records to a JsonLog.

    Record fields:
    {
        "logger": "my_app.module",
        "msg": "User logged in",
        "context": {...},   # from logger.info(..., extra={'context': {...}})
        "error": {...},     # from exc_info
        "source": {...}     # DEBUG and below only
    }
    """

    def __init__(self, log: Log, level: int = logging.NOTSET):
        super().__init__(level)
        self.log = log

    def emit(self, record: logging.LogRecord) -> None:
        try:
            fields: Dict[str, Any] = {
                'logger': record.name,
                'msg': record.getMessage(),
            }

            context = getattr(record, 'context', None)
            if context:
                fields['context'] = context

            if record.exc_info and record.exc_info[1] is not None:
                fields['error'] = record.exc_info[1]

            if record.levelno <= logging.DEBUG:
                fields['source'] = {
                    'file': record.pathname,
                    'line': record.lineno,
                    'function': record.funcName
                }

            self.log.log(level_for(record.levelno), fields)
        except Exception:
            self.handleError(record)


def setup_logging(
    log: Log,
    name: Optional[str] = None,
    level: int = logging.INFO
) -> logging.Logger:
    """
    Route a stdlib logger through a JsonLog.

    Args:
        log: Target logger
        name: stdlib logger name (default: root logger)
        level: stdlib level for the logger and handler

    Returns:
        The configured stdlib logger

    Example:
        setup_logging(JsonLog(init={'service': 'api'}))
        logging.getLogger(__name__).info('started')
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Replace our own handler rather than stacking a second one
    for handler in list(logger.handlers):
        if isinstance(handler, JsonLogHandler):
            logger.removeHandler(handler)

    handler = JsonLogHandler(log, level)
    logger.addHandler(handler)
    return logger


def get_logger(
    name: str,
    level: Optional[LevelLike] = None,
    log_file: Optional[Union[str, Path]] = None
) -> JsonLog:
    """
    Get a JsonLog tagged with a logger name.

    Args:
        name: Logger name (typically __name__), stored as the "logger" field
        level: Minimum level (default: emit everything)
        log_file: Append records to this file instead of the console

    Returns:
        Configured JsonLog

    Example:
        log = get_logger(__name__)
        log.info('User action', {'user_id': 123})
    """
    func = file_sink(log_file) if log_file else None
    return JsonLog(level=level, init={'logger': name}, func=func)
