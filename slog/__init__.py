"""
slog: Minimal structured JSON logging

Merges contextual fields inherited from a logger with each message, filters
by minimum level and writes one JSON line per record to the console or a
custom (sync or async) output function.
"""

__version__ = '1.0.0'

from slog.errors import ArgumentError, AsyncSinkError, ConfigurationError, SlogError
from slog.handler import JsonLogHandler, get_logger, setup_logging
from slog.levels import LEVEL_RANKS, LogLevel
from slog.logger import JsonLog, Log, LoggerConfig
from slog.record import build_record, validate_record
from slog.serializer import safe_dumps
from slog.sinks import console_sink, file_sink

__all__ = [
    'ArgumentError',
    'AsyncSinkError',
    'ConfigurationError',
    'JsonLog',
    'JsonLogHandler',
    'LEVEL_RANKS',
    'Log',
    'LogLevel',
    'LoggerConfig',
    'SlogError',
    'build_record',
    'console_sink',
    'file_sink',
    'get_logger',
    'safe_dumps',
    'setup_logging',
    'validate_record',
]
