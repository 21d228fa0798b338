"""
Exceptions raised by slog.
"""

from typing import Any, Dict


class SlogError(Exception):
    """Base class for slog errors"""
    pass


class ConfigurationError(SlogError):
    """Invalid logger configuration (level, init or config file)"""

    def __init__(self, message: str, kind: str):
        super().__init__(message)
        self.kind = kind


class ArgumentError(SlogError):
    """Invalid argument passed to a logger operation"""
    pass


class AsyncSinkError(SlogError):
    """An asynchronous output function failed after log() returned"""

    def __init__(self, cause: BaseException, record: Dict[str, Any]):
        super().__init__(str(cause))
        self.cause = cause
        self.record = record
