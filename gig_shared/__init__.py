"""Shared utilities for the Gemini Image GUI workflow core."""
from .errors import sanitize_error_message
from .log import get_logger, log_structured, log_success
from .result import Result
from .time import now, timer
from .types import ErrorCode, FileKind, classify_file

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "log_structured",
    "now",
    "timer",
    "FileKind",
    "ErrorCode",
    "classify_file",
    "sanitize_error_message",
]
