"""
Configuration for the workflow core.

Values are read from the environment on every call so tests and long-lived
callers pick up changes without reloading the module.
"""
import logging
import os

from .utils import env_bool

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKFLOW_BYTES = 10 * 1024 * 1024  # 10MB
MIN_WORKFLOW_BYTES = 1024
DEFAULT_PROMPT_LABEL_MAX_CHARS = 50


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        if not name:
            continue
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_int(default: int, *names: str, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_bool(default: bool, *names: str) -> bool:
    for name in names:
        if name and name in os.environ:
            return env_bool(name, default)
    return default


def current_max_workflow_bytes() -> int:
    return _env_int(DEFAULT_MAX_WORKFLOW_BYTES, "GIG_MAX_WORKFLOW_BYTES", min_value=MIN_WORKFLOW_BYTES)


def current_prompt_label_max_chars() -> int:
    return _env_int(DEFAULT_PROMPT_LABEL_MAX_CHARS, "GIG_PROMPT_LABEL_MAX_CHARS", min_value=1)


def current_png_pillow_fallback() -> bool:
    return _env_bool(True, "GIG_PNG_PILLOW_FALLBACK")

