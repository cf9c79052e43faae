"""
Logging utilities with consistent formatting and emoji indicators.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Final

# Emoji indicators for log levels
EMOJI_MAP: Final[dict[str, str]] = {
    "DEBUG": "🔍",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "CRITICAL": "🔥",
    "SUCCESS": "✅",
}

# Global logger prefix
PREFIX: Final[str] = "🎨 GIG"


class EmojiFormatter(logging.Formatter):
    """Custom formatter that adds emoji based on log level."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a single line with a prefix and emoji."""
        emoji = EMOJI_MAP.get(record.levelname, "🎨")

        # Format: 🎨 GIG [✅] module: message
        log_format = f"{PREFIX} [{emoji}] %(name)s: %(message)s"
        formatter = logging.Formatter(log_format)
        return formatter.format(record)


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get a logger with the GIG prefix and emoji indicators.

    Args:
        name: Logger name (usually __name__)
        level: Optional logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured logger instance with emoji formatting
    """
    # Clean name (drop the package prefix if present)
    if name.startswith("__main__"):
        name = "main"
    elif "." in name:
        parts = name.split(".")
        if "features" in parts:
            idx = parts.index("features")
            name = ".".join(parts[idx + 1:])
        elif parts[0] in ("gig_backend", "gig_shared"):
            name = ".".join(parts[1:])

    logger = logging.getLogger(f"gig.{name}")

    if level is not None:
        logger.setLevel(level)
    elif not logger.handlers:
        # Default to INFO if not configured
        logger.setLevel(logging.INFO)

    # Add console handler if none exists
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(EmojiFormatter())
        logger.addHandler(handler)

        # Prevent propagation to avoid duplicate logs
        logger.propagate = False

    return logger

# Add SUCCESS level
SUCCESS_LEVEL: Final[int] = 25  # Between INFO (20) and WARNING (30)
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

def log_success(logger: logging.Logger, message: str) -> None:
    """
    Log a success message with ✅ emoji.

    Args:
        logger: Logger instance
        message: Success message
    """
    logger.log(SUCCESS_LEVEL, message)

def log_structured(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Emit a structured JSON log entry with contextual fields."""
    payload = {
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "context": context,
    }
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))
