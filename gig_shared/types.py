"""
Shared types, enums, and constants.
"""
import os
from enum import Enum
from typing import Final, Literal

# Workflow source classifications
FileKind = Literal["json", "png", "unknown"]

# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Client / validation
    INVALID_INPUT = "INVALID_INPUT"
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"

    # Loading / parsing
    PNG_EXTRACTION_FAILED = "PNG_EXTRACTION_FAILED"
    JSON_PARSE_FAILED = "JSON_PARSE_FAILED"

    # Graph analysis
    EMPTY_REWRITTEN_GRAPH = "EMPTY_REWRITTEN_GRAPH"
    NO_CLASSIFIABLE_NODES = "NO_CLASSIFIABLE_NODES"

    # Submission preparation
    INVALID_PROMPT_NODE = "INVALID_PROMPT_NODE"
    INVALID_IMAGE_NODE = "INVALID_IMAGE_NODE"
    NO_OUTPUT_IMAGE = "NO_OUTPUT_IMAGE"
    SUBMISSION_NOT_READY = "SUBMISSION_NOT_READY"

# File extensions by kind
EXTENSIONS: Final[dict[FileKind, set[str]]] = {
    "json": {".json"},
    "png": {".png"},
    "unknown": set(),
}

def classify_file(filename: str) -> FileKind:
    """
    Classify a workflow file by extension (case-insensitive).

    Args:
        filename: File name or path

    Returns:
        File kind (json, png, unknown)
    """
    ext = os.path.splitext(filename or "")[1].lower()

    for kind, exts in EXTENSIONS.items():
        if ext in exts:
            return kind

    return "unknown"
