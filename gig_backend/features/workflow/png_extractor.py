"""
Locate a ComfyUI workflow embedded in PNG text metadata.

ComfyUI's image exporter writes the editor graph under ``workflow`` and the
API graph under ``prompt`` as ``tEXt`` chunks. The manual chunk walk finds
those directly; Pillow is used as a fallback reader for anything the walk
misses (``iTXt``/``zTXt`` or unusual layouts).
"""

from __future__ import annotations

import io
import struct
from typing import Optional

from PIL import Image

from gig_shared import get_logger

from ...config import current_png_pillow_fallback

logger = get_logger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
WORKFLOW_TEXT_KEYS: tuple[str, ...] = ("workflow", "prompt", "Workflow", "Prompt")

_CHUNK_HEADER = struct.Struct(">I4s")
_CHUNK_OVERHEAD = 12  # length + type + crc
# Spaces and tabs only; newlines around a value are part of it.
_TRIM_CHARS = " \t"


def _decode_text_chunk(payload: bytes) -> Optional[tuple[str, str]]:
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError:
        return None
    keyword, sep, value = text.partition("\0")
    if not sep:
        return None
    return keyword.strip(_TRIM_CHARS), value.strip(_TRIM_CHARS)


def find_workflow_text_chunk(data: bytes) -> Optional[str]:
    """
    Walk PNG chunks after the signature and return the first workflow-bearing
    ``tEXt`` value.

    A chunk header that runs past the end of the buffer stops the walk.
    """
    offset = len(PNG_SIGNATURE)
    total = len(data)
    while offset + 11 < total:
        length, chunk_type = _CHUNK_HEADER.unpack_from(data, offset)
        chunk_end = offset + _CHUNK_OVERHEAD + length
        if chunk_end > total:
            logger.debug("Truncated PNG chunk at offset %d, stopping walk", offset)
            break
        if chunk_type == b"tEXt":
            start = offset + 8
            decoded = _decode_text_chunk(data[start:start + length])
            if decoded is not None and decoded[0] in WORKFLOW_TEXT_KEYS:
                return decoded[1]
        offset = chunk_end
    return None


def read_png_text_fallback(data: bytes) -> Optional[str]:
    """Read PNG text properties through Pillow and return the first workflow key found."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            info = dict(getattr(img, "info", {}) or {})
    except Exception as exc:
        logger.debug("Pillow could not read PNG metadata: %s", exc)
        return None
    for key in WORKFLOW_TEXT_KEYS:
        value = info.get(key)
        if isinstance(value, str):
            return str(value)
    return None


def extract_workflow_from_png(data: bytes) -> Optional[str]:
    """
    Return the workflow JSON string embedded in PNG bytes, or None.

    Never raises on malformed input.
    """
    found = find_workflow_text_chunk(data)
    if found is not None:
        return found
    if not current_png_pillow_fallback():
        return None
    return read_png_text_fallback(data)
