"""
Workflow loading pipeline.

bytes (JSON file or PNG text chunk) -> parsed object -> API-form graph ->
classified nodes. Every stage is fail-fast: the first error is returned as a
single Result and no partial graph leaks out.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gig_shared import ErrorCode, Result, classify_file, get_logger, log_structured, sanitize_error_message, timer

from ...config import current_max_workflow_bytes
from .graph_converter import WorkflowFormat, convert_to_api_graph
from .node_classifier import WorkflowNodes, classify_nodes, widget_prompt_texts
from .png_extractor import extract_workflow_from_png

logger = get_logger(__name__)

UNSUPPORTED_FILE_MESSAGE = "Unsupported file type. Please select a JSON or PNG file."
NO_PNG_WORKFLOW_MESSAGE = "No embedded ComfyUI workflow found in the PNG."


@dataclass(frozen=True)
class LoadedWorkflow:
    api_graph: dict[str, Any]
    nodes: WorkflowNodes
    source_format: WorkflowFormat

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"apiGraph": self.api_graph}
        out.update(self.nodes.to_dict())
        return out


def _parse_json_object(data: bytes) -> Result[dict[str, Any]]:
    limit = current_max_workflow_bytes()
    if len(data) > limit:
        return Result.Err(
            ErrorCode.JSON_PARSE_FAILED,
            f"Workflow is too large ({len(data)} bytes, limit {limit}).",
            stage="parse",
        )
    try:
        parsed = json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return Result.Err(
            ErrorCode.JSON_PARSE_FAILED,
            sanitize_error_message(exc, "Failed to load or parse workflow"),
            stage="parse",
        )
    if not isinstance(parsed, dict):
        return Result.Err(
            ErrorCode.JSON_PARSE_FAILED,
            "Failed to load or parse workflow: top-level JSON value is not an object.",
            stage="parse",
        )
    return Result.Ok(parsed)


def _log_failure(result: Result[Any], source: str) -> None:
    logger.warning("Workflow load failed for %s [%s]: %s", source, result.code, result.error)


def load_workflow_value(value: Any, source: str = "<memory>") -> Result[LoadedWorkflow]:
    """Run conversion and classification on an already-parsed JSON value."""
    if not isinstance(value, dict):
        res: Result[LoadedWorkflow] = Result.Err(
            ErrorCode.JSON_PARSE_FAILED,
            "Failed to load or parse workflow: top-level JSON value is not an object.",
            stage="parse",
        )
        _log_failure(res, source)
        return res

    converted = convert_to_api_graph(value)
    if not converted.ok or converted.data is None:
        _log_failure(converted, source)
        return Result.Err(converted.code, converted.error or "", **converted.meta)
    api_graph, fmt = converted.data

    widget_texts = widget_prompt_texts(value.get("nodes")) if fmt == "ui" else None
    classified = classify_nodes(api_graph, widget_texts=widget_texts)
    if not classified.ok or classified.data is None:
        _log_failure(classified, source)
        return Result.Err(classified.code, classified.error or "", **classified.meta)
    nodes = classified.data

    log_structured(
        logger,
        logging.INFO,
        "Workflow loaded",
        source=source,
        format=fmt,
        node_count=len(api_graph),
        **classified.meta.get("counts", {}),
    )
    return Result.Ok(LoadedWorkflow(api_graph=api_graph, nodes=nodes, source_format=fmt), format=fmt)


def load_workflow_bytes(data: bytes, filename: str) -> Result[LoadedWorkflow]:
    """
    Load a workflow from raw file bytes.

    ``filename`` only decides how the bytes are read: ``.json`` is parsed
    directly, ``.png`` goes through the text-chunk extractor first.
    """
    kind = classify_file(filename)
    if kind == "unknown":
        res: Result[LoadedWorkflow] = Result.Err(
            ErrorCode.UNSUPPORTED_FILE_TYPE, UNSUPPORTED_FILE_MESSAGE, stage="file_type", filename=filename
        )
        _log_failure(res, filename)
        return res

    payload = data
    if kind == "png":
        text = extract_workflow_from_png(data)
        if text is None:
            res = Result.Err(
                ErrorCode.PNG_EXTRACTION_FAILED, NO_PNG_WORKFLOW_MESSAGE, stage="png", filename=filename
            )
            _log_failure(res, filename)
            return res
        payload = text.encode("utf-8")

    parsed = _parse_json_object(payload)
    if not parsed.ok:
        _log_failure(parsed, filename)
        return Result.Err(parsed.code, parsed.error or "", filename=filename, **parsed.meta)
    return load_workflow_value(parsed.data, source=filename)


def load_workflow_file(path: str | Path) -> Result[LoadedWorkflow]:
    """Read a ``.json`` or ``.png`` workflow file and run the full pipeline."""
    p = Path(path)
    if classify_file(p.name) == "unknown":
        return load_workflow_bytes(b"", p.name)
    try:
        data = p.read_bytes()
    except OSError as exc:
        res: Result[LoadedWorkflow] = Result.Err(
            ErrorCode.INVALID_INPUT,
            sanitize_error_message(exc, "Failed to load workflow"),
            stage="read",
            filename=p.name,
        )
        _log_failure(res, p.name)
        return res
    with timer(f"workflow load ({p.name})", logger):
        return load_workflow_bytes(data, p.name)
