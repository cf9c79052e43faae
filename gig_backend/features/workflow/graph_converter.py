"""Format detection and UI-form -> API-form conversion for ComfyUI workflows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from gig_shared import ErrorCode, Result, get_logger

from .json_value import as_dict, as_int, as_list, as_str, get_int, get_list, get_str, is_list_of

logger = get_logger(__name__)

WorkflowFormat = Literal["ui", "api"]

LINK_ARITY = 6
EMPTY_GRAPH_MESSAGE = "Invalid or empty workflow after processing."


@dataclass(frozen=True)
class Link:
    """Directed edge from an output slot of one node to an input slot of another."""

    from_node_id: int
    from_slot: int
    to_node_id: int
    to_slot: int
    data_type: str


def detect_format(value: Any) -> WorkflowFormat:
    """
    Classify a parsed top-level workflow value.

    UI-form needs ``nodes`` to be a list of objects and ``links`` a list of
    arrays; everything else is treated as an API-form candidate.
    """
    obj = as_dict(value)
    if obj is None:
        return "api"
    if is_list_of(obj.get("nodes"), dict) and is_list_of(obj.get("links"), list):
        return "ui"
    return "api"


def _parse_link(raw: Any) -> tuple[int, Link] | None:
    if not isinstance(raw, (list, tuple)) or len(raw) != LINK_ARITY:
        return None
    link_id, from_id, from_slot, to_id, to_slot = (as_int(v) for v in raw[:5])
    data_type = as_str(raw[5])
    if link_id is None or from_id is None or from_slot is None or to_id is None or to_slot is None:
        return None
    if data_type is None:
        return None
    return link_id, Link(from_id, from_slot, to_id, to_slot, data_type)


def build_link_table(raw_links: Any) -> dict[int, Link]:
    """Map link id -> Link, skipping malformed entries. Duplicate ids: last one wins."""
    table: dict[int, Link] = {}
    for raw in as_list(raw_links) or []:
        parsed = _parse_link(raw)
        if parsed is None:
            continue
        link_id, link = parsed
        if link_id in table:
            logger.debug("Duplicate link id %s, keeping the later entry", link_id)
        table[link_id] = link
    return table


def _resolve_input_link(node_input: dict[str, Any], links: dict[int, Link]) -> Link | None:
    link_id = get_int(node_input, "link")
    if link_id is None:
        return None
    return links.get(link_id)


def _convert_node_inputs(node: dict[str, Any], links: dict[int, Link]) -> dict[str, Any]:
    inputs: dict[str, Any] = {}
    widgets = get_list(node, "widgets_values") or []
    widget_idx = 0
    for raw_input in get_list(node, "inputs") or []:
        name = get_str(raw_input, "name")
        if name is None:
            continue
        link = _resolve_input_link(raw_input, links)
        if link is not None:
            inputs[name] = [str(link.from_node_id), link.from_slot]
            continue
        # Linked inputs never consume a widget slot; unlinked ones take the next value.
        if widget_idx < len(widgets):
            inputs[name] = widgets[widget_idx]
            widget_idx += 1
    return inputs


def rewrite_ui_graph(nodes: Any, links: dict[int, Link]) -> dict[str, dict[str, Any]]:
    """
    Rewrite UI-form nodes into an API-form mapping keyed by stringified node id.

    Nodes without an integer ``id`` or a string ``type`` are dropped. The input
    structures are never mutated.
    """
    api_graph: dict[str, dict[str, Any]] = {}
    for node in as_list(nodes) or []:
        node_id = get_int(node, "id")
        class_type = get_str(node, "type")
        if node_id is None or class_type is None:
            continue
        api_graph[str(node_id)] = {
            "class_type": class_type,
            "inputs": _convert_node_inputs(node, links),
        }
    return api_graph


def convert_to_api_graph(value: dict[str, Any]) -> Result[tuple[dict[str, Any], WorkflowFormat]]:
    """
    Return the API-form graph for a parsed workflow plus the detected source format.

    API-form input passes through unchanged. UI-form input is rewritten; an
    empty rewrite is an error rather than an empty success.
    """
    fmt = detect_format(value)
    if fmt == "api":
        return Result.Ok((value, fmt))

    link_table = build_link_table(value.get("links"))
    api_graph = rewrite_ui_graph(value.get("nodes"), link_table)
    if not api_graph:
        return Result.Err(ErrorCode.EMPTY_REWRITTEN_GRAPH, EMPTY_GRAPH_MESSAGE, stage="rewrite")
    logger.debug("Converted UI workflow to API format with %d nodes", len(api_graph))
    return Result.Ok((api_graph, fmt))
