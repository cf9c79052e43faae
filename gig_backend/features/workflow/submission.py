"""
Pure helpers that prepare a loaded workflow for the ComfyUI prompt queue.

Sending requests is the caller's job; these functions only produce the
graph and payload that get sent, and read the output image reference back
out of a ``/history/{prompt_id}`` entry.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from gig_shared import ErrorCode, Result

from .json_value import as_dict, get_dict, get_list, get_str
from .loader import LoadedWorkflow
from .node_classifier import WorkflowNodes

PROMPT_INPUT_KEY = "text"
IMAGE_INPUT_KEY = "image"


@dataclass(frozen=True)
class OutputImage:
    filename: str
    subfolder: str
    type: str

    def query(self) -> dict[str, str]:
        """Query parameters for the ComfyUI ``/view`` endpoint."""
        return {"filename": self.filename, "subfolder": self.subfolder, "type": self.type}


def effective_prompt(user_prompt: str, nodes: WorkflowNodes, prompt_node_id: str) -> str:
    if user_prompt:
        return user_prompt
    info = nodes.find_prompt_node(prompt_node_id)
    return (info.prompt_text or "") if info is not None else ""


def _set_node_input(
    api_graph: dict[str, Any], node_id: str, key: str, value: Any, code: ErrorCode, what: str
) -> Result[dict[str, Any]]:
    node = as_dict(api_graph.get(node_id))
    if node is None or get_dict(node, "inputs") is None:
        return Result.Err(code, f"Selected {what} node {node_id!r} is missing or has no inputs.", node_id=node_id)
    updated = copy.deepcopy(api_graph)
    updated[node_id]["inputs"][key] = value
    return Result.Ok(updated)


def apply_prompt_text(api_graph: dict[str, Any], node_id: str, text: str) -> Result[dict[str, Any]]:
    """Return a copy of ``api_graph`` with the prompt node's ``text`` input replaced."""
    return _set_node_input(api_graph, node_id, PROMPT_INPUT_KEY, text, ErrorCode.INVALID_PROMPT_NODE, "prompt")


def apply_image_filename(api_graph: dict[str, Any], node_id: str, filename: str) -> Result[dict[str, Any]]:
    """Return a copy of ``api_graph`` with the image node pointing at an uploaded file."""
    return _set_node_input(api_graph, node_id, IMAGE_INPUT_KEY, filename, ErrorCode.INVALID_IMAGE_NODE, "image")


def build_prompt_payload(api_graph: dict[str, Any], client_id: Optional[str] = None) -> dict[str, Any]:
    return {"prompt": api_graph, "client_id": client_id or uuid.uuid4().hex}


def prepare_submission(
    loaded: LoadedWorkflow,
    user_prompt: str,
    prompt_node_id: Optional[str] = None,
    image_node_id: Optional[str] = None,
    image_filename: Optional[str] = None,
    client_id: Optional[str] = None,
    output_node_id: Optional[str] = None,
) -> Result[dict[str, Any]]:
    """
    Build the queue payload for a loaded workflow.

    Nothing is built until an output node is selected and the effective
    prompt is non-empty (SUBMISSION_NOT_READY otherwise). The prompt is always
    applied (falling back to the node's own text when ``user_prompt`` is
    empty). The image is applied only when both an image node and an
    uploaded filename are available.
    """
    nodes = loaded.nodes
    prompt_id = prompt_node_id if prompt_node_id is not None else nodes.default_prompt_node_id
    output_id = output_node_id if output_node_id is not None else nodes.default_output_node_id
    if not output_id:
        return Result.Err(
            ErrorCode.SUBMISSION_NOT_READY, "Select an output node before generating.", reason="no_output_node"
        )

    text = effective_prompt(user_prompt, nodes, prompt_id)
    if not text:
        return Result.Err(
            ErrorCode.SUBMISSION_NOT_READY,
            "Enter a prompt or pick a prompt node that has text.",
            reason="empty_prompt",
            node_id=prompt_id,
        )

    graph_res = apply_prompt_text(loaded.api_graph, prompt_id, text)
    if not graph_res.ok or graph_res.data is None:
        return graph_res

    image_id = image_node_id if image_node_id is not None else nodes.default_image_node_id
    graph = graph_res.data
    if image_id and image_filename:
        image_res = apply_image_filename(graph, image_id, image_filename)
        if not image_res.ok or image_res.data is None:
            return image_res
        graph = image_res.data

    return Result.Ok(build_prompt_payload(graph, client_id))


def find_output_image(history_entry: Any, output_node_id: str) -> Result[OutputImage]:
    """Read the first image reference produced by ``output_node_id`` from a history entry."""
    output = get_dict(get_dict(history_entry, "outputs"), output_node_id)
    images = get_list(output, "images") or []
    first = as_dict(images[0]) if images else None
    filename = get_str(first, "filename")
    subfolder = get_str(first, "subfolder")
    kind = get_str(first, "type")
    if filename is None or subfolder is None or kind is None:
        return Result.Err(
            ErrorCode.NO_OUTPUT_IMAGE,
            f"No output image found for node {output_node_id!r}.",
            node_id=output_node_id,
        )
    return Result.Ok(OutputImage(filename=filename, subfolder=subfolder, type=kind))


def is_history_complete(history_entry: Any) -> bool:
    status = get_dict(history_entry, "status")
    return bool(status and status.get("completed") is True)

