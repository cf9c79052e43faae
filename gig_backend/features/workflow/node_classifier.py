"""Prompt / output / image-input node discovery for API-form graphs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from gig_shared import ErrorCode, Result

from ...config import current_prompt_label_max_chars
from .json_value import as_dict, as_list, get_dict, get_int, get_list, get_str

PROMPT_CLASS_TYPES: frozenset[str] = frozenset({"CLIPTextEncode"})
OUTPUT_CLASS_TYPES: frozenset[str] = frozenset({"SaveImage", "PreviewImage"})
IMAGE_CLASS_TYPES: frozenset[str] = frozenset({"LoadImage"})

NO_NODES_MESSAGE = (
    "Invalid workflow format or no relevant nodes found. "
    "Please load a valid ComfyUI JSON (API or standard format)."
)


@dataclass(frozen=True)
class NodeInfo:
    id: str
    label: str
    prompt_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "label": self.label}
        if self.prompt_text is not None:
            out["promptText"] = self.prompt_text
        return out


@dataclass(frozen=True)
class WorkflowNodes:
    """Classified node lists plus the default selection for each picker."""

    prompt_nodes: tuple[NodeInfo, ...] = field(default_factory=tuple)
    output_nodes: tuple[NodeInfo, ...] = field(default_factory=tuple)
    image_nodes: tuple[NodeInfo, ...] = field(default_factory=tuple)
    default_prompt_node_id: str = ""
    default_output_node_id: str = ""
    default_image_node_id: str = ""

    def find_prompt_node(self, node_id: str) -> NodeInfo | None:
        for info in self.prompt_nodes:
            if info.id == node_id:
                return info
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "promptNodes": [n.to_dict() for n in self.prompt_nodes],
            "outputNodes": [n.to_dict() for n in self.output_nodes],
            "imageNodes": [n.to_dict() for n in self.image_nodes],
            "defaultPromptNodeId": self.default_prompt_node_id,
            "defaultOutputNodeId": self.default_output_node_id,
            "defaultImageNodeId": self.default_image_node_id,
        }


def prompt_label(node_id: str, text: str, max_chars: int | None = None) -> str:
    if not text:
        return f"Node {node_id}"
    limit = max_chars if max_chars is not None else current_prompt_label_max_chars()
    suffix = "..." if len(text) > limit else ""
    return f"Node {node_id}: {text[:limit]}{suffix}"


def _prompt_text(node: dict[str, Any], widget_text: str) -> str:
    text = get_str(get_dict(node, "inputs"), "text")
    return text if text is not None else widget_text


def widget_prompt_texts(ui_nodes: Any) -> dict[str, str]:
    """
    Map prompt node id -> first string in its ``widgets_values``.

    Editor exports often list only the linked ``clip`` input, leaving the
    prompt itself in the widget values where the rewrite cannot see it.
    """
    texts: dict[str, str] = {}
    for node in as_list(ui_nodes) or []:
        node_id = get_int(node, "id")
        if node_id is None or get_str(node, "type") not in PROMPT_CLASS_TYPES:
            continue
        first = next((v for v in get_list(node, "widgets_values") or [] if isinstance(v, str)), None)
        if first is not None:
            texts[str(node_id)] = first
    return texts


def _sorted(nodes: list[NodeInfo]) -> tuple[NodeInfo, ...]:
    # Plain string order: "10" sorts before "2".
    return tuple(sorted(nodes, key=lambda n: n.id))


def classify_nodes(
    api_graph: dict[str, Any],
    label_max_chars: int | None = None,
    widget_texts: Mapping[str, str] | None = None,
) -> Result[WorkflowNodes]:
    """
    Bucket API-form nodes by exact ``class_type`` and pick the defaults.

    ``widget_texts`` (see ``widget_prompt_texts``) supplies the prompt text for
    nodes whose ``text`` input is absent or linked.

    Returns NO_CLASSIFIABLE_NODES when no prompt, output or image node exists.
    """
    prompts: list[NodeInfo] = []
    outputs: list[NodeInfo] = []
    images: list[NodeInfo] = []

    for raw_id, raw_node in api_graph.items():
        node = as_dict(raw_node)
        class_type = get_str(node, "class_type")
        if node is None or class_type is None:
            continue
        node_id = str(raw_id)
        if class_type in PROMPT_CLASS_TYPES:
            text = _prompt_text(node, (widget_texts or {}).get(node_id, ""))
            prompts.append(NodeInfo(node_id, prompt_label(node_id, text, label_max_chars), text))
        elif class_type in OUTPUT_CLASS_TYPES:
            outputs.append(NodeInfo(node_id, f"Node {node_id}: {class_type}"))
        elif class_type in IMAGE_CLASS_TYPES:
            images.append(NodeInfo(node_id, f"Node {node_id}: {class_type}"))

    if not prompts and not outputs and not images:
        return Result.Err(ErrorCode.NO_CLASSIFIABLE_NODES, NO_NODES_MESSAGE, stage="classify")

    prompt_nodes = _sorted(prompts)
    output_nodes = _sorted(outputs)
    image_nodes = _sorted(images)
    return Result.Ok(
        WorkflowNodes(
            prompt_nodes=prompt_nodes,
            output_nodes=output_nodes,
            image_nodes=image_nodes,
            default_prompt_node_id=prompt_nodes[0].id if prompt_nodes else "",
            default_output_node_id=output_nodes[0].id if output_nodes else "",
            default_image_node_id=image_nodes[0].id if image_nodes else "",
        ),
        counts={"prompt": len(prompt_nodes), "output": len(output_nodes), "image": len(image_nodes)},
    )
