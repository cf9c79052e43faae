"""
Workflow feature - ComfyUI workflow loading, conversion and node discovery.
"""
from .graph_converter import Link, build_link_table, convert_to_api_graph, detect_format, rewrite_ui_graph
from .loader import LoadedWorkflow, load_workflow_bytes, load_workflow_file, load_workflow_value
from .node_classifier import NodeInfo, WorkflowNodes, classify_nodes
from .png_extractor import extract_workflow_from_png
from .submission import OutputImage, find_output_image, prepare_submission

__all__ = [
    "Link",
    "LoadedWorkflow",
    "NodeInfo",
    "OutputImage",
    "WorkflowNodes",
    "build_link_table",
    "classify_nodes",
    "convert_to_api_graph",
    "detect_format",
    "extract_workflow_from_png",
    "find_output_image",
    "load_workflow_bytes",
    "load_workflow_file",
    "load_workflow_value",
    "prepare_submission",
    "rewrite_ui_graph",
]
