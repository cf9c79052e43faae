"""Convert a ComfyUI workflow (.json or .png) to API format and list its pickable nodes."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from gig_backend.features.workflow import load_workflow_file
from gig_shared import get_logger, log_success

logger = get_logger(__name__)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert a ComfyUI workflow file to the API format accepted by /prompt."
    )
    parser.add_argument("path", help="Workflow file (.json export or .png with embedded workflow).")
    parser.add_argument("--output", "-o", type=str, default=None, help="Write JSON here instead of stdout.")
    parser.add_argument(
        "--nodes",
        action="store_true",
        help="Emit the API graph together with prompt/output/image node lists and defaults.",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2).")
    return parser.parse_args(argv)


def main(argv: list[str]) -> int:
    args = _parse_args(argv)
    res = load_workflow_file(args.path)
    if not res.ok or res.data is None:
        print(f"[{res.code}] {res.error}", file=sys.stderr)
        return 1

    loaded = res.data
    payload = loaded.to_dict() if args.nodes else loaded.api_graph
    text = json.dumps(payload, indent=args.indent, ensure_ascii=False)

    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8", newline="\n")
        log_success(logger, f"Wrote {len(loaded.api_graph)} nodes ({loaded.source_format} source) to {out_path.name}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
