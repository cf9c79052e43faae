"""
Tests for png_extractor.py: manual tEXt walk and the Pillow fallback.
"""
from __future__ import annotations

import io
import json

from PIL import Image
from PIL.PngImagePlugin import PngInfo

from gig_backend.features.workflow import png_extractor as pe
from tests.workflow.samples import PNG_SIGNATURE, minimal_png, png_chunk, text_chunk, ui_workflow


def _pillow_png(pnginfo: PngInfo) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), "black").save(buf, format="PNG", pnginfo=pnginfo)
    return buf.getvalue()


# ─── find_workflow_text_chunk ───────────────────────────────────────────────

def test_manual_walk_returns_exact_workflow_string():
    text = json.dumps(ui_workflow())
    data = minimal_png(text_chunk("workflow", text))
    assert pe.find_workflow_text_chunk(data) == text


def test_manual_walk_accepts_all_four_keywords():
    for key in ("workflow", "prompt", "Workflow", "Prompt"):
        assert pe.find_workflow_text_chunk(minimal_png(text_chunk(key, "{}"))) == "{}"


def test_manual_walk_keyword_is_case_sensitive_beyond_known_variants():
    assert pe.find_workflow_text_chunk(minimal_png(text_chunk("WORKFLOW", "{}"))) is None


def test_manual_walk_trims_keyword_whitespace():
    assert pe.find_workflow_text_chunk(minimal_png(text_chunk(" workflow ", '{"a": 1}'))) == '{"a": 1}'


def test_manual_walk_trims_spaces_and_tabs_but_keeps_newlines():
    assert pe.find_workflow_text_chunk(minimal_png(text_chunk("workflow", " \t{}\t "))) == "{}"
    assert pe.find_workflow_text_chunk(minimal_png(text_chunk("workflow", "\n{}\n"))) == "\n{}\n"
    assert pe.find_workflow_text_chunk(minimal_png(text_chunk("prompt\n", "{}"))) is None


def test_manual_walk_first_match_wins():
    data = minimal_png(text_chunk("parameters", "steps: 20"), text_chunk("prompt", "P"), text_chunk("workflow", "W"))
    assert pe.find_workflow_text_chunk(data) == "P"


def test_manual_walk_skips_undecodable_and_nul_less_chunks():
    bad = png_chunk(b"tEXt", b"workflow\x00\xff\xfe\xfd")
    no_nul = png_chunk(b"tEXt", b"workflow only")
    data = minimal_png(bad, no_nul, text_chunk("Workflow", "ok"))
    assert pe.find_workflow_text_chunk(data) == "ok"


def test_manual_walk_ignores_other_chunk_types():
    data = minimal_png(png_chunk(b"iTXt", b"workflow\x00\x00\x00\x00\x00{}"))
    assert pe.find_workflow_text_chunk(data) is None


def test_manual_walk_stops_on_truncated_chunk():
    good_tail = text_chunk("workflow", "late")
    truncated_header = b"\x00\x00\xff\xffjunk"
    data = PNG_SIGNATURE + truncated_header + b"\x00" * 8 + good_tail
    assert pe.find_workflow_text_chunk(data) is None


def test_manual_walk_handles_short_buffers():
    assert pe.find_workflow_text_chunk(b"") is None
    assert pe.find_workflow_text_chunk(PNG_SIGNATURE) is None
    assert pe.find_workflow_text_chunk(PNG_SIGNATURE + b"\x00\x00\x00") is None


def test_manual_walk_reads_pillow_written_text_chunk():
    text = json.dumps(ui_workflow())
    info = PngInfo()
    info.add_text("workflow", text)
    assert pe.find_workflow_text_chunk(_pillow_png(info)) == text


# ─── Pillow fallback ────────────────────────────────────────────────────────

def test_fallback_reads_itxt_chunks():
    info = PngInfo()
    info.add_itxt("workflow", '{"from": "itxt"}')
    data = _pillow_png(info)
    assert pe.find_workflow_text_chunk(data) is None
    assert pe.extract_workflow_from_png(data) == '{"from": "itxt"}'


def test_fallback_reads_compressed_text():
    info = PngInfo()
    info.add_text("prompt", '{"from": "ztxt"}', zip=True)
    assert pe.extract_workflow_from_png(_pillow_png(info)) == '{"from": "ztxt"}'


def test_fallback_key_order_prefers_workflow():
    info = PngInfo()
    info.add_itxt("prompt", "P")
    info.add_itxt("workflow", "W")
    assert pe.read_png_text_fallback(_pillow_png(info)) == "W"


def test_fallback_can_be_disabled(monkeypatch):
    monkeypatch.setenv("GIG_PNG_PILLOW_FALLBACK", "0")
    info = PngInfo()
    info.add_itxt("workflow", "{}")
    assert pe.extract_workflow_from_png(_pillow_png(info)) is None


def test_fallback_on_garbage_returns_none():
    assert pe.read_png_text_fallback(b"not a png at all") is None
    assert pe.extract_workflow_from_png(b"not a png at all") is None


def test_no_workflow_anywhere():
    info = PngInfo()
    info.add_text("parameters", "Steps: 20, Sampler: Euler")
    assert pe.extract_workflow_from_png(_pillow_png(info)) is None
