"""
Tests for gig_shared: result.py, types.py, errors.py, log.py, time.py.
"""
from __future__ import annotations

import json
import logging
from enum import Enum

import pytest

from gig_shared import errors as errors_mod
from gig_shared import log as log_mod
from gig_shared import result as result_mod
from gig_shared import time as time_mod
from gig_shared.types import ErrorCode, classify_file


# ─── time.py ───────────────────────────────────────────────────────────────


def test_timer_with_logger(caplog):
    log = logging.getLogger("test_timer")
    with caplog.at_level(logging.DEBUG, logger="test_timer"):
        with time_mod.timer("op", log):
            pass
    assert any("op took" in r.getMessage() for r in caplog.records)


def test_timer_without_logger_uses_module_logger(capsys):
    log = time_mod._logger
    handler = _Capture()
    old_level = log.level
    log.addHandler(handler)
    log.setLevel(logging.DEBUG)
    try:
        with time_mod.timer("myop"):
            pass
    finally:
        log.removeHandler(handler)
        log.setLevel(old_level)

    assert log.name == "gig.time"
    assert [r.getMessage().split(" took ")[0] for r in handler.records] == ["myop"]
    assert "myop" not in capsys.readouterr().out


# ─── result.py ─────────────────────────────────────────────────────────────


class _EC(Enum):
    NOT_FOUND = "NOT_FOUND"


def test_result_err_with_enum_code():
    r = result_mod.Result.Err(_EC.NOT_FOUND, "file missing", stage="read")
    assert not r.ok
    assert r.code == "NOT_FOUND"
    assert r.error == "file missing"
    assert r.meta == {"stage": "read"}


def test_result_err_with_error_code_and_string():
    assert result_mod.Result.Err(ErrorCode.JSON_PARSE_FAILED, "x").code == "JSON_PARSE_FAILED"
    assert result_mod.Result.Err("CUSTOM", "x").code == "CUSTOM"


def test_result_map_ok():
    r = result_mod.Result.Ok(5, source="a")
    mapped = r.map(lambda x: x * 2)
    assert mapped.ok and mapped.data == 10
    assert mapped.meta == {"source": "a"}


def test_result_map_err_passes_through():
    r = result_mod.Result.Err("X", "bad")
    assert r.map(lambda x: x * 2) is r


def test_result_unwrap():
    assert result_mod.Result.Ok("v").unwrap() == "v"
    with pytest.raises(ValueError, match=r"\[X\] bad"):
        result_mod.Result.Err("X", "bad").unwrap()


def test_result_unwrap_or():
    assert result_mod.Result.Err("X", "bad").unwrap_or(3) == 3
    assert result_mod.Result.Ok(1).unwrap_or(3) == 1


# ─── types.py ──────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "name,kind",
    [
        ("wf.json", "json"),
        ("WF.JSON", "json"),
        ("/tmp/dir.png/render.PNG", "png"),
        ("image.webp", "unknown"),
        ("noext", "unknown"),
        ("", "unknown"),
    ],
)
def test_classify_file(name, kind):
    assert classify_file(name) == kind


def test_error_code_is_str_enum():
    assert ErrorCode.NO_CLASSIFIABLE_NODES == "NO_CLASSIFIABLE_NODES"


# ─── errors.py ─────────────────────────────────────────────────────────────


def test_sanitize_error_message_masks_paths():
    msg = errors_mod.sanitize_error_message(RuntimeError("Failed at C:\\secret\\file.json"), "Generic error")
    assert "[path]" in msg
    assert "secret" not in msg
    assert msg.startswith("Generic error:")


def test_sanitize_error_message_masks_unix_paths():
    msg = errors_mod.sanitize_error_message(OSError("No such file: '/home/user/wf.json'"), "Failed")
    assert "/home/user" not in msg


def test_sanitize_error_message_flattens_and_truncates():
    msg = errors_mod.sanitize_error_message("line1\nline2" + "x" * 500, "F")
    assert "\n" not in msg
    assert len(msg) <= len("F: ") + 200


def test_sanitize_error_message_returns_fallback_for_empty():
    assert errors_mod.sanitize_error_message("", "Fallback") == "Fallback"
    assert errors_mod.sanitize_error_message(None, "Fallback") == "Fallback"
    assert errors_mod.sanitize_error_message(None, "") == "An error occurred"


# ─── log.py ────────────────────────────────────────────────────────────────


def test_get_logger_shortens_package_names():
    assert log_mod.get_logger("gig_backend.features.workflow.loader").name == "gig.workflow.loader"
    assert log_mod.get_logger("gig_backend.config").name == "gig.config"
    assert log_mod.get_logger("__main__").name == "gig.main"


def test_get_logger_installs_single_handler():
    a = log_mod.get_logger("tests.single_handler")
    b = log_mod.get_logger("tests.single_handler")
    assert a is b
    assert len(a.handlers) == 1
    assert a.propagate is False


def test_emoji_formatter():
    record = logging.LogRecord("gig.x", logging.WARNING, __file__, 1, "hello", None, None)
    out = log_mod.EmojiFormatter().format(record)
    assert out.startswith(log_mod.PREFIX)
    assert "gig.x: hello" in out


class _Capture(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


def test_log_success_and_structured():
    logger = log_mod.get_logger("tests.capture", level=logging.DEBUG)
    handler = _Capture()
    logger.addHandler(handler)
    try:
        log_mod.log_success(logger, "done")
        log_mod.log_structured(logger, logging.INFO, "loaded", nodes=3)
    finally:
        logger.removeHandler(handler)

    assert handler.records[0].levelname == "SUCCESS"
    payload = json.loads(handler.records[1].getMessage())
    assert payload["message"] == "loaded"
    assert payload["context"] == {"nodes": 3}
    assert payload["timestamp"].endswith("Z")
