"""Test logging configuration.

Tests for src.utils.logging_config:
    - File output in JSON line mode carries context fields
    - Repeated setup_logging() calls don't duplicate handlers
    - Human format includes level, context and message
    - push_context / pop_context
    - Rotating file handler when `rotate` is given

Run:
    pytest tests/test_logging_config.py -v
"""

import json
import logging
import logging.handlers
import sys

from src.utils import logging_config


def _record(msg="hello", level=logging.INFO, exc_info=None):
    return logging.LogRecord("pixmap.test", level, __file__, 1, msg, None, exc_info)


def test_json_file_output_with_context(tmp_path):
    log_path = tmp_path / "logs" / "render.log"
    logging_config.setup_logging(
        log_level="INFO",
        log_file=str(log_path),
        json=True,
        to_stderr=False,
        context={"app": "test"}
    )
    logging_config.get_logger("pixmap.test").info("hello")

    lines = log_path.read_text().splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["msg"] == "hello"
    assert payload["lvl"] == "INFO"
    assert payload["app"] == "test"


def test_setup_logging_idempotent(tmp_path):
    log_path = tmp_path / "render.log"
    for _ in range(3):
        handlers = logging_config.setup_logging(
            log_level="INFO", log_file=str(log_path), json=True, to_stderr=False
        )
    assert len(handlers) == 1
    installed = [h for h in logging.getLogger().handlers if h in logging_config._installed]
    assert len(installed) == 1

    logging_config.get_logger("pixmap.test").info("once")
    assert len(log_path.read_text().splitlines()) == 1


def test_level_filtering(tmp_path):
    log_path = tmp_path / "render.log"
    logging_config.setup_logging(log_level="WARNING", log_file=str(log_path), to_stderr=False)
    logger = logging_config.get_logger("pixmap.test")
    logger.info("dropped")
    logger.warning("kept")
    text = log_path.read_text()
    assert "kept" in text and "dropped" not in text

    logging_config.set_level("DEBUG")
    assert logging.getLogger().level == logging.DEBUG


def test_human_format():
    logging_config.push_context(app="render", scene="sun")
    line = logging_config.ContextFormatter("human", use_color=False).format(_record())
    assert "| INFO     |" in line
    assert "app=render scene=sun |" in line
    assert line.endswith("hello")
    assert line[:4].isdigit()


def test_json_format_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("failed", logging.ERROR, sys.exc_info())
    payload = json.loads(logging_config.ContextFormatter("json").format(record))
    assert payload["lvl"] == "ERROR"
    assert "ValueError: boom" in payload["exc"]


def test_pop_context():
    logging_config.push_context(app="render", scene="sun")
    logging_config.pop_context(["scene"])
    line = logging_config.ContextFormatter("human", use_color=False).format(_record())
    assert "app=render |" in line and "scene=" not in line

    logging_config.pop_context()
    line = logging_config.ContextFormatter("human", use_color=False).format(_record())
    assert "app=" not in line


def test_rotating_file_handler(tmp_path):
    handlers = logging_config.setup_logging(
        log_file=str(tmp_path / "r.log"),
        to_stderr=False,
        rotate={"max_bytes": 1024, "backup_count": 2}
    )
    assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)
    assert handlers[0].backupCount == 2
