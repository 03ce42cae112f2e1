from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from lingo_drill.core import logging as core_logging


def _close(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_configure_logger_writes_json(tmp_path):
    log_dir = tmp_path / "logs"
    logger, log_path = core_logging.configure_logger(
        "lingo_drill.test",
        log_dir=log_dir,
        level="INFO",
        filename="test.log",
    )

    logger.info("hello world", extra={"event": "unit", "value": 3})
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception(
            "with error",
            extra={"paths": [Path(log_dir)], "obj": object()},
        )
    for handler in logger.handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    first = json.loads(lines[0])
    assert first["message"] == "hello world"
    assert first["level"] == "INFO"
    assert first["extra"] == {"event": "unit", "value": 3}

    last = json.loads(lines[-1])
    assert "ValueError: boom" in last["exception"]
    assert last["extra"]["paths"] == [str(log_dir)]
    assert last["extra"]["obj"].startswith("<object")

    _close(logger)


def test_level_filters_file_output(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "lingo_drill.test_level",
        log_dir=tmp_path,
        level="WARNING",
        filename="level.log",
    )

    logger.info("quiet")
    logger.warning("loud")
    for handler in logger.handlers:
        handler.flush()

    messages = [
        json.loads(line)["message"]
        for line in log_path.read_text(encoding="utf-8").splitlines()
    ]
    assert messages == ["loud"]

    _close(logger)


def test_console_handler_toggle(tmp_path):
    name = "lingo_drill.test_toggle"

    def console_handlers(logger):
        return [
            handler
            for handler in logger.handlers
            if getattr(handler, "_lingo_drill_console", False)
        ]

    logger, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True, filename="toggle.log"
    )
    assert len(console_handlers(logger)) == 1

    core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True, filename="toggle.log"
    )
    assert len(console_handlers(logger)) == 1

    core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=False, filename="toggle.log"
    )
    assert not console_handlers(logger)

    _close(logger)


def test_repeated_configuration_reuses_file_handler(tmp_path):
    name = "lingo_drill.test_reuse"
    logger, first = core_logging.configure_logger(
        name, log_dir=tmp_path, filename="reuse.log"
    )
    _, second = core_logging.configure_logger(
        name, log_dir=tmp_path, filename="reuse.log"
    )

    file_handlers = [
        handler
        for handler in logger.handlers
        if getattr(handler, "_lingo_drill_file", False)
    ]
    assert len(file_handlers) == 1
    assert first == second

    _close(logger)


def test_configure_logger_fallback_directory(tmp_path, monkeypatch):
    target = tmp_path / "blocked"
    fallback = tmp_path / "fallback"
    original_mkdir = Path.mkdir

    def fake_mkdir(self, *args, **kwargs):  # noqa: ANN001
        if self == target:
            raise PermissionError("denied")
        return original_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", fake_mkdir)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback)

    logger, log_path = core_logging.configure_logger(
        "lingo_drill.test_blocked",
        log_dir=target,
        filename="blocked.log",
    )

    assert log_path.parent == fallback
    assert log_path.exists()

    _close(logger)


def test_fallback_log_dir_uses_tempdir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "gettempdir", lambda: str(tmp_path))

    assert core_logging._fallback_log_dir() == tmp_path / "lingo-drill-logs"


def test_unknown_level_defaults_to_info():
    assert core_logging._level_number("bogus") == logging.INFO
    assert core_logging._level_number("debug") == logging.DEBUG
