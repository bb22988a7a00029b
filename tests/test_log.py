from __future__ import annotations

import logging

from jobfit import log


def test_unwritable_log_dir_falls_back_to_console(tmp_path, monkeypatch):
    blocker = tmp_path / "logs"
    blocker.write_text("not a directory")
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.setattr(log, "_LOG_DIR", blocker / "jobfit")

    log._configure()

    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], logging.StreamHandler)
    assert not isinstance(root.handlers[0], logging.FileHandler)


def test_get_logger_returns_named_logger():
    assert log.get_logger("jobfit.test").name == "jobfit.test"
