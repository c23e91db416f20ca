import logging

from edubot import log


def test_setup_logging_returns_early_when_root_has_handlers(tmp_path, monkeypatch):
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(log, "LOG_DIR", log_dir)
    root = logging.getLogger()
    marker = logging.NullHandler()
    root.addHandler(marker)
    try:
        before = list(root.handlers)

        log.setup_logging()
        log.setup_logging()

        assert root.handlers == before
        assert not log_dir.exists()
    finally:
        root.removeHandler(marker)
