import logging

from compass.logger import ROOT_LOGGER_NAME, get_logger, setup_logging


def _reset_root():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def test_module_loggers_live_under_compass():
    assert get_logger("storage").name == "compass.storage"
    assert get_logger().name == "compass"


def test_setup_logging_writes_files_and_does_not_stack_handlers(tmp_path):
    try:
        setup_logging(logs_dir=tmp_path)
        root = setup_logging(logs_dir=tmp_path)
        assert len(root.handlers) == 3

        get_logger("test").error("disk full")
        for handler in root.handlers:
            handler.flush()

        assert "disk full" in (tmp_path / "system.log").read_text(encoding="utf-8")
        assert "disk full" in (tmp_path / "error.log").read_text(encoding="utf-8")
    finally:
        _reset_root()
