# File: tests/test_logger.py
import logging
from logging.handlers import RotatingFileHandler

import pytest

from docs_downloader.logger import LOGGER_NAME, configure, init_logging


@pytest.fixture()
def restore_logger():
    yield
    init_logging()


def test_configure_with_log_file(tmp_path, restore_logger):
    log_file = tmp_path / "run.log"
    lg = configure(level="DEBUG", log_file=log_file)

    assert lg is logging.getLogger(LOGGER_NAME)
    assert lg.level == logging.DEBUG
    assert lg.propagate is False
    assert [type(h) for h in lg.handlers] == [logging.StreamHandler, RotatingFileHandler]

    lg.debug("Saved: %s", "index.md")
    for handler in lg.handlers:
        handler.flush()
    assert "| DEBUG    | Saved: index.md" in log_file.read_text(encoding="utf-8")


def test_reconfigure_replaces_handlers(restore_logger):
    configure(level="INFO")
    lg = configure(level="WARNING")
    assert len(lg.handlers) == 1
    assert lg.level == logging.WARNING


def test_handlers_can_be_appended(restore_logger):
    configure()
    lg = configure(replace_handlers=False)
    assert len(lg.handlers) == 2
