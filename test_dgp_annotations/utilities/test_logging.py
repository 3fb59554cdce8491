import logging
import sys

import pytest
from coloredlogs import ColoredFormatter

from dgp_annotations.utilities.logging import PACKAGE_LOGGER_NAME, setup_loggers


@pytest.fixture
def restore_loggers():
    names = [PACKAGE_LOGGER_NAME, "dgp_annotations.test"]
    saved = {}
    for name in names:
        logger = logging.getLogger(name)
        saved[name] = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for name, (handlers, level, propagate) in saved.items():
        logger = logging.getLogger(name)
        logger.handlers = handlers
        logger.setLevel(level)
        logger.propagate = propagate


@pytest.mark.usefixtures("restore_loggers")
class TestSetupLoggers:
    def test_defaults_to_package_logger(self):
        loggers = setup_loggers()

        assert [logger.name for logger in loggers] == [PACKAGE_LOGGER_NAME]
        logger = loggers[0]
        assert logger.level == logging.INFO
        assert logger.propagate is False
        handler = logger.handlers[0]
        assert isinstance(handler.formatter, ColoredFormatter)
        assert handler.stream is sys.stdout

    def test_repeated_setup_replaces_handler(self):
        setup_loggers(["dgp_annotations.test"], log_level=logging.DEBUG)
        setup_loggers(["dgp_annotations.test"], log_level=logging.DEBUG)

        logger = logging.getLogger("dgp_annotations.test")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_package_records_are_printed(self, capsys):
        setup_loggers(log_level=logging.DEBUG)

        logging.getLogger("dgp_annotations.proto.codec").debug("decode failed")

        assert "decode failed" in capsys.readouterr().out
