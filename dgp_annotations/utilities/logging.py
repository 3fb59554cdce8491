import logging
import sys
from typing import List, Optional

from coloredlogs import ColoredFormatter

PACKAGE_LOGGER_NAME = "dgp_annotations"
LOG_FORMAT = "%(asctime)s %(name)s[%(funcName)s] %(levelname)s %(message)s"


def setup_loggers(logger_names: Optional[List[str]] = None, log_level: int = logging.INFO) -> List[logging.Logger]:
    """
    Sends log records of the given loggers to stdout with colored levels.

    Calling it again replaces the handler instead of adding a second one. Records are not propagated
    further, so an application that also configures the root logger does not print them twice.

    Args:
        logger_names: Loggers to configure. Defaults to the package logger, which covers codec and
            validation messages.
        log_level: Minimum level that gets printed, e.g. ``logging.DEBUG`` to see decode failures.

    Returns:
        The configured loggers.
    """
    if logger_names is None:
        logger_names = [PACKAGE_LOGGER_NAME]

    loggers = []
    for logger_name in logger_names:
        logger = logging.getLogger(name=logger_name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(log_level)
        logger.propagate = False

        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(ColoredFormatter(fmt=LOG_FORMAT))
        logger.addHandler(handler)
        loggers.append(logger)
    return loggers
