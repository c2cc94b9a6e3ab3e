"""
snapcore/log.py
---------------
Console logging for scripts built on the suite.
Library modules only create loggers; handlers are installed here, on request.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s :: %(message)s"


def configure_logging(level=logging.INFO, fmt=LOG_FORMAT):
    """
    Installs a single stream handler on the suite's package loggers.

    Args:
        level (int | str): Logging level, e.g. logging.DEBUG or "DEBUG".
        fmt (str): Format string for the handler.

    Returns:
        logging.Handler: The installed handler (shared by all packages).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))

    for name in ("snapsphere", "snapcrust", "snapcore"):
        pkg_logger = logging.getLogger(name)
        # Re-configuring must not stack handlers
        for old in list(pkg_logger.handlers):
            if getattr(old, "_snapcore_handler", False):
                pkg_logger.removeHandler(old)
        pkg_logger.addHandler(handler)
        pkg_logger.setLevel(level)

    handler._snapcore_handler = True
    return handler
