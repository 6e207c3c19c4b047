import logging
import sys


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def configure_logging(level='INFO'):
    """
    Install a single stdout handler on the ``bookmaru`` logger.

    Safe to call once per app; repeated calls only adjust the level so test
    sessions creating several apps do not stack handlers.
    """
    global _configured

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger('bookmaru')
    logger.setLevel(level)

    if _configured:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    # Keep werkzeug's request log quiet unless something goes wrong
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    _configured = True
    return logger
