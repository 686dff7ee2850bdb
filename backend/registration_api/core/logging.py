import logging

from registration_api.core.settings import settings

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Logger that plays well with uvicorn.

    - Attaches one stream handler per logger name
    - Leaves uvicorn's own loggers alone
    - Does not propagate, so lines are never printed twice
    """

    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))

        logger.addHandler(handler)
        logger.setLevel(settings.LOG_LEVEL.upper())

        logger.propagate = False

    return logger
