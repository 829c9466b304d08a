import logging


def get_logger(name: str) -> logging.Logger:
    """
    Logger that plays well with uvicorn.

    - Attaches a single stream handler per logger name
    - Leaves the root/uvicorn configuration untouched
    """

    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

        logger.propagate = False

    return logger
