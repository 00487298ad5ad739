import logging

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-15s | %(message)s"


def setup_logging(log_level: str = "WARNING") -> logging.Logger:
    # one console handler on the package logger, safe to call repeatedly
    logger = logging.getLogger("weathernow")
    logger.setLevel(getattr(logging, log_level.upper()))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    # connection pool chatter is noise next to our own request logs
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return logger
