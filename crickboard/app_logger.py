import logging

from crickboard import config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging():
    level = getattr(logging, config.log_level(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    logger = logging.getLogger("crickboard")
    logger.setLevel(level)

    # Streamlit reruns re-import pages; keep a single console handler
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(LOG_FORMAT))
        ch.setLevel(level)
        logger.addHandler(ch)

    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger("crickboard")
    return base.getChild(name) if name else base


logger = setup_logging()
