import logging
import sys

from ..config import load_config


def get_logger():
    logger = logging.getLogger("ppkconv")
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)
        fmt = logging.Formatter("[%(asctime)s] %(levelname)s %(message)s")
        h.setFormatter(fmt)
        logger.addHandler(h)
        logger.setLevel(load_config().log_level)
    return logger
