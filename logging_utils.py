import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(name: str = __name__, level: int = logging.WARNING) -> logging.Logger:
    # stdout carries program output, so log records go to stderr
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format=LOG_FORMAT,
            handlers=[logging.StreamHandler(sys.stderr)],
        )
    return logging.getLogger(name)
