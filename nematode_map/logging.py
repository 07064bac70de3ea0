import logging
from typing import Callable, Optional, TypeVar

from contexttimer import Timer

logger = logging.getLogger(__name__)

T = TypeVar("T")


def configure_logging(log_file: Optional[str]) -> None:
    if log_file:
        logging.basicConfig(filename=log_file, encoding="utf-8", level=logging.INFO)
    else:
        logging.basicConfig(level=logging.INFO)


def log_action(action: str, func: Callable[[], T]) -> T:
    logger.info(f"Running {action}")
    with Timer() as timer:
        result = func()
    logger.info(f"{action} completed in {timer.elapsed:.4f}s")
    return result
