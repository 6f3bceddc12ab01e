import logging
import os

from slash_engine.runtime_config import LOG_LEVEL_ENV, get_data_dir

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging() -> None:
    """Send package logs to a file under the XDG data directory.

    The terminal belongs to the prompt, so nothing is logged to stderr.
    """
    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    log_dir = get_data_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_dir / "slash_engine.log")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger("slash_engine")
    package_logger.setLevel(level)
    # Re-running setup (e.g. one CLI app per test) must not stack handlers
    for handler in list(package_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.addHandler(file_handler)
