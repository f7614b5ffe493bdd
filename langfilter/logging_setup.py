"""
Log file setup
"""

import logging
import os
import time
from pathlib import Path

APP_LOGGER = 'langfilter'
DEFAULT_LOG_DIR = Path.home() / '.local' / 'share' / 'media-language-filter' / 'logs'

LOG_FORMAT = '[%(asctime)s] %(levelname)s %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class LoggingSetupError(Exception):
    """The log directory can't be created or written to"""


def setup_logging(log_dir: Path = DEFAULT_LOG_DIR) -> Path:
    """Attach a timestamped log file under `log_dir` and return its path"""
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise LoggingSetupError(f'Cannot create log directory {log_dir}: {e}') from e
    if not os.access(log_dir, os.W_OK):
        raise LoggingSetupError(f'Cannot write to log directory: {log_dir}')

    log_file = log_dir / f"processing-{time.strftime('%Y%m%d_%H%M%S')}.log"

    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()

    try:
        fh = logging.FileHandler(log_file, encoding='utf-8')
    except OSError as e:
        raise LoggingSetupError(f'Cannot open log file {log_file}: {e}') from e
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(fh)
    # Console output goes through the rich console, not the root logger
    logger.propagate = False

    return log_file
