"""Logging setup for the canvas mind map."""

import logging
import datetime
import os

LOGS_DIR = "logs"


def _session_log_filename():
    current_time = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(LOGS_DIR, f"mindmap_session_{current_time}.log")


def rotate_logs(max_logs=20):
    """Remove the oldest session logs, keeping the newest ``max_logs`` files.

    Returns:
        List of removed file names
    """
    removed = []
    if not os.path.exists(LOGS_DIR):
        return removed
    log_files = sorted(f for f in os.listdir(LOGS_DIR) if f.endswith('.log'))
    if len(log_files) <= max_logs:
        return removed
    for old_log in log_files[:-max_logs]:
        try:
            os.remove(os.path.join(LOGS_DIR, old_log))
            removed.append(old_log)
        except OSError as e:
            logging.getLogger(__name__).warning(f"Error removing log file {old_log}: {str(e)}")
    return removed


def get_logger(name=None):
    """Get a logger instance with proper configuration.

    Args:
        name: Optional name for the logger, defaults to the root logger

    Returns:
        A configured logger instance
    """
    logger = logging.getLogger(name)

    # Only configure if handlers haven't been set up
    if not logger.handlers:
        os.makedirs(LOGS_DIR, exist_ok=True)
        logger.setLevel(logging.DEBUG)
        log_filename = _session_log_filename()

        # File handler for debug+ messages
        file_handler = logging.FileHandler(log_filename)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )

        # Console handler for info+ messages
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(
            logging.Formatter('%(levelname)s: %(message)s')
        )

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        logger.info(f"Logger initialized. Logging to: {log_filename}")

    return logger
