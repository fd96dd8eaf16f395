"""
JSON logging for wordchain runs.

Console records go to stderr so that generated text on stdout stays clean.
"""

from datetime import datetime
import os
import logging
import json
import sys


class JsonLogger(logging.Formatter):
    """
    Formatter that renders each log record as a single JSON object.

    ``context`` holds fields stamped onto every record of a run (for example
    the config environment), and per-call values arrive through
    ``extra={"metrics": {...}}``.
    """

    def __init__(self, context=None):
        super().__init__()
        self.context = dict(context or {})

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'path': record.pathname,
            'line': record.lineno,
            'function': record.funcName
        }

        if self.context:
            log_data['context'] = self.context

        if hasattr(record, 'metrics'):
            log_data['metrics'] = record.metrics

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }

        # Trained words and dataset paths end up in metrics, never fail on them
        return json.dumps(log_data, default=str, ensure_ascii=False)


def setup_log_file(log_file_path):
    """Create the parent directory of ``log_file_path`` and return the path."""
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    return log_file_path


def get_logger(logger_name, log_file=None, context=None, clear_existing=True):
    """
    Get a logger that writes JSON records.

    Args:
        logger_name (str): Name for the logger
        log_file (str, optional): Also write DEBUG and above to this file
        context (dict, optional): Fields added to every record
        clear_existing (bool): Whether to replace handlers from an earlier call

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)

    if clear_existing and logger.handlers:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    if logger.handlers:
        return logger

    formatter = JsonLogger(context=context)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(setup_log_file(log_file), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
