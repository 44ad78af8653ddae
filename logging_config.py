"""Logging setup shared by the web app and the CLI."""

import json
import logging
from datetime import datetime, timezone

LOGGER_NAME = 'habit_tracker'


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    _STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
        'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
        'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
        'exc_text', 'stack_info', 'taskName',
    }

    def format(self, record):
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in self._STANDARD_ATTRS}
        if extra:
            log_data['extra'] = extra

        return json.dumps(log_data, default=str)


def setup_logging(app):
    """Attach a single console handler to the package logger and Flask's logger."""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)

    handler = logging.StreamHandler()
    if app.config.get('LOG_FORMAT') == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        ))

    for logger in (logging.getLogger(LOGGER_NAME), app.logger):
        logger.setLevel(level)
        logger.handlers.clear()
        logger.addHandler(handler)

    return logging.getLogger(LOGGER_NAME)


def get_logger(name):
    return logging.getLogger(f'{LOGGER_NAME}.{name}')
