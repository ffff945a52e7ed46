"""
Logging setup for the site builder service.

Configures the root logger once per process. Every module logs through
``logging.getLogger(__name__)``; records carry the current request id when
one is available.
"""
import json
import logging
import os
import sys

_CONFIGURED = False


class RequestIdFilter(logging.Filter):
    """Attach the active request id (or '-') to every record."""

    def filter(self, record):
        if not hasattr(record, 'request_id'):
            record.request_id = _current_request_id()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record):
        payload = {
            'ts': self.formatTime(record, '%Y-%m-%dT%H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'request_id': getattr(record, 'request_id', '-'),
        }
        if record.exc_info:
            payload['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _current_request_id() -> str:
    from flask import g, has_request_context
    if has_request_context():
        return getattr(g, 'request_id', '-')
    return '-'


def setup_logging(level: str = None, fmt: str = None) -> None:
    """
    Configure root logging.

    Args:
        level: Log level name, defaults to LOG_LEVEL env or INFO
        fmt: 'text' or 'json', defaults to LOG_FORMAT env or text
    """
    global _CONFIGURED
    level = (level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    fmt = fmt or os.getenv('LOG_FORMAT', 'text')

    root = logging.getLogger()
    root.setLevel(level)

    if _CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stdout)
    if fmt == 'json':
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s [%(name)s] [%(request_id)s] %(message)s'
        ))
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)

    # Quiet noisy libraries
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    _CONFIGURED = True
