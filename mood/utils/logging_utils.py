"""
Structured logging for the mood insights app.

- Request correlation ids carried in thread-local context
- JSON formatter for machine-readable log lines
- Middleware that stamps every API response and logs it
- Timing decorator for engine and service calls
"""
import json
import logging
import threading
import time
import uuid
from functools import wraps

logger = logging.getLogger(__name__)

_request_context = threading.local()

# LogRecord attributes that are not user-supplied `extra` fields
_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info', 'thread', 'threadName',
    'exc_info', 'exc_text', 'message', 'taskName',
))


# ============================================================================
# REQUEST ID MANAGEMENT
# ============================================================================

def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def get_request_id() -> str:
    """Current request id, or '-' outside a request (scheduler jobs, shell)."""
    return getattr(_request_context, 'request_id', None) or '-'


def set_request_id(request_id: str):
    _request_context.request_id = request_id


def clear_request_context():
    if hasattr(_request_context, 'request_id'):
        delattr(_request_context, 'request_id')


# ============================================================================
# FORMATTER
# ============================================================================

class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line:
    {"timestamp": "...", "level": "INFO", "logger": "mood.services...", "request_id": "ab12cd34", "message": "..."}
    """

    def format(self, record):
        payload = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'request_id': get_request_id(),
            'message': record.getMessage(),
        }

        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith('_'):
                continue
            payload[key] = value

        return json.dumps(payload, default=str)


class RequestIDFilter(logging.Filter):
    """Adds `request_id` to records for plain-text formatters."""

    def filter(self, record):
        record.request_id = get_request_id()
        return True


# ============================================================================
# HELPERS
# ============================================================================

def log_with_context(level: str, message: str, log=None, **extra):
    """
    Log `message` with extra structured fields.

    Usage:
        log_with_context('info', 'Correlations recomputed', user_id=7, rows=4)
    """
    target = log or logger
    log_func = getattr(target, level.lower(), target.info)
    log_func(message, extra=extra)


def log_api_request(request, response_status: int, duration_ms: float):
    user = getattr(request, 'user', None)
    log_with_context(
        'info',
        f'{request.method} {request.path} -> {response_status}',
        method=request.method,
        path=request.path,
        status=response_status,
        duration_ms=round(duration_ms, 2),
        user_id=getattr(user, 'id', None),
    )


# ============================================================================
# MIDDLEWARE
# ============================================================================

class RequestIDMiddleware:
    """
    Assigns a correlation id to every request.

    Honours an incoming X-Request-ID header and echoes the id back.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.META.get('HTTP_X_REQUEST_ID') or new_request_id()
        set_request_id(request_id)
        start = time.monotonic()

        try:
            response = self.get_response(request)
            response['X-Request-ID'] = request_id
            log_api_request(request, response.status_code, (time.monotonic() - start) * 1000)
            return response
        finally:
            clear_request_context()


# ============================================================================
# TIMING DECORATOR
# ============================================================================

def log_execution_time(label: str = None):
    """
    Log how long the wrapped call took, and failures with their type.

    Usage:
        @log_execution_time('correlations.recompute')
        def recompute(self):
            ...
    """
    def decorator(func):
        name = label or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log_with_context(
                    'warning', f'{name} failed: {e}',
                    duration_ms=round((time.monotonic() - start) * 1000, 2),
                    error_type=type(e).__name__,
                )
                raise
            log_with_context(
                'debug', f'{name} finished',
                duration_ms=round((time.monotonic() - start) * 1000, 2),
            )
            return result

        return wrapper
    return decorator
