"""Structured logging for AssetDesk.

Every log line is a JSON object carrying the service name, environment and
the request's correlation id. Request middleware records timing and sets the
``X-Process-Time`` header; ``monitor_performance`` records per-endpoint
outcomes, including envelopes rejected by a business rule.
"""

import logging
import json
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from contextvars import ContextVar
from functools import wraps
import uuid
from pythonjsonlogger.json import JsonFormatter
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.core.config import get_settings

# Context variable for correlation ID
correlation_id: ContextVar[str] = ContextVar('correlation_id', default='')

class StructuredLogger:
    """Custom logger that ensures consistent structured logging."""

    def __init__(self, name: str):
        """Initialize structured logger with given name."""
        settings = get_settings()
        self.logger = logging.getLogger(name)
        self.service_name = settings.APP_NAME
        self.environment = settings.ENVIRONMENT.value

    def _build_log_dict(
        self,
        message: str,
        level: str,
        additional_fields: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Build structured log dictionary with common fields."""
        log_dict = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'service': self.service_name,
            'environment': self.environment,
            'level': level,
            'message': message,
            'correlation_id': correlation_id.get(),
        }

        if additional_fields:
            log_dict.update(additional_fields)

        return log_dict

    def _emit(self, level: int, log_dict: Dict[str, Any]):
        self.logger.log(level, json.dumps(log_dict, default=str))

    def info(self, message: str, **kwargs):
        """Log info level message with structured data."""
        self._emit(logging.INFO, self._build_log_dict(message, 'INFO', kwargs))

    def error(self, message: str, error: Optional[BaseException] = None, **kwargs):
        """Log error level message with structured data and optional exception."""
        log_dict = self._build_log_dict(message, 'ERROR', kwargs)

        if error is not None:
            log_dict.update({
                'error_type': error.__class__.__name__,
                'error_message': str(error),
                'error_trace': self._get_traceback(error)
            })

        self._emit(logging.ERROR, log_dict)

    def warning(self, message: str, **kwargs):
        """Log warning level message with structured data."""
        self._emit(logging.WARNING, self._build_log_dict(message, 'WARNING', kwargs))

    def debug(self, message: str, **kwargs):
        """Log debug level message with structured data."""
        self._emit(logging.DEBUG, self._build_log_dict(message, 'DEBUG', kwargs))

    @staticmethod
    def _get_traceback(error: BaseException) -> str:
        """Get formatted traceback from exception."""
        return ''.join(traceback.format_exception(
            type(error),
            error,
            error.__traceback__
        ))

class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware to handle correlation ID for request tracking."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request with correlation ID tracking."""
        token = correlation_id.set(
            request.headers.get('X-Correlation-ID', str(uuid.uuid4()))
        )

        try:
            response = await call_next(request)
            response.headers['X-Correlation-ID'] = correlation_id.get()
            return response
        except Exception as e:
            logger = get_logger(__name__)
            logger.error(
                "Request processing failed",
                error=e,
                path=request.url.path,
                method=request.method
            )
            raise
        finally:
            correlation_id.reset(token)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging request and response details."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        """Log request and response details."""
        logger = get_logger(__name__)
        start_time = time.time()

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query_params=dict(request.query_params),
            client_host=request.client.host if request.client else None
        )

        try:
            response = await call_next(request)

            process_time = (time.time() - start_time) * 1000
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                process_time_ms=round(process_time, 2)
            )
            response.headers['X-Process-Time'] = f"{process_time:.2f}"

            return response
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                "Request failed",
                error=e,
                method=request.method,
                path=request.url.path,
                process_time_ms=round(process_time, 2)
            )
            raise

def setup_logging():
    """Configure logging for the application."""
    settings = get_settings()

    class CustomJsonFormatter(JsonFormatter):
        def add_fields(self, log_record, record, message_dict):
            super().add_fields(log_record, record, message_dict)
            log_record['timestamp'] = record.created
            log_record['level'] = record.levelname
            log_record['logger'] = record.name

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    # Replace handlers so repeated calls don't duplicate output
    json_handler = logging.StreamHandler()
    json_handler.setFormatter(CustomJsonFormatter())
    root.handlers = [json_handler]

    # SQL echo goes through the same handler
    if settings.DB.DB_ECHO:
        logging.getLogger('sqlalchemy.engine').setLevel(logging.INFO)

def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)

def _resource_ids(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in arguments.items() if key.endswith('_id')}

def monitor_performance(name: Optional[str] = None):
    """Time an endpoint and log its outcome.

    Path identifiers (``user_id``, ``assignment_id``...) are attached to the
    log entry. Envelopes answered with a 4xx status are logged as rejected
    rather than completed.
    """
    def decorator(func):
        operation = name or func.__name__

        @wraps(func)
        async def wrapped(*args, **kwargs):
            logger = get_logger(func.__module__)
            start_time = time.perf_counter()
            resource_ids = _resource_ids(kwargs)

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"{operation} failed",
                    error=e,
                    process_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
                    **resource_ids
                )
                raise

            process_time = round((time.perf_counter() - start_time) * 1000, 2)
            status_code = getattr(result, 'status_code', None)
            if status_code is not None and status_code >= 400:
                logger.warning(
                    f"{operation} rejected",
                    status_code=status_code,
                    process_time_ms=process_time,
                    **resource_ids
                )
            else:
                logger.info(
                    f"{operation} completed",
                    process_time_ms=process_time,
                    **resource_ids
                )
            return result

        return wrapped
    return decorator
