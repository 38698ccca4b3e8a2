"""Logging configuration and management for the OutfitAI application.

This module provides the logging system used across the service:
- Structured logging with JSON formatting
- Correlation ID tracking across requests
- Request timing middleware
- Performance monitoring for model calls

Every log line carries the service name, environment and the correlation ID of
the request that produced it, so the three model calls and the image fan-out of
one suggestion request can be followed together.
"""

import logging
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

from outfitai.core.config import get_settings

# Get application settings
settings = get_settings()

# Context variable for correlation ID
correlation_id: ContextVar[str] = ContextVar('correlation_id', default='')


class StructuredLogger:
    """Custom logger that ensures consistent structured logging.

    Fields are attached to the record as ``extra`` so the JSON formatter emits
    them as top-level keys of a single object per line.
    """

    def __init__(self, name: str):
        """Initialize structured logger with given name."""
        self.logger = logging.getLogger(name)
        self.service_name = settings.APP_NAME
        self.environment = settings.ENVIRONMENT.value

    def _build_log_dict(
        self,
        additional_fields: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Build structured log fields common to every record."""
        log_dict = {
            'service': self.service_name,
            'environment': self.environment,
            'correlation_id': correlation_id.get(),
        }

        if additional_fields:
            log_dict.update(additional_fields)

        return log_dict

    def info(self, message: str, **kwargs):
        """Log info level message with structured data."""
        self.logger.info(message, extra=self._build_log_dict(kwargs))

    def error(self, message: str, error: Optional[BaseException] = None, **kwargs):
        """Log error level message with structured data and optional exception."""
        log_dict = self._build_log_dict(kwargs)

        if error:
            log_dict.update({
                'error_type': error.__class__.__name__,
                'error_message': str(error),
                'error_trace': self._get_traceback(error)
            })

        self.logger.error(message, extra=log_dict)

    def warning(self, message: str, **kwargs):
        """Log warning level message with structured data."""
        self.logger.warning(message, extra=self._build_log_dict(kwargs))

    def debug(self, message: str, **kwargs):
        """Log debug level message with structured data."""
        self.logger.debug(message, extra=self._build_log_dict(kwargs))

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


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter that stamps creation time and level on every record."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        log_record['level'] = record.levelname


def setup_logging():
    """Configure logging for the application."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    if any(isinstance(h.formatter, CustomJsonFormatter) for h in root.handlers):
        return

    json_handler = logging.StreamHandler()
    json_handler.setFormatter(CustomJsonFormatter())
    root.addHandler(json_handler)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)


# Performance monitoring decorator
def monitor_performance(name: str = None):
    """Decorator for monitoring coroutine performance."""
    def decorator(func):
        @wraps(func)
        async def wrapped(*args, **kwargs):
            logger = get_logger(func.__module__)
            start_time = time.time()

            try:
                result = await func(*args, **kwargs)
                process_time = (time.time() - start_time) * 1000

                logger.info(
                    f"Function {name or func.__name__} completed",
                    process_time_ms=round(process_time, 2)
                )

                return result
            except Exception as e:
                process_time = (time.time() - start_time) * 1000
                logger.error(
                    f"Function {name or func.__name__} failed",
                    error=e,
                    process_time_ms=round(process_time, 2)
                )
                raise

        return wrapped
    return decorator
