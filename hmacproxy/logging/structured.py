"""
HMAC Proxy Structured Logging
=============================

Structured logging for the proxy: structlog on top of the standard library
so uvicorn's own loggers share the same output.

Usage:
    from hmacproxy.logging import setup_logging, RequestLoggingMiddleware

    setup_logging(service_name="hmacproxy", level="INFO", json_output=True)
    app = RequestLoggingMiddleware(handler)
"""

import logging
import sys
import time
import uuid
from contextvars import ContextVar

import structlog

# Context variables for request tracking
request_id_var: ContextVar[str] = ContextVar("request_id", default="")
service_name_var: ContextVar[str] = ContextVar("service_name", default="unknown")


def _add_context(logger, method_name, event_dict):
    """structlog processor adding service name and request id."""
    event_dict.setdefault("service", service_name_var.get())
    request_id = request_id_var.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    return event_dict


# =============================================================================
# Setup Functions
# =============================================================================

def setup_logging(
    service_name: str,
    level: str = "INFO",
    json_output: bool = True,
) -> logging.Logger:
    """
    Configure logging for the proxy process.

    Args:
        service_name: Name reported in every log line
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: JSON lines for production, colored console otherwise

    Returns:
        Configured root logger
    """
    service_name_var.set(service_name)
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_context,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    structlog.get_logger(__name__).info("logging_configured", level=level.upper())
    return root_logger


def get_logger(name: str):
    """Get a structlog logger with the given name."""
    return structlog.get_logger(name)


# =============================================================================
# Request Logging Middleware
# =============================================================================

class RequestLoggingMiddleware:
    """
    ASGI middleware logging every request and its response.

    Header values are not logged; they may carry signatures.
    """

    def __init__(self, app):
        self.app = app
        self.logger = structlog.get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        req_id = str(uuid.uuid4())[:8]
        token = request_id_var.set(req_id)

        method = scope.get("method", "")
        path = scope.get("path", "")
        client = scope.get("client")
        client_ip = client[0] if client else ""

        start_time = time.time()
        self.logger.info(
            "request_received",
            method=method,
            path=path,
            client_ip=client_ip,
        )

        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            self.logger.exception("request_failed", method=method, path=path)
            raise
        finally:
            duration_ms = int((time.time() - start_time) * 1000)
            level = logging.INFO if status_code < 400 else logging.WARNING if status_code < 500 else logging.ERROR
            self.logger.log(
                level,
                "request_completed",
                method=method,
                path=path,
                status_code=status_code,
                duration_ms=duration_ms,
                client_ip=client_ip,
            )
            request_id_var.reset(token)
