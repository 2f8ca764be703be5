# ABOUTME: Logging configuration and structured logger helpers
# ABOUTME: loguru sinks for output, structlog bound loggers for keyword context

from .config import LoggingMode, configure_logging, get_logging_status
from .utils import get_logger, log_api_call, with_asset_context, with_operation_context

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "get_logging_status",
    # Utilities
    "get_logger",
    "log_api_call",
    "with_asset_context",
    "with_operation_context",
]
