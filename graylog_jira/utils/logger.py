"""Secure logging utilities for the Graylog → Jira bridge.

Provides sanitized logging that removes sensitive information like
credentials, emails and API tokens before outputting to logs.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger('graylog-jira')


def set_level(level: str) -> None:
    """Apply the configured log level to the bridge logger."""
    logger.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))


def sanitize_text(text: str) -> str:
    """Remove sensitive information from text.

    Args:
        text: Input text that may contain sensitive data

    Returns:
        Sanitized text with sensitive patterns replaced
    """
    if not text:
        return text

    # Email addresses
    text = re.sub(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}', '<email>', text)

    # Basic-auth credentials embedded in URLs
    text = re.sub(r'(https?://)[^/\s:@]+:[^/\s@]+@', r'\1<credentials>@', text)

    # Authorization headers
    text = re.sub(r'Basic [A-Za-z0-9+/=]{8,}', 'Basic <redacted>', text)

    # API tokens (long opaque strings)
    text = re.sub(r'\b[A-Za-z0-9_\-]{40,}\b', '<token>', text)

    return text


def safe_json(obj: Any, max_length: int = 1000) -> str:
    """Safely serialize object to JSON with sensitive data sanitized.

    Args:
        obj: Object to serialize
        max_length: Maximum length of output string

    Returns:
        Sanitized JSON string
    """
    try:
        json_str = json.dumps(obj, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return "<unable to serialize>"

    sanitized = sanitize_text(json_str)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "... [truncated]"
    return sanitized


def log_info(message: str, **kwargs) -> None:
    """Log info message with optional sanitized context."""
    if kwargs:
        logger.info(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.info(message)


def log_warning(message: str, **kwargs) -> None:
    """Log warning message with optional sanitized context."""
    if kwargs:
        logger.warning(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.warning(message)


def log_error(message: str, **kwargs) -> None:
    """Log error message with optional sanitized context."""
    if kwargs:
        logger.error(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.error(message)


def log_debug(message: str, **kwargs) -> None:
    """Log debug message with optional sanitized context."""
    if kwargs:
        logger.debug(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.debug(message)


def log_api_response(operation: str, status_code: int, response_data: Optional[Dict] = None) -> None:
    """Log API response with sanitized data.

    Args:
        operation: Description of the API operation
        status_code: HTTP status code
        response_data: Optional response data to log (will be sanitized)
    """
    if response_data:
        log_info(f"API {operation} completed",
                 status_code=status_code,
                 response_preview=safe_json(response_data, max_length=500))
    else:
        log_info(f"API {operation} completed", status_code=status_code)


def log_ticket_operation(operation: str, ticket_key: Optional[str] = None, **kwargs) -> None:
    """Log ticket-related operations with sanitized context."""
    context = {"operation": operation}
    if ticket_key:
        context["ticket_key"] = ticket_key
    context.update(kwargs)

    log_info(f"Ticket operation: {operation}", **context)


def log_duplicate_detection(existing_key: Optional[str], digest: str, **kwargs) -> None:
    """Log a positive duplicate detection."""
    log_warning("Duplicate detected",
                existing_ticket=existing_key,
                digest=digest,
                **kwargs)


def log_alert_progress(stage: str, **kwargs) -> None:
    """Log alert processing progress through the pipeline stages."""
    log_info(f"Alert progress: {stage}", **kwargs)
