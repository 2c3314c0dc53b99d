"""
Logging helpers for user data.

Includes:
- Redaction of emails and secrets before they reach log lines
- Structured usage logging for AI analysis calls
"""
import json
import logging
import re
from typing import Any, Optional


# Keys whose values never reach the logs
SENSITIVE_KEYS = [
    "api_key", "token", "password", "secret", "auth",
    "email", "access_token", "refresh_token",
    "bearer", "authorization",
]

_EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')


def sanitize_for_logging(data: Any, max_len: int = 100) -> Any:
    """
    Sanitize data for safe logging.

    Dict values under sensitive keys are replaced, strings are stripped of
    control characters, email-redacted and truncated to ``max_len``.
    """
    if data is None:
        return "None"

    if isinstance(data, dict):
        sanitized = {}
        for k, v in data.items():
            if any(sensitive in str(k).lower() for sensitive in SENSITIVE_KEYS):
                sanitized[k] = "***REDACTED***"
            else:
                sanitized[k] = sanitize_for_logging(v, max_len)
        return sanitized

    if isinstance(data, (list, tuple)):
        return [sanitize_for_logging(item, max_len) for item in data]

    if isinstance(data, str):
        cleaned = redact_emails(re.sub(r'[\x00-\x1F\x7F]', '', data))
        if len(cleaned) > max_len:
            return cleaned[:max_len] + "..."
        return cleaned

    return sanitize_for_logging(str(data), max_len)


def redact_emails(text: str) -> str:
    """Replace email addresses in text with [EMAIL_REDACTED]."""
    return _EMAIL_PATTERN.sub('[EMAIL_REDACTED]', text)


def mask_email(email: Optional[str]) -> str:
    """
    Keep enough of an address to tell accounts apart in logs.

    >>> mask_email("jane.doe@example.com")
    'j***@example.com'
    """
    if not email or "@" not in email:
        return "***"
    local, _, domain = email.partition("@")
    return f"{local[:1]}***@{domain}"


# =============================================================================
# STRUCTURED USAGE LOGGING
# =============================================================================

_usage_logger = logging.getLogger("MindfulJournal.Usage")


def log_llm_usage(
    model: str,
    input_tokens: int,
    output_tokens: int,
    duration_ms: Optional[int] = None,
    endpoint: str = "analysis",
) -> None:
    """
    Log a structured usage event for an LLM API call.

    Produces a single line that log aggregation can parse for token
    dashboards.
    """
    event = {
        "event": "llm_usage",
        "model": model,
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": input_tokens + output_tokens,
        "endpoint": endpoint,
    }

    if duration_ms is not None:
        event["duration_ms"] = duration_ms

    _usage_logger.info("LLM_USAGE %s", json.dumps(event))
