"""Redaction helpers for log fields that may carry guest data.

Booking logs carry ids and dates only; anything else coming from a request
goes through safe_log_context() first.
"""

import re
from datetime import date
from typing import Any

_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{8,}\d")

_REDACTED = "[REDACTED]"


def redact_string(value: str) -> str:
    """Mask e-mail addresses and phone numbers inside free text."""
    return _PHONE_PATTERN.sub(_REDACTED, _EMAIL_PATTERN.sub(_REDACTED, value))


def redact_value(value: Any) -> str:
    """Render a value for logging without leaking its contents."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        return f"dict(keys={sorted(value.keys())})"
    if isinstance(value, (list, tuple, set)):
        return f"{type(value).__name__}(len={len(value)})"
    return f"<{type(value).__name__}>"


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    return {key: redact_value(value) for key, value in kwargs.items()}
