"""Redaction for log context. Payload values must pass through here before logging.

Message payloads carry JIDs, phone numbers, free text and inline media.
Only structure and sizes reach the logs.
"""

import re
from typing import Any

_JID_PATTERN = re.compile(r"[\w.+-]+@(?:s\.whatsapp\.net|g\.us|lid|broadcast)\b")
_PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{8,}\d")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_REDACTED = "[REDACTED]"

# Longer strings are media blobs or message bodies; log their size only
MAX_LOGGED_STRING = 64


def redact_string(value: str) -> str:
    """Mask JIDs, phone numbers and emails; summarize long strings by length."""
    if len(value) > MAX_LOGGED_STRING:
        return f"str(len={len(value)})"
    # JIDs first so the phone pattern does not half-mask them
    result = _JID_PATTERN.sub(_REDACTED, value)
    result = _PHONE_PATTERN.sub(_REDACTED, result)
    return _EMAIL_PATTERN.sub(_REDACTED, result)


def redact_value(value: Any) -> str:
    """Render any value as a log-safe string."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        # keys are structure, values may be PII
        return f"dict(keys={sorted(str(key) for key in value)})"
    if isinstance(value, (list, tuple)):
        return f"list(len={len(value)})"
    return f"<{type(value).__name__}>"


def safe_log_context(**fields: Any) -> dict[str, str]:
    """Build extra_fields for a log call with every value redacted."""
    return {name: redact_value(value) for name, value in fields.items()}
