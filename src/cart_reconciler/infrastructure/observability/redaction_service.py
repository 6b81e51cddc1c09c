import re
from typing import Any

SECRET_PATTERNS = [
    r"(Bearer\s+)([a-zA-Z0-9\-\._~+/=]+)",
    r"(apikey\s*[:=]\s*)(['\"]?[a-zA-Z0-9\-\._~+/=]+['\"]?)",
    r"(access_token\s*[:=]\s*)(['\"]?[a-zA-Z0-9\-\._~+/=]+['\"]?)",
    # Bare JWTs (Supabase anon keys and session tokens)
    r"()(eyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+)",
]

SENSITIVE_KEYS = {
    "authorization",
    "apikey",
    "access_token",
    "anon_key",
    "token",
    "password",
    "secret",
}


def redact_text(text: str) -> str:
    """Replace the secret group of every known pattern with [REDACTED]."""
    if not text:
        return text
    redacted_text = text
    for pattern in SECRET_PATTERNS:
        redacted_text = re.sub(pattern, r"\1[REDACTED]", redacted_text, flags=re.IGNORECASE)
    return redacted_text


def redact_dict(data: dict[str, Any]) -> dict[str, Any]:
    redacted: dict[str, Any] = {}
    for key, value in data.items():
        if key.lower() in SENSITIVE_KEYS:
            redacted[key] = "[REDACTED]"
        elif isinstance(value, dict):
            redacted[key] = redact_dict(value)
        elif isinstance(value, str):
            redacted[key] = redact_text(value)
        else:
            redacted[key] = value
    return redacted
