"""Scrub provider credentials from strings before they reach the logs."""

from __future__ import annotations

import re

# (pattern, replacement) pairs applied in order.
_SECRET_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"([a-z][a-z0-9+.-]*://)([^@/\s]+)@", re.IGNORECASE), r"\1***@"),
    (re.compile(r"(?i)\b(api_key|apikey|key|token|access_token|secret|password)=([^&\s'\"]+)"), r"\1=***"),
    (re.compile(r"(?i)(bearer\s+)([A-Za-z0-9._~+/-]+=*)"), r"\1***"),
)


def redact_secrets(text: str) -> str:
    """Mask RAWG keys, TMDb api keys and bearer tokens, and URL userinfo."""
    if not text:
        return text
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text
