"""Secret redaction for log lines and error messages.

Collaborator errors can echo request URLs or headers; tokens are masked
before they reach a log record or an audit event.
"""

import re
from typing import Final, List, Tuple

SENSITIVE_PATTERNS: Final[List[Tuple[str, str]]] = [
    (r"(?i)bearer\s+([a-zA-Z0-9_\-\.]+)", "BEARER_TOKEN"),
    (r"(?i)(?:token|authorization)\s*[:=]\s*['\"]?([^\s'\"]{8,})['\"]?", "TOKEN"),
    (r"(?i)(?:api[_-]?key|apikey)\s*[:=]\s*['\"]?([^\s'\"]{8,})['\"]?", "API_KEY"),
    (r"gh[pousr]_[a-zA-Z0-9]{36,}", "GITHUB_TOKEN"),
    (r"github_pat_[a-zA-Z0-9_]{22,}", "GITHUB_TOKEN"),
]
"""Patterns for sensitive values, as (regex, label) pairs."""

_COMPILED = [(re.compile(pattern), label) for pattern, label in SENSITIVE_PATTERNS]


def redact_secrets(text: str, *, max_length: int = 500) -> str:
    """Mask tokens and keys in ``text`` and truncate it to ``max_length``.

    Args:
        text: Input that may contain secrets.
        max_length: Truncation limit; longer text ends with "...".

    Returns:
        Text with each secret replaced by ``[REDACTED:<label>]``.
    """
    if not text:
        return text

    for pattern, label in _COMPILED:
        marker = f"[REDACTED:{label}]"

        def _replace(match: "re.Match[str]", marker: str = marker) -> str:
            if match.groups():
                return match.group(0).replace(match.group(1), marker)
            return marker

        text = pattern.sub(_replace, text)

    if len(text) > max_length:
        text = text[:max_length] + "..."
    return text
