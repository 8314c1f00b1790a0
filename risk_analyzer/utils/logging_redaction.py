"""
Logging redaction helpers.
Redacts API tokens and contact e-mail addresses from log messages.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable


_PATTERNS: Iterable[tuple[re.Pattern, str]] = (
    # Authorization: Bearer <token>
    (re.compile(r"(Bearer\s+)([A-Za-z0-9\-\._]+)"), r"\1[REDACTED]"),
    # HubSpot private app tokens outside a header
    (re.compile(r"\bpat-[a-z]{2,3}\d?-[A-Za-z0-9\-]{8,}"), "pat-[REDACTED]"),
    # Generic access token key/value
    (re.compile(r"(?i)(access_token|token)\s*[:=]\s*([A-Za-z0-9\-\._]+)"), r"\1=[REDACTED]"),
    # Mistral / HubSpot keys echoed from config
    (re.compile(r"(?i)(api[_-]?key|api[_-]?secret)\s*[:=]\s*([A-Za-z0-9\-\._]+)"), r"\1=[REDACTED]"),
    # E-mail addresses: keep the domain for debugging, drop the mailbox
    (re.compile(r"[A-Za-z0-9._%+\-]+@([A-Za-z0-9.\-]+\.[A-Za-z]{2,})"), r"[REDACTED]@\1"),
)


def redact_message(message: str) -> str:
    redacted = message
    for pattern, replacement in _PATTERNS:
        redacted = pattern.sub(replacement, redacted)
    return redacted


class RedactingFilter(logging.Filter):
    """
    Rewrites each record's fully formatted message with secrets masked.

    Records are never dropped. A record whose args do not match its
    format string is passed through so the handler reports it.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            return True
        record.msg = redact_message(message)
        record.args = ()
        return True


def install_redaction_filter() -> None:
    """
    Attach a RedactingFilter to the root logger and its handlers.

    Logger-level filters do not see records propagated from child
    loggers, so the handlers need their own copy.
    """
    root = logging.getLogger()
    targets = [root, *root.handlers]
    for target in targets:
        # Avoid duplicate filters
        if any(isinstance(existing, RedactingFilter) for existing in target.filters):
            continue
        target.addFilter(RedactingFilter())
