"""Error taxonomy & redaction.

Everything the tool prints about a failure goes through here first:

- classify_error(exc) -> ErrorInfo
- redact(text) -> str

Exceptions raised inside relnotes carry a ``category`` class attribute; foreign
exceptions (requests, json) are classified by type and message.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

import requests

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"gh[pousr]_[A-Za-z0-9]{20,255}"),  # classic / OAuth / app tokens
    re.compile(r"github_pat_\w{20,}"),  # fine-grained tokens
    re.compile(r"(?i)(authorization:\s*(?:bearer|token)\s+)\S+"),
]

_REDACTION_PLACEHOLDER = "<redacted>"

AUTH_STATUSES = frozenset({401, 403, 404})


class InvalidSelectionError(ValueError):
    """Console input was not a number within the displayed range."""

    category = "selection"

    def __init__(self, raw: str, upper: int):
        super().__init__(f"Invalid selection: {raw!r} (expected 1-{upper})")
        self.raw = raw
        self.upper = upper


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    details: dict[str, Any] | None = None


def redact(text: str) -> str:
    """Replace GitHub tokens and authorization headers with a placeholder."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        if pat.groups:
            redacted = pat.sub(lambda m: m.group(1) + _REDACTION_PLACEHOLDER, redacted)
        else:
            redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of an exception.

    - own exceptions -> their ``category`` (HTTP 401/403/404 -> 'github.auth')
    - requests transport errors -> 'network'
    - JSON decoding errors -> 'decode'
    - fallback -> 'generic'
    """
    msg = redact(str(exc))
    name = exc.__class__.__name__
    status = getattr(exc, "status", None)
    category = getattr(exc, "category", None)

    if isinstance(status, int):
        details: dict[str, Any] = {"status": status}
        url = getattr(exc, "url", None)
        if url:
            details["url"] = url
        if status in AUTH_STATUSES:
            return ErrorInfo("github.auth", msg, name, details)
        return ErrorInfo("github.http", msg, name, details)
    if isinstance(category, str):
        return ErrorInfo(category, msg, name)
    if isinstance(exc, json.JSONDecodeError):
        return ErrorInfo("decode", msg, name)
    if isinstance(exc, requests.RequestException):
        return ErrorInfo("network", msg, name)
    return ErrorInfo("generic", msg, name)


__all__ = ["ErrorInfo", "InvalidSelectionError", "classify_error", "redact"]
