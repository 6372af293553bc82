# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Diagnostic taxonomy for failed probes."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class DiagnosticCategory(str, Enum):
    GATEWAY_ERROR = "GATEWAY_ERROR"
    TIMEOUT = "TIMEOUT"
    PROTOCOL_MISMATCH = "PROTOCOL_MISMATCH"
    CONNECTION_REFUSED = "CONNECTION_REFUSED"
    UNCLASSIFIED = "UNCLASSIFIED"


# Order matters: first match wins.
_CLASSIFICATION_RULES: tuple[tuple[str, DiagnosticCategory], ...] = (
    ("502", DiagnosticCategory.GATEWAY_ERROR),
    ("timeout", DiagnosticCategory.TIMEOUT),
    ("SSL", DiagnosticCategory.PROTOCOL_MISMATCH),
    ("refused", DiagnosticCategory.CONNECTION_REFUSED),
)

_CATEGORY_HINTS: dict[DiagnosticCategory, str] = {
    DiagnosticCategory.GATEWAY_ERROR: "Bad Gateway: Server routing issue",
    DiagnosticCategory.TIMEOUT: "Timeout: Server may be overloaded",
    DiagnosticCategory.PROTOCOL_MISMATCH: "SSL Issue: Try HTTP version",
    DiagnosticCategory.CONNECTION_REFUSED: "Connection Refused: Port may be closed",
    DiagnosticCategory.UNCLASSIFIED: "",
}


def classify(error_message: str | None, *, case_sensitive: bool = True) -> DiagnosticCategory:
    """
    Map a transport error message to a DiagnosticCategory.

    Substring rules are checked in order and the first hit wins, so a message
    carrying both "502" and "timeout" is a gateway error.
    """
    message = error_message or ""
    if not case_sensitive:
        message = message.lower()
    for needle, category in _CLASSIFICATION_RULES:
        if (needle if case_sensitive else needle.lower()) in message:
            return category
    return DiagnosticCategory.UNCLASSIFIED


def category_hint(category: DiagnosticCategory | None) -> str:
    """Operator-facing hint line for a category (empty when there is nothing useful to say)."""
    if category is None:
        return ""
    return _CATEGORY_HINTS.get(category, "")


def categorize_exception(exc: BaseException) -> str:
    """
    Structured exception label stored next to the raw error message.

    Used for JSON output and logging; the report hints are driven by `classify`.
    """
    if isinstance(exc, httpx.TimeoutException):
        return "timeout"
    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return "ssl"
    if isinstance(exc, httpx.ConnectError) and "SSL" in str(exc):
        return "ssl"
    if isinstance(exc, (socket.gaierror, socket.herror)):
        return "dns"
    if isinstance(exc, ConnectionRefusedError) or "refused" in str(exc).lower():
        return "connection_refused"
    if isinstance(exc, (httpx.NetworkError, httpx.RemoteProtocolError, httpx.ProxyError, ConnectionError)):
        return "connection"
    return type(exc).__name__


__all__ = [
    "DiagnosticCategory",
    "categorize_exception",
    "category_hint",
    "classify",
]
