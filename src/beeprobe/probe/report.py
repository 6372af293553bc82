# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Textual report rendering for probe sessions.

The transcript only ever grows: record blocks are appended in order and the
summary is added once, after the last record. Any snapshot taken mid-run is a
prefix of the final report.
"""

from __future__ import annotations

from ..errors import category_hint
from ..models import ProbeRecord, ProbeSession, ProbeSuccess

SEPARATOR = "---"
SUMMARY_HEADER = "=== SUMMARY ==="
STARTING_MESSAGE = "Starting connection tests...\n\n"


def format_record(record: ProbeRecord) -> str:
    lines = [f"Test {record.index}: {record.candidate.url}"]
    outcome = record.outcome
    if isinstance(outcome, ProbeSuccess):
        lines.append("✅ SUCCESS")
        lines.append(f"Status: {outcome.status_code}")
        lines.append(f"Message: {outcome.status_message}")
        lines.append(f"Content-Type: {outcome.content_type}")
        lines.append(f"Content: {outcome.body_preview}")
    else:
        lines.append("❌ FAILED")
        lines.append(f"Error: {outcome.error_message}")
        hint = category_hint(record.category)
        if hint:
            lines.append(f"→ {hint}")
    lines.append(SEPARATOR)
    return "\n".join(lines) + "\n\n"


def format_summary(session: ProbeSession) -> str:
    parts = [f"\n{SUMMARY_HEADER}\n"]
    if not session.successful_endpoints:
        parts.append("❌ No successful connections found\n")
        parts.append("This suggests a network or server configuration issue.\n")
    else:
        parts.append("✅ Successful connections:\n")
        for endpoint in session.successful_endpoints:
            parts.append(f"• {endpoint.url}\n")
        parts.append("\nUse these URLs for your app integration.\n")
    return "".join(parts)


def format_session(session: ProbeSession) -> str:
    text = "".join(format_record(record) for record in session.records)
    if session.completed:
        text += format_summary(session)
    return text


class ReportFormatter:
    """Incremental transcript buffer; each `append` extends the previous snapshot."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, record: ProbeRecord) -> str:
        self._parts.append(format_record(record))
        return self.text

    @property
    def text(self) -> str:
        return "".join(self._parts)


__all__ = [
    "STARTING_MESSAGE",
    "ReportFormatter",
    "format_record",
    "format_session",
    "format_summary",
]
