# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Connectivity diagnostic engine."""

from .candidates import build_candidates, candidates_from_urls
from .report import ReportFormatter, format_record, format_session, format_summary
from .runner import ProbeRunner
from .task import ProbeTask

__all__ = [
    "ProbeRunner",
    "ProbeTask",
    "ReportFormatter",
    "build_candidates",
    "candidates_from_urls",
    "format_record",
    "format_session",
    "format_summary",
]
