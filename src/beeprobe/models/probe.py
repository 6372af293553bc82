# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe candidate, outcome and session models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from ..errors import DiagnosticCategory


@dataclass(frozen=True)
class CandidateEndpoint:
    url: str


@dataclass(frozen=True)
class ProbeSuccess:
    """The transport completed; `status_code` is whatever the server sent back."""

    status_code: int
    status_message: str
    content_type: str
    body_preview: str

    @property
    def is_2xx(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class ProbeFailure:
    error_message: str
    error_type: str | None = None


ProbeOutcome = Union[ProbeSuccess, ProbeFailure]


@dataclass(frozen=True)
class ProbeRecord:
    index: int
    candidate: CandidateEndpoint
    outcome: ProbeOutcome
    category: DiagnosticCategory | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"index": self.index, "url": self.candidate.url}
        if isinstance(self.outcome, ProbeSuccess):
            data.update(
                {
                    "result": "success",
                    "status_code": self.outcome.status_code,
                    "status_message": self.outcome.status_message,
                    "content_type": self.outcome.content_type,
                    "body_preview": self.outcome.body_preview,
                }
            )
        else:
            data.update(
                {
                    "result": "failure",
                    "error_message": self.outcome.error_message,
                    "error_type": self.outcome.error_type,
                    "category": self.category.value if self.category else None,
                }
            )
        return data


@dataclass
class ProbeSession:
    """Ordered results of one run. Records are appended in candidate order."""

    records: list[ProbeRecord] = field(default_factory=list)
    successful_endpoints: list[CandidateEndpoint] = field(default_factory=list)
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": [record.to_dict() for record in self.records],
            "successful_endpoints": [endpoint.url for endpoint in self.successful_endpoints],
            "completed": self.completed,
        }


def truncate_preview(body: str, limit: int = 100) -> str:
    if len(body) > limit:
        return body[:limit] + "..."
    return body
