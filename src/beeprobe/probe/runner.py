# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Sequential connectivity probe over a candidate endpoint list."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable

from ..config import ProbeSettings, load_probe_settings
from ..errors import categorize_exception, classify
from ..http.client import HttpClient, create_default_http_client
from ..http.httpx_client import describe_exception
from ..http.models import HttpRequest, HttpResponse
from ..models import (
    CandidateEndpoint,
    ProbeFailure,
    ProbeRecord,
    ProbeSession,
    ProbeSuccess,
    truncate_preview,
)
from .report import ReportFormatter

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

SUCCESS_STATUS_LINE = "Status: 200"


class ProbeRunner:
    """
    Probe every candidate once, in order, and collect a ProbeSession.

    A transport error never escapes `run`; it becomes a ProbeFailure and the
    loop moves on. Successes do not stop the loop either: the point is to
    enumerate every working variant.
    """

    def __init__(self, http_client: HttpClient | None = None, settings: ProbeSettings | None = None):
        self.settings = settings or load_probe_settings()
        self.http_client = http_client or create_default_http_client(self.settings)

    def run(
        self,
        candidates: Iterable[CandidateEndpoint],
        on_progress: ProgressCallback | None = None,
        interrupt: threading.Event | None = None,
    ) -> ProbeSession:
        """
        Probe `candidates` in order.

        Once `interrupt` is set, the current and remaining pauses are skipped;
        the run itself always completes.
        """
        if interrupt is None:
            interrupt = threading.Event()
        session = ProbeSession()
        formatter = ReportFormatter()

        for index, candidate in enumerate(candidates, start=1):
            record = self.probe(candidate, index)
            session.records.append(record)
            snapshot = formatter.append(record)
            if self._counts_as_successful(record):
                session.successful_endpoints.append(candidate)
            if on_progress is not None:
                on_progress(snapshot)
            self._pause(interrupt)

        session.completed = True
        logger.info(
            "Probe run finished: %d/%d endpoints successful",
            len(session.successful_endpoints),
            len(session.records),
        )
        return session

    def probe(self, candidate: CandidateEndpoint, index: int) -> ProbeRecord:
        logger.info("Probing %s (test %d)", candidate.url, index)
        request = HttpRequest(
            url=candidate.url,
            headers={"User-Agent": self.settings.user_agent},
            timeout=self.settings.timeout,
            allow_redirects=self.settings.allow_redirects,
        )
        try:
            response = self.http_client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse(
                ok=False,
                error_message=describe_exception(exc),
                error_type=categorize_exception(exc),
            )

        if response.ok and response.status_code is not None:
            outcome = ProbeSuccess(
                status_code=response.status_code,
                status_message=response.reason_phrase,
                content_type=response.content_type,
                body_preview=truncate_preview(response.text, self.settings.body_preview_chars),
            )
            logger.debug("%s answered %s", candidate.url, response.status_code)
            return ProbeRecord(index=index, candidate=candidate, outcome=outcome)

        message = response.error_message or "Unknown transport error"
        category = classify(message, case_sensitive=not self.settings.case_insensitive_hints)
        logger.debug("%s failed (%s): %s", candidate.url, category.value, message)
        return ProbeRecord(
            index=index,
            candidate=candidate,
            outcome=ProbeFailure(error_message=message, error_type=response.error_type),
            category=category,
        )

    def _counts_as_successful(self, record: ProbeRecord) -> bool:
        if not isinstance(record.outcome, ProbeSuccess):
            return False
        if self.settings.count_any_2xx:
            return record.outcome.is_2xx
        # Only a literal 200 makes the summary; other 2xx stay per-record successes.
        return f"Status: {record.outcome.status_code}" == SUCCESS_STATUS_LINE

    def _pause(self, interrupt: threading.Event) -> None:
        delay = self.settings.probe_delay
        if delay <= 0:
            return
        if interrupt.wait(delay):
            logger.debug("Inter-probe pause interrupted")

    def close(self) -> None:
        if hasattr(self.http_client, "close"):
            self.http_client.close()


__all__ = ["ProbeRunner", "ProgressCallback"]
