# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Candidate endpoint list: every scheme/port variant of one host."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..models import CandidateEndpoint

DEFAULT_SCHEMES: tuple[str, ...] = ("https", "http")
DEFAULT_PORTS: tuple[str, ...] = ("", ":5000", ":3000")


def build_candidates(
    host: str,
    *,
    schemes: Sequence[str] = DEFAULT_SCHEMES,
    ports: Sequence[str] = DEFAULT_PORTS,
) -> tuple[CandidateEndpoint, ...]:
    """Scheme-major ordering: all ports for the first scheme, then the next."""
    host = host.strip().rstrip("/")
    if not host:
        raise ValueError("host must not be empty")
    return tuple(CandidateEndpoint(f"{scheme}://{host}{port}/") for scheme in schemes for port in ports)


def candidates_from_urls(urls: Iterable[str]) -> tuple[CandidateEndpoint, ...]:
    return tuple(CandidateEndpoint(url) for url in urls if url)
