# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for beeprobe."""

import os
from dataclasses import dataclass

DEFAULT_USER_AGENT = "BeeTagged-Android-Test/1.0"
DEFAULT_HOST = "d49cd8c1-1139-4a7e-96a2-5d125f417ecd-00-3ftoc46fv9y6p.riker.replit.dev"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_int_env(name: str, default: int | None) -> int | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = int(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


@dataclass
class ProbeSettings:
    """Connectivity probe defaults."""

    host: str = DEFAULT_HOST
    timeout: float = 10.0
    probe_delay: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True
    allow_redirects: bool = True
    body_preview_chars: int = 100
    max_body_bytes: int = 1024 * 1024
    count_any_2xx: bool = False
    case_insensitive_hints: bool = False

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("BEEPROBE_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        preview_chars = _int_env("BEEPROBE_PREVIEW_CHARS", cls.body_preview_chars)
        if preview_chars <= 0:
            preview_chars = cls.body_preview_chars
        probe_delay = _float_env("BEEPROBE_PROBE_DELAY", cls.probe_delay)
        return cls(
            host=os.getenv("BEEPROBE_HOST", cls.host).strip() or cls.host,
            timeout=_float_env("BEEPROBE_HTTP_TIMEOUT", cls.timeout),
            probe_delay=max(0.0, probe_delay),
            user_agent=os.getenv("BEEPROBE_USER_AGENT", cls.user_agent),
            verify_ssl=_bool_env("BEEPROBE_HTTP_VERIFY_SSL", cls.verify_ssl),
            allow_redirects=_bool_env("BEEPROBE_HTTP_REDIRECTS", cls.allow_redirects),
            body_preview_chars=preview_chars,
            max_body_bytes=max_body_bytes,
            count_any_2xx=_bool_env("BEEPROBE_COUNT_ANY_2XX", cls.count_any_2xx),
            case_insensitive_hints=_bool_env("BEEPROBE_CASE_INSENSITIVE_HINTS", cls.case_insensitive_hints),
        )


@dataclass
class GovernorSettings:
    """Memory-pressure thresholds for the cache governor."""

    soft_ratio: float = 0.75
    aggressive_ratio: float = 0.80
    max_bytes: int | None = None
    gc_hint: bool = True

    @classmethod
    def from_env(cls) -> "GovernorSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            soft_ratio=_float_env("BEEPROBE_SOFT_RATIO", cls.soft_ratio),
            aggressive_ratio=_float_env("BEEPROBE_AGGRESSIVE_RATIO", cls.aggressive_ratio),
            max_bytes=_optional_int_env("BEEPROBE_MAX_MEMORY_BYTES", cls.max_bytes),
            gc_hint=_bool_env("BEEPROBE_GC_HINT", cls.gc_hint),
        )


def load_probe_settings() -> ProbeSettings:
    """Load probe settings from environment with sensible defaults."""
    return ProbeSettings.from_env()


def load_governor_settings() -> GovernorSettings:
    """Load governor settings from environment with sensible defaults."""
    return GovernorSettings.from_env()
