# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import socket

import httpx
import pytest

from beeprobe import config
from beeprobe.config import DEFAULT_USER_AGENT
from beeprobe.errors import DiagnosticCategory, categorize_exception, category_hint, classify


def test_probe_settings_defaults():
    settings = config.ProbeSettings()
    assert settings.timeout == 10.0
    assert settings.probe_delay == 1.0
    assert settings.body_preview_chars == 100
    assert settings.user_agent == "BeeTagged-Android-Test/1.0"
    assert settings.count_any_2xx is False


def test_probe_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("BEEPROBE_HOST", "example.test")
    monkeypatch.setenv("BEEPROBE_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("BEEPROBE_PROBE_DELAY", "0.25")
    monkeypatch.setenv("BEEPROBE_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("BEEPROBE_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("BEEPROBE_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("BEEPROBE_PREVIEW_CHARS", "20")
    monkeypatch.setenv("BEEPROBE_COUNT_ANY_2XX", "yes")
    monkeypatch.setenv("BEEPROBE_CASE_INSENSITIVE_HINTS", "on")

    settings = config.load_probe_settings()

    assert settings.host == "example.test"
    assert settings.timeout == 5.5
    assert settings.probe_delay == 0.25
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.verify_ssl is False
    assert settings.allow_redirects is False
    assert settings.body_preview_chars == 20
    assert settings.count_any_2xx is True
    assert settings.case_insensitive_hints is True


def test_probe_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("BEEPROBE_HTTP_TIMEOUT", "not-a-number")
    monkeypatch.setenv("BEEPROBE_PROBE_DELAY", "-3")
    monkeypatch.setenv("BEEPROBE_PREVIEW_CHARS", "0")
    monkeypatch.setenv("BEEPROBE_HTTP_MAX_BODY_BYTES", "ten")
    monkeypatch.setenv("BEEPROBE_HOST", "   ")

    settings = config.load_probe_settings()

    assert settings.timeout == config.ProbeSettings.timeout
    assert settings.probe_delay == 0.0
    assert settings.body_preview_chars == config.ProbeSettings.body_preview_chars
    assert settings.max_body_bytes == config.ProbeSettings.max_body_bytes
    assert settings.host == config.DEFAULT_HOST
    assert settings.user_agent == DEFAULT_USER_AGENT


def test_governor_settings_env(monkeypatch):
    monkeypatch.setenv("BEEPROBE_SOFT_RATIO", "0.6")
    monkeypatch.setenv("BEEPROBE_AGGRESSIVE_RATIO", "0.9")
    monkeypatch.setenv("BEEPROBE_MAX_MEMORY_BYTES", "1024")
    monkeypatch.setenv("BEEPROBE_GC_HINT", "0")

    settings = config.load_governor_settings()

    assert settings.soft_ratio == 0.6
    assert settings.aggressive_ratio == 0.9
    assert settings.max_bytes == 1024
    assert settings.gc_hint is False

    monkeypatch.setenv("BEEPROBE_MAX_MEMORY_BYTES", "-1")
    assert config.load_governor_settings().max_bytes is None


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("HTTP 502 Bad Gateway", DiagnosticCategory.GATEWAY_ERROR),
        ("timeout", DiagnosticCategory.TIMEOUT),
        ("[SSL: CERTIFICATE_VERIFY_FAILED] certificate verify failed", DiagnosticCategory.PROTOCOL_MISMATCH),
        ("[Errno 111] Connection refused", DiagnosticCategory.CONNECTION_REFUSED),
        ("Name or service not known", DiagnosticCategory.UNCLASSIFIED),
        ("", DiagnosticCategory.UNCLASSIFIED),
        (None, DiagnosticCategory.UNCLASSIFIED),
    ],
)
def test_classify_rules(message, expected):
    assert classify(message) == expected


def test_classify_first_rule_wins():
    assert classify("timeout waiting for 502 upstream") == DiagnosticCategory.GATEWAY_ERROR
    assert classify("SSL handshake timeout") == DiagnosticCategory.TIMEOUT
    assert classify("SSL connection refused") == DiagnosticCategory.PROTOCOL_MISMATCH


def test_classify_is_case_sensitive_by_default():
    assert classify("Read Timeout") == DiagnosticCategory.UNCLASSIFIED
    assert classify("ssl error") == DiagnosticCategory.UNCLASSIFIED
    assert classify("Read Timeout", case_sensitive=False) == DiagnosticCategory.TIMEOUT
    assert classify("ssl error", case_sensitive=False) == DiagnosticCategory.PROTOCOL_MISMATCH


def test_category_hints():
    assert category_hint(DiagnosticCategory.CONNECTION_REFUSED) == "Connection Refused: Port may be closed"
    assert category_hint(DiagnosticCategory.GATEWAY_ERROR) == "Bad Gateway: Server routing issue"
    assert category_hint(DiagnosticCategory.UNCLASSIFIED) == ""
    assert category_hint(None) == ""


def test_categorize_exception_labels():
    assert categorize_exception(httpx.ReadTimeout("slow")) == "timeout"
    assert categorize_exception(httpx.ConnectError("[SSL: WRONG_VERSION_NUMBER]")) == "ssl"
    assert categorize_exception(httpx.ConnectError("[Errno 111] Connection refused")) == "connection_refused"
    assert categorize_exception(socket.gaierror("no such host")) == "dns"
    assert categorize_exception(httpx.ReadError("reset")) == "connection"
    assert categorize_exception(ValueError("odd")) == "ValueError"
