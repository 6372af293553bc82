# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""beeprobe CLI."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..cache.governor import select_action
from ..cache.sampler import ProcessMemorySampler
from ..config import GovernorSettings, ProbeSettings, load_governor_settings, load_probe_settings
from ..http import create_default_http_client
from ..log import setup_logging
from ..models import EvictionPolicy, MemorySample, TriggerContext
from ..probe.report import STARTING_MESSAGE
from ..runtime import BeeProbe


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="beeprobe connectivity diagnostics (scheme/port variants of one host)")
    parser.add_argument("host", nargs="?", help="Host to probe (defaults to BEEPROBE_HOST)")
    parser.add_argument(
        "--url",
        action="append",
        dest="urls",
        metavar="URL",
        help="Probe this exact URL instead of the generated variants (repeatable)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of the live text report",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument(
        "--any-2xx",
        action="store_true",
        help="Count any 2xx response as a successful connection in the summary",
    )
    parser.add_argument("--delay", type=float, help="Pause between probes in seconds")
    parser.add_argument("--timeout", type=float, help="Connect/read/write timeout in seconds")
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Also sample process memory and show the cache governor's decision per trigger",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log probe activity")
    return parser


def _apply_overrides(settings: ProbeSettings, args: argparse.Namespace) -> ProbeSettings:
    if args.host:
        settings.host = args.host
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    if args.any_2xx:
        settings.count_any_2xx = True
    if args.delay is not None:
        settings.probe_delay = max(0.0, args.delay)
    if args.timeout is not None and args.timeout > 0:
        settings.timeout = args.timeout
    return settings


def _memory_report(settings: GovernorSettings) -> dict[str, Any]:
    sample: MemorySample = ProcessMemorySampler(settings.max_bytes).sample()
    policy = EvictionPolicy.default(settings.soft_ratio, settings.aggressive_ratio)
    decisions = {}
    for trigger in TriggerContext:
        action = select_action(policy, sample, trigger)
        decisions[trigger.value] = action.value if action else None
    return {
        "used_bytes": sample.used_bytes,
        "max_bytes": sample.max_bytes,
        "ratio": round(sample.ratio, 4),
        "decisions": decisions,
    }


def _print_memory(report: dict[str, Any]) -> None:
    print("\n=== MEMORY ===")
    print(f"Used: {report['used_bytes']} / {report['max_bytes']} bytes ({report['ratio'] * 100:.1f}%)")
    for trigger, action in report["decisions"].items():
        print(f"{trigger}: {action or 'no action'}")


class _ProgressPrinter:
    """Prints only what each snapshot adds to the previous one."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.shown = 0

    def __call__(self, text: str) -> None:
        self.stream.write(text[self.shown :])
        self.stream.flush()
        self.shown = len(text)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging("INFO" if args.verbose else None)

    settings = _apply_overrides(load_probe_settings(), args)
    governor_settings = load_governor_settings()
    http_client = create_default_http_client(settings)

    printer = _ProgressPrinter()
    with BeeProbe(http_client, probe_settings=settings, governor_settings=governor_settings) as probe:
        candidates = probe.candidates(args.urls)
        if args.json:
            task = probe.probe_task()
        else:
            sys.stdout.write(STARTING_MESSAGE)
            task = probe.probe_task(on_progress=printer, on_complete=printer)
        session = task.start(candidates).result()

    memory = _memory_report(governor_settings) if args.memory else None

    if args.json:
        payload = session.to_dict()
        if memory is not None:
            payload["memory"] = memory
        json.dump(payload, sys.stdout, indent=2, sort_keys=True)
        sys.stdout.write("\n")
    elif memory is not None:
        _print_memory(memory)

    return 0 if session.successful_endpoints else 1


if __name__ == "__main__":
    raise SystemExit(main())
