"""Datadog agent sidecar logs."""

from __future__ import annotations

from ..models import RegexParser
from .base import TechnologyRegistry, exclude, on_log_key, stamp_log_source

TECHNOLOGY = "datadog"

PARSERS = (
    # 2026-10-19 08:12:04 UTC | CORE | INFO | (pkg/collector/runner.go:123 in work) | message
    RegexParser(
        name="datadog_agent",
        regex=(
            r"^(?<time>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} [A-Z]+) \| (?<component>[A-Z]+) \| "
            r"(?<level>[A-Z]+) \| \((?<caller>[^)]*)\) \| (?<message>.*)$"
        ),
        time_key="time",
        time_format="%Y-%m-%d %H:%M:%S %Z",
        time_keep=True,
        filter=on_log_key(),
    ),
)

FILTERS = (
    exclude(r"\| (DEBUG|TRACE) \|"),
    stamp_log_source(TECHNOLOGY),
)

REGISTRY = TechnologyRegistry(technology=TECHNOLOGY, parsers=PARSERS, filters=FILTERS)
