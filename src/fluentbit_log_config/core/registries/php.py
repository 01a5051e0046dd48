"""PHP (php-fpm / Laravel / Monolog) parsers and noise filters."""

from __future__ import annotations

from ..models import JsonParser, RegexParser
from .base import TechnologyRegistry, exclude, on_log_key, stamp_log_source

TECHNOLOGY = "php"

# Monolog's JsonFormatter writes "datetime" in one of these shapes depending
# on the configured date format.
_MONOLOG_FORMATS = (
    ("php_monolog_tz_colon", "%Y-%m-%dT%H:%M:%S%:z"),
    ("php_monolog_tz", "%Y-%m-%dT%H:%M:%S%z"),
    ("php_monolog_utc", "%Y-%m-%dT%H:%M:%SZ"),
    ("php_monolog_micro", "%Y-%m-%dT%H:%M:%S.%L%z"),
)

PARSERS = tuple(
    JsonParser(
        name=name,
        time_key="datetime",
        time_format=fmt,
        time_keep=True,
        filter=on_log_key(),
    )
    for name, fmt in _MONOLOG_FORMATS
) + (
    # [19-Oct-2026 08:12:04 UTC] PHP Fatal error:  Uncaught Exception ...
    RegexParser(
        name="php_error_log",
        regex=r"^\[(?<time>[^\]]+)\] PHP (?<level>[A-Za-z ]+?):\s+(?<message>.*)$",
        time_key="time",
        time_format="%d-%b-%Y %H:%M:%S %Z",
        time_keep=True,
        filter=on_log_key(),
    ),
)

FILTERS = (
    # Load balancer and orchestrator health checks
    exclude(r'"(GET|HEAD) /(health|healthz|healthcheck|ping|status)[^"]*"'),
    exclude(r"ELB-HealthChecker"),
    exclude(r"kube-probe"),
    # php-fpm status chatter
    exclude(r"NOTICE: (fpm is running|ready to handle connections|systemd monitor)"),
    exclude(r'"(GET|HEAD) /fpm-(ping|status)'),
    # Deprecations
    exclude(r"PHP Deprecated:"),
    exclude(r"\bDeprecated: "),
    # Laravel scheduler
    exclude(r"Running scheduled command"),
    exclude(r"No scheduled commands are ready to run"),
    # Laravel queue worker
    exclude(r"\[[^\]]+\]\[[^\]]+\] (Processing|Processed):"),
    stamp_log_source(TECHNOLOGY),
)

REGISTRY = TechnologyRegistry(technology=TECHNOLOGY, parsers=PARSERS, filters=FILTERS)
