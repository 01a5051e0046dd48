"""nginx access/error log parsers."""

from __future__ import annotations

from ..models import JsonParser, RegexParser
from .base import TechnologyRegistry, exclude, on_log_key, stamp_log_source

TECHNOLOGY = "nginx"

PARSERS = (
    RegexParser(
        name="nginx_access",
        regex=(
            r"^(?<remote>[^ ]*) (?<host>[^ ]*) (?<user>[^ ]*) \[(?<time>[^\]]*)\] "
            r'"(?<method>\S+)(?: +(?<path>[^\"]*?)(?: +\S*)?)?" (?<code>[^ ]*) (?<size>[^ ]*)'
            r'(?: "(?<referer>[^\"]*)" "(?<agent>[^\"]*)")'
        ),
        time_key="time",
        time_format="%d/%b/%Y:%H:%M:%S %z",
        types="code:integer size:integer",
        filter=on_log_key(),
    ),
    RegexParser(
        name="nginx_error",
        regex=(
            r"^(?<time>\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}) \[(?<level>\w+)\] "
            r"(?<pid>\d+)#(?<tid>\d+): (?<message>.*)$"
        ),
        time_key="time",
        time_format="%Y/%m/%d %H:%M:%S",
        filter=on_log_key(),
    ),
    # log_format escape=json with "time_local":"$time_local"
    JsonParser(
        name="nginx_json",
        time_key="time_local",
        time_format="%d/%b/%Y:%H:%M:%S %z",
        time_keep=True,
        filter=on_log_key(),
    ),
)

FILTERS = (
    exclude(r'"(GET|HEAD) /(health|healthz|healthcheck|ping|status)[^"]*"'),
    exclude(r"ELB-HealthChecker"),
    exclude(r"kube-probe"),
    stamp_log_source(TECHNOLOGY),
)

REGISTRY = TechnologyRegistry(technology=TECHNOLOGY, parsers=PARSERS, filters=FILTERS)
