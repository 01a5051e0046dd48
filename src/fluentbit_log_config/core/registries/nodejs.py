"""Node.js structured loggers (pino, winston, bunyan)."""

from __future__ import annotations

from ..models import JsonParser
from .base import TechnologyRegistry, exclude, on_log_key, stamp_log_source

TECHNOLOGY = "nodejs"

PARSERS = (
    # pino: {"time": 1760861524000, ...}
    JsonParser(
        name="nodejs_json_epoch",
        time_key="time",
        time_format="%s",
        time_keep=True,
        filter=on_log_key(),
    ),
    # Date.prototype.toISOString()
    JsonParser(
        name="nodejs_json_iso8601_utc",
        time_key="timestamp",
        time_format="%Y-%m-%dT%H:%M:%S.%LZ",
        time_keep=True,
        filter=on_log_key(),
    ),
    JsonParser(
        name="nodejs_json_iso8601_tz",
        time_key="timestamp",
        time_format="%Y-%m-%dT%H:%M:%S.%L%z",
        time_keep=True,
        filter=on_log_key(),
    ),
)

FILTERS = (
    exclude(r'"(GET|HEAD) /(health|healthz|ping)[^"]*"'),
    stamp_log_source(TECHNOLOGY),
)

REGISTRY = TechnologyRegistry(technology=TECHNOLOGY, parsers=PARSERS, filters=FILTERS)
