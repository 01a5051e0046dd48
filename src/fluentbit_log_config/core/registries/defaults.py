"""JSON datetime parsers included in every configuration.

Applications log their timestamp under different keys and in different
ISO-8601 shapes; without a matching parser Fluent Bit reports
"invalid time format" and keeps the ingestion time instead.
"""

from __future__ import annotations

from ..models import Filter, JsonParser, Parser
from .base import on_log_key

TIME_KEYS = ("time", "datetime", "time_local")

# (suffix, strptime format) in the order Fluent Bit should try them.
TIME_ENCODINGS = (
    ("iso8601_tz_colon", "%Y-%m-%dT%H:%M:%S%:z"),
    ("iso8601_tz", "%Y-%m-%dT%H:%M:%S%z"),
    ("iso8601_utc", "%Y-%m-%dT%H:%M:%SZ"),
    ("iso8601_micro", "%Y-%m-%dT%H:%M:%S.%L%z"),
)

DEFAULT_PARSERS: tuple[Parser, ...] = tuple(
    JsonParser(
        name=f"json_{key}_{suffix}",
        time_key=key,
        time_format=fmt,
        time_keep=True,
        filter=on_log_key(),
    )
    for key in TIME_KEYS
    for suffix, fmt in TIME_ENCODINGS
)

DEFAULT_FILTERS: tuple[Filter, ...] = ()
