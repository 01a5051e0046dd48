"""Configuration errors raised before any output is produced.

Every error names the rule that failed (`code`), where in the input it failed
(`location`, e.g. ``custom_filters[2]``) and the offending value.
"""

from __future__ import annotations

from typing import Any


class LogConfigError(ValueError):
    """Base class for invalid log pipeline configuration."""

    code = "invalid_config"

    def __init__(self, message: str, *, location: str | None = None, value: Any = None) -> None:
        self.location = location
        self.value = value
        prefix = f"{location}: " if location else ""
        super().__init__(f"{prefix}{message}")

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "location": self.location, "message": str(self)}


class UnsupportedTechnology(LogConfigError):
    """A log source names a technology without a registry."""

    code = "unsupported_technology"


class DuplicateLogSource(LogConfigError):
    """Two log sources share the same (technology, container) pair."""

    code = "duplicate_log_source"


class InvalidParserFormat(LogConfigError):
    """A custom parser format is not json, regex, ltsv or logfmt."""

    code = "invalid_parser_format"


class MissingRegexPattern(LogConfigError):
    """A regex-format parser has no `regex`."""

    code = "missing_regex_pattern"


class MissingFilterKeyName(LogConfigError):
    """A parser `filter` block has no `key_name`."""

    code = "missing_filter_key_name"


class MissingParserFilterFields(LogConfigError):
    """A `parser` filter lacks `parser` or `key_name`."""

    code = "missing_parser_filter_fields"


class MissingNestOperation(LogConfigError):
    """A `nest` filter has no `operation`."""

    code = "missing_nest_operation"


class DuplicateParserName(LogConfigError):
    """Two custom parsers share a name."""

    code = "duplicate_parser_name"


class MalformedConfigEntry(LogConfigError):
    """An entry does not fit the parser/filter/log source schema."""

    code = "malformed_entry"
